# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Moon age, rise and set for a date and place.

Bundles the two solvers into the record handed to the outer layers:
validated inputs, an age in days, and rise/set instants as timezone-aware
datetimes in the deployment zone. A missing crossing is reported through
its HorizonCondition rather than as an error.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Any

from hoshiyomi.domain.coordinate_frames import GeoPosition
from hoshiyomi.domain.epoch import validate_civil_date
from hoshiyomi.domain.errors import (
    CircumpolarConditionError,
    HorizonCondition,
    InvalidInputError,
)
from hoshiyomi.domain.moon_age import moon_age
from hoshiyomi.domain.moon_rise_set import RiseSetMode, find_rise_set
from hoshiyomi.domain.settings import EphemerisSettings, DEFAULT_SETTINGS


@dataclass(frozen=True)
class MoonInfo:
    """Moon age and horizon crossings for one civil date."""
    date: date
    position: GeoPosition
    age_days: float
    moon_rise: datetime | None
    moon_set: datetime | None
    moon_rise_condition: HorizonCondition | None = None
    moon_set_condition: HorizonCondition | None = None


def validate_position(position: GeoPosition) -> GeoPosition:
    """Reject non-finite or out-of-range coordinates."""
    lat = position.latitude_deg
    lon = position.longitude_deg
    if not (isinstance(lat, (int, float)) and math.isfinite(lat) and -90.0 <= lat <= 90.0):
        raise InvalidInputError(f"latitude must be within [-90, 90] degrees, got {lat!r}")
    if not (isinstance(lon, (int, float)) and math.isfinite(lon) and -180.0 <= lon <= 180.0):
        raise InvalidInputError(f"longitude must be within [-180, 180] degrees, got {lon!r}")
    return position


def parse_date(text: str) -> date:
    """Parse a YYYY-MM-DD civil date."""
    try:
        day = date.fromisoformat(text.strip())
    except (AttributeError, ValueError):
        raise InvalidInputError(f"invalid date {text!r}, expected YYYY-MM-DD") from None
    return validate_civil_date(day)


def _crossing(
    day: date,
    position: GeoPosition,
    mode: RiseSetMode,
    settings: EphemerisSettings,
) -> tuple[datetime | None, HorizonCondition | None]:
    try:
        event = find_rise_set(day, position, mode, settings)
    except CircumpolarConditionError as e:
        return None, e.condition
    return event.wall_clock(day).replace(tzinfo=settings.tzinfo), None


def compute_moon_info(
    day: date,
    position: GeoPosition,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> MoonInfo:
    """
    Compute the Moon age, rise and set for a civil date.

    Args:
        day: Civil date in the deployment zone.
        position: Observer location.
        settings: Deployment settings.

    Returns:
        MoonInfo with aware rise/set datetimes, or None plus the
        HorizonCondition where the Moon does not cross the horizon.

    Raises:
        InvalidInputError: On out-of-range coordinates.
        NonConvergenceError: If a solver exhausts its iteration budget.
    """
    validate_position(position)

    age = moon_age(day, settings)
    rise, rise_condition = _crossing(day, position, RiseSetMode.RISE, settings)
    set_, set_condition = _crossing(day, position, RiseSetMode.SET, settings)

    return MoonInfo(
        date=day,
        position=position,
        age_days=age,
        moon_rise=rise,
        moon_set=set_,
        moon_rise_condition=rise_condition,
        moon_set_condition=set_condition,
    )


def moon_info_table(
    start: date,
    end: date,
    position: GeoPosition,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> list[MoonInfo]:
    """MoonInfo for every date from `start` to `end` inclusive."""
    if end < start:
        raise InvalidInputError(
            f"end date {end.isoformat()} precedes start date {start.isoformat()}"
        )
    validate_civil_date(start)
    validate_civil_date(end)
    validate_position(position)
    days = (end - start).days + 1
    return [
        compute_moon_info(start + timedelta(days=i), position, settings)
        for i in range(days)
    ]


def _timestamp_or_none(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def _condition_or_none(value: HorizonCondition | None) -> str | None:
    return value.value if value is not None else None


def moon_info_to_dict(info: MoonInfo) -> dict[str, Any]:
    """JSON-ready representation of a MoonInfo."""
    return {
        "date": info.date.isoformat(),
        "latitude": info.position.latitude_deg,
        "longitude": info.position.longitude_deg,
        "moon_age": round(info.age_days, 6),
        "moon_rise": _timestamp_or_none(info.moon_rise),
        "moon_set": _timestamp_or_none(info.moon_set),
        "moon_rise_condition": _condition_or_none(info.moon_rise_condition),
        "moon_set_condition": _condition_or_none(info.moon_set_condition),
    }
