# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Civil wall-clock time to J2000.0 day count.

The day count is measured from J2000.0 (2000-01-01 12:00 dynamical time)
using a March-based year so the leap day falls at the end of the count
year, the same convention as the Julian day. An empirical Earth-rotation
correction stands in for ΔT; it drifts for years far from 1990–2020 and
is kept as an accuracy ceiling of the model.

No external dependencies — only stdlib math/dataclasses/datetime.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from hoshiyomi.domain.errors import InvalidInputError
from hoshiyomi.domain.settings import EphemerisSettings, DEFAULT_SETTINGS

_SECONDS_PER_DAY = 86400.0
_DAYS_PER_JULIAN_YEAR = 365.25

# The solvers step up to about two lunations away from the requested date.
_CALENDAR_MARGIN = timedelta(days=100)
MIN_SUPPORTED_DATE = date.min + _CALENDAR_MARGIN
MAX_SUPPORTED_DATE = date.max - _CALENDAR_MARGIN


@dataclass(frozen=True)
class Epoch:
    """Day count since J2000.0, the sole independent variable of the series."""
    days: float

    @property
    def years(self) -> float:
        """Julian years since J2000.0 (the series time variable t)."""
        return self.days / _DAYS_PER_JULIAN_YEAR

    def plus_days(self, days: float) -> "Epoch":
        return Epoch(self.days + days)


def rotation_correction_days(year: int) -> float:
    """Accumulated Earth-rotation lag (ΔT approximation) in days."""
    return (57.0 + 0.8 * (year - 1990)) / _SECONDS_PER_DAY


def validate_civil_date(day: date) -> date:
    """Reject dates too close to the ends of the datetime calendar."""
    if not MIN_SUPPORTED_DATE <= day <= MAX_SUPPORTED_DATE:
        raise InvalidInputError(
            f"date {day.isoformat()} outside supported range "
            f"{MIN_SUPPORTED_DATE.isoformat()} .. {MAX_SUPPORTED_DATE.isoformat()}"
        )
    return day


def to_civil_naive(dt: datetime, settings: EphemerisSettings = DEFAULT_SETTINGS) -> datetime:
    """Express a datetime as naive wall-clock time in the civil zone.

    Naive input is taken to already be civil wall-clock time.
    """
    if dt.tzinfo is None:
        return dt
    return dt.astimezone(settings.tzinfo).replace(tzinfo=None)


def civil_date(dt: datetime, settings: EphemerisSettings = DEFAULT_SETTINGS) -> date:
    """Civil calendar date of an instant in the deployment zone."""
    return to_civil_naive(dt, settings).date()


def local_midnight(day: date) -> datetime:
    """Naive wall-clock 00:00 of a civil date."""
    return datetime.combine(day, time(0, 0, 0))


def local_noon(day: date) -> datetime:
    """Naive wall-clock 12:00 of a civil date."""
    return datetime.combine(day, time(12, 0, 0))


def j2000_days(dt: datetime, settings: EphemerisSettings = DEFAULT_SETTINGS) -> float:
    """
    Days since J2000.0 for a civil wall-clock datetime.

    Formula:
        365·Y + 30·M + D − 33.5 − offset/24 + ⌊3(M+1)/5⌋ + ⌊Y/4⌋ + f + ΔT
    where Y = year − 2000 and M = month, with January and February counted
    as months 13 and 14 of the previous year, f the elapsed fraction of the
    day and ΔT the rotation correction for the calendar year.

    Args:
        dt: Civil wall-clock time (naive), or an aware datetime which is
            first converted into the civil zone.
        settings: Deployment settings providing the zone offset.

    Returns:
        Day count since J2000.0.
    """
    dt = to_civil_naive(dt, settings)

    year = dt.year - 2000
    month = dt.month
    if month <= 2:
        month += 12
        year -= 1

    fraction = (
        dt.hour * 3600.0
        + dt.minute * 60.0
        + dt.second
        + dt.microsecond / 1_000_000.0
    ) / _SECONDS_PER_DAY

    return (
        365.0 * year
        + 30.0 * month
        + dt.day
        - 33.5
        - settings.zone_offset_hours / 24.0
        + math.floor(3.0 * (month + 1) / 5.0)
        + math.floor(year / 4.0)
        + fraction
        + rotation_correction_days(dt.year)
    )


def epoch_from_civil(dt: datetime, settings: EphemerisSettings = DEFAULT_SETTINGS) -> Epoch:
    """Epoch of a civil wall-clock datetime."""
    return Epoch(j2000_days(dt, settings))


def epoch_at_day_fraction(
    day: date,
    day_fraction: float,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> Epoch:
    """Epoch at local midnight of `day` plus a (possibly negative) day fraction."""
    return epoch_from_civil(local_midnight(day) + timedelta(days=day_fraction), settings)
