# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Moonrise and moonset.

Fixed-point search for the day fraction d (from local midnight) at which
the Moon's altitude equals −R + π, the horizon depression corrected by
the lunar parallax. Starting from local noon (d = 0.5), each step:

    cos H₀ = (sin k − sin δ · sin φ) / (cos δ · cos φ),   k = −R + π
    H₀     = ∓acos(cos H₀)                 (− for rise, + for set)
    H      = θ₀ + 360.9856474·d + λ − α   (current hour angle)
    Δd     = normalize_180(H₀ − H) / 347.8

until |Δd| falls below the threshold. When |cos H₀| > 1 there is no
crossing and the Moon stays above or below the horizon all day.

The returned fraction is not clamped: on the one day per lunation when
the Moon does not rise (or set) the search converges just outside [0, 1).
"""
import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import Enum

from hoshiyomi.domain.angles import normalize_180
from hoshiyomi.domain.coordinate_frames import (
    GeoPosition,
    ecliptic_to_equatorial,
    obliquity_deg,
    sidereal_time_deg,
)
from hoshiyomi.domain.epoch import (
    epoch_at_day_fraction,
    epoch_from_civil,
    local_midnight,
    validate_civil_date,
)
from hoshiyomi.domain.errors import (
    CircumpolarConditionError,
    HorizonCondition,
    NonConvergenceError,
)
from hoshiyomi.domain.lunar_series import moon_ecliptic, moon_parallax
from hoshiyomi.domain.settings import (
    EphemerisSettings,
    DEFAULT_SETTINGS,
    HORIZON_RATE_DEG_PER_DAY,
    SIDEREAL_RATE_DEG_PER_DAY,
)

logger = logging.getLogger(__name__)

_INITIAL_DAY_FRACTION = 0.5
_POLE_EPSILON = 1e-12


class RiseSetMode(Enum):
    """Which root of the horizon equation to follow."""
    RISE = "rise"
    SET = "set"

    @property
    def hour_angle_sign(self) -> float:
        """Rising happens east of the meridian (negative hour angle)."""
        return -1.0 if self is RiseSetMode.RISE else 1.0


@dataclass(frozen=True)
class RiseSetEvent:
    """A converged horizon crossing."""
    mode: RiseSetMode
    day_fraction: float  # days from local midnight
    iterations: int

    @property
    def occurs_on_date(self) -> bool:
        """True when the crossing falls within the requested civil day."""
        return 0.0 <= self.day_fraction < 1.0

    def wall_clock(self, day: date) -> datetime:
        """Naive civil wall-clock time of the crossing."""
        return local_midnight(day) + timedelta(days=self.day_fraction)


def horizon_hour_angle_cos(
    declination_deg: float,
    latitude_deg: float,
    altitude_deg: float,
) -> float:
    """
    Cosine of the hour angle at which a body reaches `altitude_deg`.

    Raises:
        CircumpolarConditionError: If no hour angle reaches that altitude,
            including the degenerate pole case cos δ · cos φ ≈ 0.
    """
    dec = math.radians(declination_deg)
    lat = math.radians(latitude_deg)
    numerator = math.sin(math.radians(altitude_deg)) - math.sin(dec) * math.sin(lat)
    denominator = math.cos(dec) * math.cos(lat)

    if abs(denominator) < _POLE_EPSILON:
        # Altitude is constant over the day; only its sign relative to k matters.
        cos_h = -math.inf if numerator < 0.0 else math.inf
    else:
        cos_h = numerator / denominator

    if cos_h > 1.0:
        raise CircumpolarConditionError(HorizonCondition.ALWAYS_BELOW, cos_h)
    if cos_h < -1.0:
        raise CircumpolarConditionError(HorizonCondition.ALWAYS_ABOVE, cos_h)
    return cos_h


def find_rise_set(
    day: date,
    position: GeoPosition,
    mode: RiseSetMode,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> RiseSetEvent:
    """
    Solve for the moonrise or moonset day fraction on a civil date.

    Args:
        day: Civil date in the deployment zone.
        position: Observer latitude/longitude in degrees.
        mode: RiseSetMode.RISE or RiseSetMode.SET.
        settings: Deployment settings.

    Returns:
        RiseSetEvent with the day fraction from local midnight.

    Raises:
        InvalidInputError: If `day` lies too close to the calendar ends.
        CircumpolarConditionError: If the Moon does not cross the horizon.
        NonConvergenceError: If the iteration budget is exhausted.
    """
    validate_civil_date(day)
    midnight = epoch_from_civil(local_midnight(day), settings)
    sidereal_midnight = sidereal_time_deg(midnight, settings)
    obliquity = obliquity_deg(midnight)

    d = _INITIAL_DAY_FRACTION
    delta_d = 0.0

    for iteration in range(1, settings.max_iterations + 1):
        d += delta_d
        epoch = epoch_at_day_fraction(day, d, settings)

        parallax = moon_parallax(epoch)
        equatorial = ecliptic_to_equatorial(moon_ecliptic(epoch), obliquity)

        k = -settings.horizon_depression_deg + parallax
        cos_h = horizon_hour_angle_cos(equatorial.declination_deg, position.latitude_deg, k)
        target_hour_angle = math.degrees(math.acos(cos_h)) * mode.hour_angle_sign

        hour_angle = (
            sidereal_midnight
            + SIDEREAL_RATE_DEG_PER_DAY * d
            + position.longitude_deg
            - equatorial.right_ascension_deg
        )
        delta_d = normalize_180(target_hour_angle - hour_angle) / HORIZON_RATE_DEG_PER_DAY

        if abs(delta_d) < settings.rise_set_threshold_days:
            logger.debug(
                "Moon%s for %s converged after %d iterations: d=%.6f",
                mode.value, day.isoformat(), iteration, d + delta_d,
            )
            return RiseSetEvent(mode=mode, day_fraction=d + delta_d, iterations=iteration)

    raise NonConvergenceError(f"moon{mode.value} search", settings.max_iterations, delta_d)


def moon_rise_set(
    day: date,
    position: GeoPosition,
    mode: RiseSetMode,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> float:
    """Day fraction from local midnight of the moonrise or moonset."""
    return find_rise_set(day, position, mode, settings).day_fraction
