# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Deployment settings for the lunar ephemeris.

The civil time-zone offset and the horizon depression are properties of a
deployment, not of the model, so they travel with every call instead of
living in module globals. Solver budgets and thresholds sit alongside.
"""
import math
from dataclasses import dataclass
from datetime import timedelta, timezone

# Standard horizon depression: refraction plus mean lunar semi-diameter.
STANDARD_HORIZON_DEPRESSION_DEG = 0.585556

# Mean elongation rate of the Moon relative to the Sun (deg/day).
NEW_MOON_RATE_DEG_PER_DAY = 12.1908

# Rate of change of the lunar hour angle (deg/day).
HORIZON_RATE_DEG_PER_DAY = 347.8

# Sidereal rotation of the Earth per solar day (deg/day).
SIDEREAL_RATE_DEG_PER_DAY = 360.9856474

_MAX_ZONE_OFFSET_HOURS = 14.0


@dataclass(frozen=True)
class EphemerisSettings:
    """Per-deployment configuration threaded through every computation.

    Attributes:
        zone_offset_hours: Fixed civil offset from UTC; local wall-clock
            values are interpreted at this offset. Default UTC+9.
        horizon_depression_deg: R, subtracted from the parallax to give
            the apparent altitude of a horizon crossing.
        max_iterations: Iteration budget for both solvers.
        age_threshold_deg: Elongation below which the new-Moon search stops.
        rise_set_threshold_days: Correction below which the rise/set
            search stops (5e-6 day is about 0.4 s).
        wrap_every_elongation: Wrap the elongation into [-180, 180] on every
            new-Moon iteration after the first instead of using the raw
            difference. Off by default.
    """
    zone_offset_hours: float = 9.0
    horizon_depression_deg: float = STANDARD_HORIZON_DEPRESSION_DEG
    max_iterations: int = 50
    age_threshold_deg: float = 0.05
    rise_set_threshold_days: float = 5e-6
    wrap_every_elongation: bool = False

    def __post_init__(self) -> None:
        if not math.isfinite(self.zone_offset_hours) or (
            abs(self.zone_offset_hours) > _MAX_ZONE_OFFSET_HOURS
        ):
            raise ValueError(
                f"zone_offset_hours must be within ±{_MAX_ZONE_OFFSET_HOURS:g}, "
                f"got {self.zone_offset_hours}"
            )
        if self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be positive, got {self.max_iterations}")
        if not self.age_threshold_deg > 0.0:
            raise ValueError(
                f"age_threshold_deg must be positive, got {self.age_threshold_deg}"
            )
        if not self.rise_set_threshold_days > 0.0:
            raise ValueError(
                f"rise_set_threshold_days must be positive, got {self.rise_set_threshold_days}"
            )

    @property
    def tzinfo(self) -> timezone:
        """Fixed-offset tzinfo for the civil zone."""
        return timezone(timedelta(hours=self.zone_offset_hours))


DEFAULT_SETTINGS = EphemerisSettings()
