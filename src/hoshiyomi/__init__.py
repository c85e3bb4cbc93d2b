# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Hoshiyomi

Moon age, moonrise and moonset from a reduced analytical ephemeris of the
Sun and the Moon. Includes the J2000 day-count epoch, the lunar and solar
series, ecliptic→equatorial conversion, the new-Moon and horizon-crossing
solvers, a CSV table exporter and a JSON HTTP service.
"""

from hoshiyomi.domain.angles import normalize_180, normalize_360
from hoshiyomi.domain.settings import (
    DEFAULT_SETTINGS,
    EphemerisSettings,
)
from hoshiyomi.domain.errors import (
    CircumpolarConditionError,
    HorizonCondition,
    InvalidInputError,
    MoonCalculationError,
    NonConvergenceError,
)
from hoshiyomi.domain.epoch import (
    Epoch,
    epoch_from_civil,
    j2000_days,
    validate_civil_date,
)
from hoshiyomi.domain.coordinate_frames import (
    EclipticCoordinate,
    EquatorialCoordinate,
    GeoPosition,
    ecliptic_to_equatorial,
    obliquity_deg,
    sidereal_time_deg,
)
from hoshiyomi.domain.lunar_series import (
    moon_ecliptic,
    moon_latitude,
    moon_longitude,
    moon_parallax,
    sun_longitude,
)
from hoshiyomi.domain.moon_age import NewMoonSearch, find_new_moon, moon_age
from hoshiyomi.domain.moon_rise_set import (
    RiseSetEvent,
    RiseSetMode,
    find_rise_set,
    moon_rise_set,
)
from hoshiyomi.domain.moon_info import (
    MoonInfo,
    compute_moon_info,
    moon_info_table,
)

__version__ = "0.1.0"

__all__ = [
    "CircumpolarConditionError",
    "DEFAULT_SETTINGS",
    "EclipticCoordinate",
    "EphemerisSettings",
    "Epoch",
    "EquatorialCoordinate",
    "GeoPosition",
    "HorizonCondition",
    "InvalidInputError",
    "MoonCalculationError",
    "MoonInfo",
    "NewMoonSearch",
    "NonConvergenceError",
    "RiseSetEvent",
    "RiseSetMode",
    "compute_moon_info",
    "ecliptic_to_equatorial",
    "epoch_from_civil",
    "find_new_moon",
    "find_rise_set",
    "j2000_days",
    "moon_age",
    "moon_ecliptic",
    "moon_info_table",
    "moon_latitude",
    "moon_longitude",
    "moon_parallax",
    "moon_rise_set",
    "normalize_180",
    "normalize_360",
    "obliquity_deg",
    "sidereal_time_deg",
    "sun_longitude",
    "validate_civil_date",
]
