# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Coordinate frame conversions.

Pure mathematical transformations between the ecliptic and equatorial
frames, plus the local sidereal time used by the horizon solver.
No external dependencies — only stdlib math/dataclasses.

Reference frames:
    Ecliptic:   longitude/latitude on the plane of the Earth's orbit
    Equatorial: right ascension/declination on the celestial equator

The ecliptic→equatorial conversion is a rotation about the equinox axis by
the obliquity of the ecliptic, which drifts slowly with time.
"""
import math
from dataclasses import dataclass

from hoshiyomi.domain.angles import normalize_360
from hoshiyomi.domain.epoch import Epoch
from hoshiyomi.domain.settings import EphemerisSettings, DEFAULT_SETTINGS


@dataclass(frozen=True)
class GeoPosition:
    """Observer location on the Earth."""
    latitude_deg: float   # North positive
    longitude_deg: float  # East positive


@dataclass(frozen=True)
class EclipticCoordinate:
    """Ecliptic position: longitude in [0, 360), latitude in degrees."""
    longitude_deg: float
    latitude_deg: float


@dataclass(frozen=True)
class EquatorialCoordinate:
    """Equatorial position: right ascension in [0, 360), declination in [-90, 90]."""
    right_ascension_deg: float
    declination_deg: float


def obliquity_deg(epoch: Epoch) -> float:
    """Mean obliquity of the ecliptic in degrees."""
    return normalize_360(23.439291 - 0.000130042 * epoch.years)


def ecliptic_to_equatorial(
    ecliptic: EclipticCoordinate,
    obliquity: float,
) -> EquatorialCoordinate:
    """
    Rotate ecliptic coordinates into the equatorial frame.

    With λ, β the ecliptic longitude/latitude and ε the obliquity:
        u = cos β · cos λ
        v = −sin β · sin ε + cos β · sin λ · cos ε
        w =  sin β · cos ε + cos β · sin λ · sin ε
        α = atan2(v, u),  δ = atan(w / √(u² + v²))

    atan2 gives the same quadrant as atan(v/u) shifted by 180° when u < 0,
    and stays defined at u = 0.

    Args:
        ecliptic: Ecliptic longitude/latitude in degrees.
        obliquity: Obliquity of the ecliptic in degrees.

    Returns:
        EquatorialCoordinate with right ascension in [0, 360) and
        declination in [-90, 90].
    """
    lam = math.radians(ecliptic.longitude_deg)
    beta = math.radians(ecliptic.latitude_deg)
    eps = math.radians(obliquity)

    cos_beta = math.cos(beta)
    sin_beta = math.sin(beta)
    sin_lam = math.sin(lam)
    cos_eps = math.cos(eps)
    sin_eps = math.sin(eps)

    u = cos_beta * math.cos(lam)
    v = -sin_beta * sin_eps + cos_beta * sin_lam * cos_eps
    w = sin_beta * cos_eps + cos_beta * sin_lam * sin_eps

    right_ascension = normalize_360(math.degrees(math.atan2(v, u)))
    declination = math.degrees(math.atan2(w, math.sqrt(u * u + v * v)))

    return EquatorialCoordinate(
        right_ascension_deg=right_ascension,
        declination_deg=declination,
    )


def sidereal_time_deg(
    midnight: Epoch,
    settings: EphemerisSettings = DEFAULT_SETTINGS,
) -> float:
    """
    Local sidereal time reference at civil midnight, in degrees.

        θ = 100.4606 + 360.007700536·t + 0.00000003879·t² − 15·offset

    with t in Julian years since J2000.0. The value is not reduced; the
    rise/set balance normalizes the full hour-angle difference.

    Args:
        midnight: Epoch of local civil midnight of the query date.
        settings: Deployment settings providing the zone offset.
    """
    t = midnight.years
    return (
        100.4606
        + 360.007700536 * t
        + 0.00000003879 * t**2
        - 15.0 * settings.zone_offset_hours
    )
