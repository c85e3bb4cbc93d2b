# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Reduced analytical series for the Sun and the Moon.

Four closed-form series driven by t, the Julian years since J2000.0:

    Sun ecliptic longitude      280.4603 + 360.00769·t + Σ A·sin(φ + ω·t)
    Moon ecliptic longitude     218.3161 + 4812.67881·t + Σ A·sin(φ + ω·t)
    Moon ecliptic latitude      Σ A·sin(φ + ω·t)
    Moon horizontal parallax    0.9507 + Σ A·sin(φ + ω·t)

Each periodic table row is (A, φ, ω) in degrees and degrees per year. The
dominant lunar longitude and latitude terms carry a small auxiliary series
(`am`, `bm`) inside their argument; the coupling accounts for most of the
evection correction and is evaluated before the main sum. All results are
normalized into [0, 360).

Accuracy is of the order of 0.1–1°, sufficient for rise/set and phase
display.
"""
import math

import numpy as np

from hoshiyomi.domain.angles import normalize_360
from hoshiyomi.domain.coordinate_frames import EclipticCoordinate
from hoshiyomi.domain.epoch import Epoch

# --------------------------------------------------------------------------- #
# Sun ecliptic longitude
# --------------------------------------------------------------------------- #

_SUN_LONGITUDE_TERMS = np.array([
    (0.0200, 355.05, 719.981),
    (0.0048, 234.95, 19.341),
    (0.0020, 247.1, 329.64),
    (0.0018, 297.8, 4452.67),
    (0.0018, 251.3, 0.20),
    (0.0015, 343.2, 450.37),
    (0.0013, 81.4, 225.18),
    (0.0008, 132.5, 659.29),
    (0.0007, 153.3, 90.38),
    (0.0007, 206.8, 30.35),
    (0.0006, 29.8, 337.18),
    (0.0005, 207.4, 1.50),
    (0.0005, 291.2, 22.81),
    (0.0004, 234.9, 315.56),
    (0.0004, 157.3, 299.30),
    (0.0004, 21.1, 720.02),
    (0.0003, 352.5, 1079.97),
    (0.0003, 329.7, 44.43),
])

# --------------------------------------------------------------------------- #
# Moon ecliptic longitude
# --------------------------------------------------------------------------- #

# am: perturbs the argument of the dominant (evection) term.
_MOON_LONGITUDE_AUX_TERMS = np.array([
    (0.0040, 119.5, 1.33),
    (0.0020, 55.0, 19.34),
    (0.0006, 71.0, 0.2),
    (0.0006, 54.0, 19.3),
])

_MOON_LONGITUDE_TERMS = np.array([
    (1.2740, 100.738, 4133.3536),
    (0.6583, 235.700, 8905.3422),
    (0.2136, 269.926, 9543.9773),
    (0.1856, 177.525, 359.9905),
    (0.1143, 6.546, 9664.0404),
    (0.0588, 214.22, 638.635),
    (0.0572, 103.21, 3773.363),
    (0.0533, 10.66, 13677.331),
    (0.0459, 238.18, 8545.352),
    (0.0410, 137.43, 4411.998),
    (0.0348, 117.84, 4452.671),
    (0.0305, 312.49, 5131.979),
    (0.0153, 130.84, 758.698),
    (0.0125, 141.51, 14436.029),
    (0.0110, 231.59, 4892.052),
    (0.0107, 336.44, 13038.696),
    (0.0100, 44.89, 14315.966),
    (0.0085, 201.5, 8266.71),
    (0.0079, 278.2, 4493.34),
    (0.0068, 53.2, 9265.33),
    (0.0052, 197.2, 319.32),
    (0.0050, 295.4, 4812.66),
    (0.0048, 235.0, 19.34),
    (0.0040, 13.2, 13317.34),
    (0.0040, 145.6, 18449.32),
    (0.0040, 119.5, 1.33),
    (0.0039, 111.3, 17810.68),
    (0.0037, 349.1, 5410.62),
    (0.0027, 272.5, 9183.99),
    (0.0026, 107.2, 13797.39),
    (0.0024, 211.9, 998.63),
    (0.0024, 252.8, 9224.66),
    (0.0022, 240.6, 8185.36),
    (0.0021, 87.5, 9903.97),
    (0.0021, 175.1, 719.98),
    (0.0021, 105.6, 3413.37),
    (0.0020, 55.0, 19.34),
    (0.0018, 4.1, 4013.29),
    (0.0016, 242.2, 18569.38),
    (0.0012, 339.0, 12678.71),
    (0.0011, 276.5, 19208.02),
    (0.0009, 218.0, 8586.0),
    (0.0008, 188.0, 14037.3),
    (0.0008, 204.0, 7906.7),
    (0.0007, 140.0, 4052.0),
    (0.0007, 275.0, 4853.3),
    (0.0007, 216.0, 278.6),
    (0.0006, 128.0, 1118.7),
    (0.0005, 247.0, 22582.7),
    (0.0005, 181.0, 19088.0),
    (0.0005, 114.0, 17450.7),
    (0.0005, 332.0, 5091.3),
    (0.0004, 313.0, 398.7),
    (0.0004, 278.0, 120.1),
    (0.0004, 71.0, 9584.7),
    (0.0004, 20.0, 720.0),
    (0.0003, 83.0, 3814.0),
    (0.0003, 66.0, 3494.7),
    (0.0003, 147.0, 18089.3),
    (0.0003, 311.0, 5492.0),
    (0.0003, 161.0, 40.7),
    (0.0003, 280.0, 23221.3),
])

# --------------------------------------------------------------------------- #
# Moon ecliptic latitude
# --------------------------------------------------------------------------- #

# bm: perturbs the argument of the dominant latitude term.
_MOON_LATITUDE_AUX_TERMS = np.array([
    (0.0267, 234.95, 19.341),
    (0.0043, 322.1, 19.36),
    (0.0040, 119.5, 1.33),
    (0.0020, 55.0, 19.34),
    (0.0005, 307.0, 19.4),
])

_MOON_LATITUDE_TERMS = np.array([
    (0.2806, 228.235, 9604.0088),
    (0.2777, 138.311, 60.0316),
    (0.1732, 142.427, 4073.3220),
    (0.0554, 194.01, 8965.374),
    (0.0463, 172.55, 698.667),
    (0.0326, 328.96, 13737.362),
    (0.0172, 3.18, 14375.997),
    (0.0093, 277.4, 8845.31),
    (0.0088, 176.7, 4711.96),
    (0.0082, 144.9, 3713.33),
    (0.0043, 307.6, 5470.66),
    (0.0042, 103.9, 18509.35),
    (0.0034, 319.9, 4433.31),
    (0.0025, 196.5, 8605.38),
    (0.0022, 331.4, 13377.37),
    (0.0021, 170.1, 1058.66),
    (0.0019, 230.7, 9244.02),
    (0.0018, 243.3, 8206.68),
    (0.0018, 270.8, 5192.01),
    (0.0017, 99.8, 14496.06),
    (0.0016, 135.7, 420.02),
    (0.0015, 211.1, 9284.69),
    (0.0015, 45.8, 9964.00),
    (0.0014, 219.2, 299.96),
    (0.0013, 95.8, 4472.03),
    (0.0013, 155.4, 379.35),
    (0.0012, 38.4, 4812.68),
    (0.0012, 148.2, 4851.36),
    (0.0011, 138.3, 19147.99),
    (0.0010, 18.0, 12978.66),
    (0.0008, 70.0, 17870.7),
    (0.0008, 326.0, 9724.1),
    (0.0007, 294.0, 13098.7),
    (0.0006, 224.0, 5590.7),
    (0.0006, 52.0, 13617.3),
    (0.0005, 280.0, 8485.3),
    (0.0005, 239.0, 4193.4),
    (0.0004, 311.0, 9483.9),
    (0.0004, 238.0, 23281.3),
    (0.0004, 81.0, 10242.6),
    (0.0004, 13.0, 9325.4),
    (0.0004, 147.0, 14097.4),
    (0.0003, 205.0, 22642.7),
    (0.0003, 107.0, 18149.4),
    (0.0003, 146.0, 3353.3),
    (0.0003, 234.0, 19268.0),
])

# --------------------------------------------------------------------------- #
# Moon horizontal parallax
# --------------------------------------------------------------------------- #

_MOON_PARALLAX_TERMS = np.array([
    (0.0518, 224.98, 4771.989),
    (0.0095, 190.7, 4133.35),
    (0.0078, 325.7, 8905.34),
    (0.0028, 0.0, 9543.98),
    (0.0009, 100.0 + 13677.3, 1.0),  # unit rate as tabulated
    (0.0005, 329.0, 8545.4),
    (0.0004, 194.0, 3773.4),
    (0.0003, 227.0, 4412.0),
])


def _sine_sum(terms: np.ndarray, t: float) -> float:
    """Σ A·sin(φ + ω·t) over a (n, 3) table, arguments in degrees."""
    amplitude = terms[:, 0]
    phase = terms[:, 1]
    rate = terms[:, 2]
    return float(np.sum(amplitude * np.sin(np.radians(phase + rate * t))))


def sun_longitude(epoch: Epoch) -> float:
    """Apparent ecliptic longitude of the Sun in degrees [0, 360)."""
    t = epoch.years
    # Equation of centre; its amplitude decays slowly with eccentricity.
    centre = (1.9146 - 0.00005 * t) * math.sin(math.radians(357.538 + 359.991 * t))
    longitude = (
        280.4603
        + 360.00769 * t
        + centre
        + _sine_sum(_SUN_LONGITUDE_TERMS, t)
    )
    return normalize_360(longitude)


def moon_longitude(epoch: Epoch) -> float:
    """Ecliptic longitude of the Moon in degrees [0, 360)."""
    t = epoch.years
    am = _sine_sum(_MOON_LONGITUDE_AUX_TERMS, t)
    longitude = (
        218.3161
        + 4812.67881 * t
        + 6.2887 * math.sin(math.radians(134.961 + 4771.9886 * t + am))
        + _sine_sum(_MOON_LONGITUDE_TERMS, t)
    )
    return normalize_360(longitude)


def moon_latitude(epoch: Epoch) -> float:
    """Ecliptic latitude of the Moon in degrees, normalized into [0, 360).

    Southern latitudes therefore come back as values just below 360.
    """
    t = epoch.years
    bm = _sine_sum(_MOON_LATITUDE_AUX_TERMS, t)
    latitude = (
        5.1282 * math.sin(math.radians(93.273 + 4832.0202 * t + bm))
        + _sine_sum(_MOON_LATITUDE_TERMS, t)
    )
    return normalize_360(latitude)


def moon_parallax(epoch: Epoch) -> float:
    """Horizontal parallax of the Moon in degrees (about 0.9°–1.0°)."""
    t = epoch.years
    parallax = 0.9507 * math.sin(math.radians(90.0)) + _sine_sum(_MOON_PARALLAX_TERMS, t)
    return normalize_360(parallax)


def moon_ecliptic(epoch: Epoch) -> EclipticCoordinate:
    """Ecliptic longitude and latitude of the Moon."""
    return EclipticCoordinate(
        longitude_deg=moon_longitude(epoch),
        latitude_deg=moon_latitude(epoch),
    )
