# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Angle range normalization.

Every series result is reduced into [0, 360); solver corrections are
reduced into [-180, 180]. Degree/radian conversion is left to
math.radians / math.degrees.
"""
import math

_FULL_CIRCLE_DEG = 360.0
_HALF_CIRCLE_DEG = 180.0


def normalize_360(angle_deg: float) -> float:
    """Reduce an angle into [0, 360).

    Idempotent: normalize_360(normalize_360(x)) == normalize_360(x).
    """
    result = math.fmod(angle_deg, _FULL_CIRCLE_DEG)
    if result < 0.0:
        result += _FULL_CIRCLE_DEG
    # -1e-20 + 360.0 rounds to 360.0
    if result >= _FULL_CIRCLE_DEG:
        result = 0.0
    return result


def normalize_180(angle_deg: float) -> float:
    """Reduce an angle into [-180, 180].

    Values already inside the closed interval are returned unchanged,
    so both endpoints survive and the mapping is idempotent.
    """
    if -_HALF_CIRCLE_DEG <= angle_deg <= _HALF_CIRCLE_DEG:
        return angle_deg
    result = math.fmod(angle_deg + _HALF_CIRCLE_DEG, _FULL_CIRCLE_DEG)
    if result < 0.0:
        result += _FULL_CIRCLE_DEG
    return result - _HALF_CIRCLE_DEG
