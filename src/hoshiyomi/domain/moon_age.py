# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Synodic age of the Moon.

Fixed-point search backwards from local noon for the instant where the
lunar and solar ecliptic longitudes coincide (new Moon). Each step divides
the current elongation by the mean elongation rate, 12.1908°/day.

Only the first elongation is wrapped into [0, 360) so the search always
walks back to the previous conjunction; later steps use the raw
difference. When the Sun sits near 0° longitude (new Moons around the
March equinox) a later raw difference can land near ±360° and the search
settles on another conjunction, a month or more before noon or after it.
Such an age (outside [0, 30) days) is never returned: the search is rerun
with the elongation wrapped into [-180, 180] on every step, and if that
also fails the date raises NonConvergenceError.
`EphemerisSettings.wrap_every_elongation` selects the wrapped search from
the start.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from hoshiyomi.domain.angles import normalize_180, normalize_360
from hoshiyomi.domain.epoch import epoch_from_civil, local_noon, validate_civil_date
from hoshiyomi.domain.errors import NonConvergenceError
from hoshiyomi.domain.lunar_series import moon_longitude, sun_longitude
from hoshiyomi.domain.settings import (
    EphemerisSettings,
    DEFAULT_SETTINGS,
    NEW_MOON_RATE_DEG_PER_DAY,
)

logger = logging.getLogger(__name__)

# Longest synodic month is ~29.83 days.
_MAX_PLAUSIBLE_AGE_DAYS = 30.0


@dataclass(frozen=True)
class NewMoonSearch:
    """Outcome of the new-Moon search for one date."""
    age_days: float
    new_moon: datetime  # naive civil wall-clock time of the conjunction
    iterations: int
    wrapped_elongation: bool = False  # later steps wrapped into [-180, 180]


def elongation_deg(when: datetime, settings: EphemerisSettings = DEFAULT_SETTINGS) -> float:
    """Raw Moon − Sun ecliptic longitude difference, in (-360, 360)."""
    epoch = epoch_from_civil(when, settings)
    return moon_longitude(epoch) - sun_longitude(epoch)


def _is_plausible(age_days: float) -> bool:
    return 0.0 <= age_days < _MAX_PLAUSIBLE_AGE_DAYS


def _search(day: date, settings: EphemerisSettings, wrap_later: bool) -> NewMoonSearch:
    noon = local_noon(day)
    tn = noon
    step_deg = 0.0

    for iteration in range(1, settings.max_iterations + 1):
        delta = elongation_deg(tn, settings)

        if iteration == 1:
            step_deg = normalize_360(delta)
            residual = delta
        elif wrap_later:
            step_deg = normalize_180(delta)
            residual = step_deg
        else:
            step_deg = delta
            residual = delta

        tn -= timedelta(days=step_deg / NEW_MOON_RATE_DEG_PER_DAY)

        if abs(residual) < settings.age_threshold_deg:
            age = (noon - tn) / timedelta(days=1)
            logger.debug(
                "New Moon for %s found after %d iterations: age %.4f d",
                day.isoformat(), iteration, age,
            )
            return NewMoonSearch(
                age_days=age,
                new_moon=tn,
                iterations=iteration,
                wrapped_elongation=wrap_later,
            )

    raise NonConvergenceError("new-Moon search", settings.max_iterations, step_deg)


def find_new_moon(day: date, settings: EphemerisSettings = DEFAULT_SETTINGS) -> NewMoonSearch:
    """
    Locate the new Moon preceding local noon of `day`.

    Args:
        day: Civil date in the deployment zone.
        settings: Deployment settings (zone, threshold, iteration budget).

    Returns:
        NewMoonSearch with the age at local noon in days, always within
        [0, 30).

    Raises:
        InvalidInputError: If `day` lies too close to the calendar ends.
        NonConvergenceError: If the elongation does not fall below the
            threshold within settings.max_iterations steps, or if the
            search only settles on a conjunction outside one synodic month.
    """
    validate_civil_date(day)
    search = _search(day, settings, settings.wrap_every_elongation)
    if _is_plausible(search.age_days):
        return search

    if not settings.wrap_every_elongation:
        logger.warning(
            "Moon age %.3f d for %s lies outside one synodic month; "
            "retrying with the elongation wrapped on every step",
            search.age_days, day.isoformat(),
        )
        search = _search(day, settings, wrap_later=True)
        if _is_plausible(search.age_days):
            return search

    raise NonConvergenceError(
        "new-Moon search",
        search.iterations,
        search.age_days,
        detail=(
            f"settled on a conjunction {search.age_days:.3f} d from noon of "
            f"{day.isoformat()}, outside one synodic month"
        ),
    )


def moon_age(day: date, settings: EphemerisSettings = DEFAULT_SETTINGS) -> float:
    """Moon age in days at local noon of `day`."""
    return find_new_moon(day, settings).age_days
