# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""Tests for the new-Moon search and Moon age."""
import ast
import logging
from datetime import date, datetime, timedelta

import pytest

from hoshiyomi.domain.errors import InvalidInputError, NonConvergenceError
from hoshiyomi.domain.moon_age import elongation_deg, find_new_moon, moon_age
from hoshiyomi.domain.settings import EphemerisSettings


_JST = EphemerisSettings(zone_offset_hours=9.0)
_UTC = EphemerisSettings(zone_offset_hours=0.0)
_WRAP = EphemerisSettings(wrap_every_elongation=True)

# Longest synodic month is ~29.83 days.
_ONE_LUNATION_BOUND = 30.0


class TestReferenceAges:

    def test_just_after_new_moon(self):
        """Conjunction at ~03:14 JST, under nine hours before noon."""
        age = moon_age(date(2000, 1, 7), _JST)
        assert age == pytest.approx(0.365124, abs=1e-5)
        assert age < 1.0

    def test_day_before_new_moon(self):
        """Noon before the conjunction still counts from the previous new Moon."""
        assert moon_age(date(2000, 1, 6), _JST) == pytest.approx(29.186141, abs=1e-5)

    def test_full_moon(self):
        assert moon_age(date(2000, 1, 21), _JST) == pytest.approx(14.365973, abs=1e-5)

    def test_2022_07_15(self):
        assert moon_age(date(2022, 7, 15), _JST) == pytest.approx(16.0060497, abs=1e-5)

    def test_utc_deployment(self):
        assert moon_age(date(2000, 1, 6), _UTC) == pytest.approx(29.561082, abs=1e-5)
        assert moon_age(date(2000, 1, 7), _UTC) == pytest.approx(0.740476, abs=1e-5)

    def test_default_settings_are_jst(self):
        assert moon_age(date(2000, 1, 21)) == moon_age(date(2000, 1, 21), _JST)


class TestNewMoonSearch:

    def test_iterations_recorded(self):
        assert find_new_moon(date(2000, 1, 6), _JST).iterations == 4
        assert find_new_moon(date(2000, 1, 7), _JST).iterations == 3

    def test_new_moon_instant(self):
        """The conjunction lands in the small hours of 2000-01-07 JST."""
        search = find_new_moon(date(2000, 1, 7), _JST)
        assert datetime(2000, 1, 7, 3, 0) < search.new_moon < datetime(2000, 1, 7, 3, 30)
        noon = datetime(2000, 1, 7, 12, 0)
        assert (noon - search.new_moon) / timedelta(days=1) == pytest.approx(search.age_days)

    def test_elongation_small_at_new_moon(self):
        search = find_new_moon(date(2000, 1, 7), _JST)
        delta = elongation_deg(search.new_moon, _JST)
        assert abs(delta) < 0.05

    def test_ages_within_one_lunation(self):
        day = date(2022, 7, 1)
        for _ in range(31):
            age = moon_age(day, _JST)
            assert 0.0 <= age < 29.6, day
            day += timedelta(days=1)

    def test_age_grows_one_day_per_day(self):
        a = moon_age(date(2000, 1, 10), _JST)
        b = moon_age(date(2000, 1, 11), _JST)
        assert b - a == pytest.approx(1.0, abs=5e-3)

    def test_iteration_budget_exhausted(self):
        with pytest.raises(NonConvergenceError) as exc_info:
            find_new_moon(date(2000, 1, 21), EphemerisSettings(max_iterations=1))
        assert exc_info.value.iterations == 1

    def test_deterministic(self):
        assert find_new_moon(date(2022, 7, 15)) == find_new_moon(date(2022, 7, 15))


class TestEquinoxWrap:
    """Near the March equinox later raw elongations can sit near ±360°."""

    def test_implausible_age_retried_with_wrapped_elongation(self):
        """The unwrapped search lands 32.75 d back on 1990-03-30."""
        search = find_new_moon(date(1990, 3, 30), _JST)
        assert search.age_days == pytest.approx(3.299799, abs=1e-4)
        assert search.wrapped_elongation is True

    def test_negative_age_never_returned(self):
        """The unwrapped search lands on the following conjunction (-27.66 d)."""
        assert moon_age(date(2015, 3, 22), _JST) == pytest.approx(1.725010, abs=1e-4)

    def test_two_lunation_age_never_returned(self):
        """The unwrapped search lands two conjunctions back (58.83 d)."""
        assert moon_age(date(2023, 4, 20), _JST) == pytest.approx(29.400488, abs=1e-4)

    def test_wrap_every_elongation_matches_retry(self):
        assert moon_age(date(1990, 3, 30), _WRAP) == moon_age(date(1990, 3, 30), _JST)

    def test_plain_search_not_flagged(self):
        assert find_new_moon(date(2000, 1, 21), _JST).wrapped_elongation is False

    def test_long_lunation_age_kept(self):
        """Ages just under 30 d are genuine when the lunation is long."""
        assert moon_age(date(2028, 3, 26), _JST) == pytest.approx(29.6821, abs=1e-3)

    @pytest.mark.parametrize("year", [1985, 1990, 2015, 2023, 2028, 2029])
    def test_march_april_ages_within_one_lunation(self, year):
        day = date(year, 3, 1)
        while day <= date(year, 4, 30):
            age = moon_age(day, _JST)
            assert 0.0 <= age < _ONE_LUNATION_BOUND, (day, age)
            day += timedelta(days=1)

    def test_retry_logged(self, caplog):
        with caplog.at_level(logging.WARNING, logger="hoshiyomi.domain.moon_age"):
            moon_age(date(1990, 3, 30), _JST)
        assert any("outside one synodic month" in r.getMessage() for r in caplog.records)

    def test_unrecoverable_age_raises(self, monkeypatch):
        monkeypatch.setattr("hoshiyomi.domain.moon_age._MAX_PLAUSIBLE_AGE_DAYS", 1.0)
        with pytest.raises(NonConvergenceError) as exc_info:
            moon_age(date(2000, 1, 21), _JST)
        assert "outside one synodic month" in str(exc_info.value)

    def test_wrap_agrees_away_from_equinox(self):
        for day in (date(2000, 1, 7), date(2000, 1, 21), date(2022, 7, 15)):
            assert moon_age(day, _WRAP) == pytest.approx(moon_age(day, _JST), abs=1e-3)


class TestCalendarLimits:

    @pytest.mark.parametrize("day", [date.min, date(1, 2, 1), date.max, date(9999, 11, 30)])
    def test_dates_near_calendar_ends_rejected(self, day):
        with pytest.raises(InvalidInputError):
            moon_age(day, _JST)


class TestMoonAgePurity:
    """Domain purity: moon_age.py must only import stdlib + domain."""

    def test_module_pure(self):
        import hoshiyomi.domain.moon_age as mod

        allowed = {'math', 'logging', 'dataclasses', 'datetime', 'typing'}
        with open(mod.__file__) as f:
            tree = ast.parse(f.read())

        for node in ast.walk(tree):
            if isinstance(node, ast.Import):
                for alias in node.names:
                    root = alias.name.split('.')[0]
                    if root not in allowed and root != 'hoshiyomi':
                        assert False, f"Disallowed import '{alias.name}'"
            if isinstance(node, ast.ImportFrom):
                if node.module and node.level == 0:
                    root = node.module.split('.')[0]
                    if root not in allowed and root != 'hoshiyomi':
                        assert False, f"Disallowed import from '{node.module}'"
