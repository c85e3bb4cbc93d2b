# Copyright (c) 2026 Jeroen Visser. All rights reserved.
# Licensed under the MIT License — see LICENSE.
"""
Failure outcomes of the lunar computations.

No computation returns NaN: every undefined numeric path is converted into
one of these before it reaches the caller.
"""
from enum import Enum


class HorizonCondition(Enum):
    """Why a horizon crossing does not exist."""
    ALWAYS_ABOVE = "always_above"
    ALWAYS_BELOW = "always_below"


class MoonCalculationError(Exception):
    """Base class for lunar computation failures."""


class InvalidInputError(MoonCalculationError, ValueError):
    """Malformed date or out-of-range coordinates."""


class NonConvergenceError(MoonCalculationError):
    """An iterative solver exhausted its iteration budget or settled on an implausible root."""

    def __init__(
        self,
        solver: str,
        iterations: int,
        last_correction: float,
        detail: str | None = None,
    ) -> None:
        self.solver = solver
        self.iterations = iterations
        self.last_correction = last_correction
        if detail is None:
            detail = (
                f"did not converge within {iterations} iterations "
                f"(last correction {last_correction:.3e})"
            )
        super().__init__(f"{solver} {detail}")


class CircumpolarConditionError(MoonCalculationError):
    """The Moon does not cross the horizon on the requested day."""

    def __init__(self, condition: HorizonCondition, cos_hour_angle: float) -> None:
        self.condition = condition
        self.cos_hour_angle = cos_hour_angle
        where = "above" if condition is HorizonCondition.ALWAYS_ABOVE else "below"
        super().__init__(
            f"Moon stays {where} the horizon (cos H = {cos_hour_angle:.4f})"
        )
