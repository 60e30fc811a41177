"""Exception hierarchy for orbit computations."""

from __future__ import annotations

from typing import Any


class OrbitError(Exception):
    """Base class for all orbit computation errors."""


class InvalidStateError(OrbitError, ValueError):
    """Raised when a body, particle or orbit is constructed from unusable inputs."""


class DegenerateOrbitError(OrbitError, ArithmeticError):
    """Raised when an element is undefined because a reference vector vanishes."""

    def __init__(self, quantity: str, detail: str = "") -> None:
        self.quantity = quantity
        message = f"{quantity} is zero"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnboundedOrbitError(OrbitError, ArithmeticError):
    """Raised when a quantity only defined for closed orbits is requested."""


class KeplerConvergenceError(OrbitError, RuntimeError):
    """Raised when the universal Kepler equation could not be solved."""

    def __init__(self, result: Any) -> None:
        self.result = result
        super().__init__(
            f"universal anomaly solver stopped with status {result.status.value} "
            f"after {result.iterations} iterations (chi={result.chi!r})"
        )
