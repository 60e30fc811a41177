"""Universal-variable Kepler equation solver.

The universal anomaly chi is found with Newton-Raphson iteration on

    F(chi) = (r0 vr0 / sqrt(mu)) chi^2 C(z) + (1 - alpha r0) chi^3 S(z)
             + r0 chi - sqrt(mu) dt

with z = alpha chi^2 and alpha = 1 / a. The same expression covers
elliptic (alpha > 0), parabolic (alpha = 0) and hyperbolic (alpha < 0)
orbits through the Stumpff functions C and S.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from math import cos, cosh, isfinite, sin, sinh, sqrt
from typing import Any, Mapping

from kepler_orbit_sim.errors import InvalidStateError

logger = logging.getLogger(__name__)

DEFAULT_TOLERANCE = 1e-8
DEFAULT_MAX_ITERATIONS = 1000

# Closed forms lose precision to cancellation below this |z|; use the series there.
STUMPFF_SERIES_LIMIT = 1e-6


def stumpff_c(z: float) -> float:
    if abs(z) < STUMPFF_SERIES_LIMIT:
        return 0.5 - z / 24.0 + z * z / 720.0
    if z > 0.0:
        return (1.0 - cos(sqrt(z))) / z
    return (cosh(sqrt(-z)) - 1.0) / -z


def stumpff_s(z: float) -> float:
    if abs(z) < STUMPFF_SERIES_LIMIT:
        return 1.0 / 6.0 - z / 120.0 + z * z / 5040.0
    if z > 0.0:
        root = sqrt(z)
        return (root - sin(root)) / root**3
    root = sqrt(-z)
    return (sinh(root) - root) / root**3


@dataclass(frozen=True)
class SolverConfig:
    tolerance: float = DEFAULT_TOLERANCE
    max_iterations: int = DEFAULT_MAX_ITERATIONS

    def __post_init__(self) -> None:
        if not self.tolerance > 0.0:
            raise InvalidStateError(f"solver tolerance must be positive, got {self.tolerance}")
        if self.max_iterations < 1:
            raise InvalidStateError(f"solver needs at least one iteration, got {self.max_iterations}")

    @classmethod
    def from_dict(cls, cfg: Mapping[str, Any] | None) -> "SolverConfig":
        cfg = cfg or {}
        return cls(
            tolerance=float(cfg.get("tolerance", DEFAULT_TOLERANCE)),
            max_iterations=int(cfg.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
        )


DEFAULT_SOLVER_CONFIG = SolverConfig()


class SolverStatus(Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS_EXCEEDED = "max_iterations_exceeded"
    DIVERGED = "diverged"


@dataclass(frozen=True)
class UniversalAnomaly:
    chi: float  # km^0.5
    z: float
    iterations: int
    status: SolverStatus

    @property
    def converged(self) -> bool:
        return self.status is SolverStatus.CONVERGED


def solve_universal_anomaly(
    mu: float,
    alpha: float,
    r0: float,
    vr0: float,
    dt: float,
    config: SolverConfig | None = None,
) -> UniversalAnomaly:
    """Solve the universal Kepler equation for the anomaly after ``dt`` seconds.

    Returns a result tagged with its SolverStatus instead of raising, so the
    last estimate is available even when the iteration cap is reached or
    the derivative vanishes.
    """
    config = config or DEFAULT_SOLVER_CONFIG
    sqrt_mu = sqrt(mu)
    k_vr = r0 * vr0 / sqrt_mu
    k_alpha = 1.0 - alpha * r0

    chi = sqrt_mu * abs(alpha) * dt
    z = alpha * chi * chi

    for iteration in range(1, config.max_iterations + 1):
        try:
            c = stumpff_c(z)
            s = stumpff_s(z)
        except OverflowError:
            logger.warning("Stumpff functions overflowed at iteration %d (z=%g)", iteration, z)
            return UniversalAnomaly(chi=chi, z=z, iterations=iteration, status=SolverStatus.DIVERGED)
        chi2 = chi * chi
        f = k_vr * chi2 * c + k_alpha * chi2 * chi * s + r0 * chi - sqrt_mu * dt
        f_prime = k_vr * chi * (1.0 - alpha * chi2 * s) + k_alpha * chi2 * c + r0

        if f_prime == 0.0 or not (isfinite(f) and isfinite(f_prime)):
            logger.warning(
                "Universal anomaly diverged at iteration %d (chi=%g, F=%g, F'=%g)",
                iteration, chi, f, f_prime,
            )
            return UniversalAnomaly(chi=chi, z=z, iterations=iteration, status=SolverStatus.DIVERGED)

        ratio = f / f_prime
        chi_next = chi - ratio
        if not isfinite(chi_next):
            logger.warning("Universal anomaly step left the finite range at iteration %d", iteration)
            return UniversalAnomaly(chi=chi, z=z, iterations=iteration, status=SolverStatus.DIVERGED)

        chi = chi_next
        z = alpha * chi * chi
        logger.debug("iteration %d: chi=%.12g z=%.6g ratio=%.3e", iteration, chi, z, ratio)

        if abs(ratio) < config.tolerance:
            return UniversalAnomaly(chi=chi, z=z, iterations=iteration, status=SolverStatus.CONVERGED)

    logger.warning(
        "Universal anomaly did not converge within %d iterations (chi=%g)",
        config.max_iterations, chi,
    )
    return UniversalAnomaly(
        chi=chi,
        z=z,
        iterations=config.max_iterations,
        status=SolverStatus.MAX_ITERATIONS_EXCEEDED,
    )
