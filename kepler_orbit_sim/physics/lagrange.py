"""Lagrange coefficient propagation of a two-body state."""

from __future__ import annotations

from dataclasses import dataclass
from math import sqrt

import numpy as np

from .kepler import stumpff_c, stumpff_s


@dataclass(frozen=True)
class LagrangeCoefficients:
    f: float
    g: float
    fdot: float
    gdot: float

    @property
    def wronskian(self) -> float:
        # Conservation of angular momentum makes this exactly 1.
        return self.f * self.gdot - self.fdot * self.g


def lagrange_coefficients(
    chi: float,
    alpha: float,
    r0_vec: np.ndarray,
    v0_vec: np.ndarray,
    mu: float,
    dt: float,
) -> LagrangeCoefficients:
    """Coefficients f, g, fdot, gdot for universal anomaly ``chi`` after ``dt``."""
    z = alpha * chi * chi
    c = stumpff_c(z)
    s = stumpff_s(z)
    sqrt_mu = sqrt(mu)
    r0 = float(np.linalg.norm(r0_vec))

    f = 1.0 - chi * chi / r0 * c
    g = dt - chi**3 / sqrt_mu * s
    r = float(np.linalg.norm(f * r0_vec + g * v0_vec))
    fdot = sqrt_mu / (r0 * r) * chi * (z * s - 1.0)
    gdot = 1.0 - chi * chi / r * c
    return LagrangeCoefficients(f=f, g=g, fdot=fdot, gdot=gdot)


def propagate_state(
    r0_vec: np.ndarray, v0_vec: np.ndarray, coefficients: LagrangeCoefficients
) -> tuple[np.ndarray, np.ndarray]:
    r = coefficients.f * r0_vec + coefficients.g * v0_vec
    v = coefficients.fdot * r0_vec + coefficients.gdot * v0_vec
    return r, v
