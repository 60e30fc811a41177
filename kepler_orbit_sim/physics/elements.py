"""Classical orbital elements from position and velocity.

All functions are pure. Angles are returned in degrees: inclination lies in
[0, 180] and every other angle in [0, 360). Quadrant ambiguities of ``acos``
are resolved on the signed component of the relevant vector.
"""

from __future__ import annotations

from dataclasses import dataclass
from math import acos, degrees, inf, isfinite, pi, sqrt

import numpy as np

from kepler_orbit_sim.errors import DegenerateOrbitError, UnboundedOrbitError

K_HAT = np.array([0.0, 0.0, 1.0])

# Relative size below which a reference vector is treated as zero.
DEGENERACY_TOLERANCE = 1e-10


@dataclass(frozen=True)
class OrbitalElements:
    angular_momentum: np.ndarray
    node_line: np.ndarray
    right_ascension: float
    eccentricity_vector: np.ndarray
    eccentricity: float
    perigee_argument: float
    true_anomaly: float
    inclination: float
    radial_velocity: float
    perigee: float
    apogee: float
    semimajor_axis: float
    period: float


def _acos_deg(cosine: float) -> float:
    return degrees(acos(min(1.0, max(-1.0, cosine))))


def _reflect(value: float) -> float:
    # A zero angle reflects to 0, not 360.
    return (360.0 - value) % 360.0


def _unit(vec: np.ndarray, quantity: str, scale: float = 1.0) -> np.ndarray:
    norm = float(np.linalg.norm(vec))
    if norm <= DEGENERACY_TOLERANCE * scale:
        raise DegenerateOrbitError(quantity, f"|{quantity}| = {norm:.3e}")
    return vec / norm


def angular_momentum(r: np.ndarray, v: np.ndarray) -> np.ndarray:
    return np.cross(r, v)


def node_line(h: np.ndarray) -> np.ndarray:
    return np.cross(K_HAT, h)


def right_ascension(n: np.ndarray, h_scale: float = 1.0) -> float:
    """Right ascension of the ascending node, undefined for equatorial orbits."""
    n_hat = _unit(n, "node line", h_scale)
    value = _acos_deg(float(n_hat[0]))
    if n[1] < 0.0:
        return _reflect(value)
    return value


def eccentricity_vector(r: np.ndarray, v: np.ndarray, mu: float) -> np.ndarray:
    h = angular_momentum(r, v)
    r_norm = np.linalg.norm(r)
    return (np.cross(v, h) - mu * r / r_norm) / mu


def radial_velocity(r: np.ndarray, v: np.ndarray) -> float:
    return float(np.dot(v, r) / np.linalg.norm(r))


def perigee_argument(n: np.ndarray, e: np.ndarray, h_scale: float = 1.0) -> float:
    n_hat = _unit(n, "node line", h_scale)
    e_hat = _unit(e, "eccentricity vector")
    value = _acos_deg(float(np.dot(n_hat, e_hat)))
    if e[2] < 0.0:
        return _reflect(value)
    return value


def true_anomaly(e: np.ndarray, r: np.ndarray, vr: float) -> float:
    e_hat = _unit(e, "eccentricity vector")
    r_hat = r / np.linalg.norm(r)
    value = _acos_deg(float(np.dot(e_hat, r_hat)))
    if vr < 0.0:
        return _reflect(value)
    return value


def inclination(h: np.ndarray, scale: float = 1.0) -> float:
    h_hat = _unit(h, "angular momentum", scale)
    return _acos_deg(float(h_hat[2]))


def perigee_radius(h_norm: float, e: float, mu: float) -> float:
    return h_norm**2 / mu / (1.0 + e)


def apogee_radius(h_norm: float, e: float, mu: float) -> float:
    """Apoapsis radius; infinite for a parabola and negative for a hyperbola."""
    if e == 1.0:
        return inf
    return h_norm**2 / mu / (1.0 - e)


def semimajor_axis(rp: float, ra: float) -> float:
    return 0.5 * (rp + ra)


def period(a: float, mu: float) -> float:
    if not (isfinite(a) and a > 0.0):
        raise UnboundedOrbitError(f"period is undefined for semimajor axis {a}")
    return 2.0 * pi * a**1.5 / sqrt(mu)


def orbital_elements(r: np.ndarray, v: np.ndarray, mu: float) -> OrbitalElements:
    """Compute the full classical element set from position and velocity.

    Raises DegenerateOrbitError for equatorial or circular orbits, whose
    node line or eccentricity vector leave some angles undefined, and
    UnboundedOrbitError for orbits without a period.
    """
    r = np.asarray(r, dtype=float)
    v = np.asarray(v, dtype=float)
    scale = float(np.linalg.norm(r) * np.linalg.norm(v))

    h_vec = angular_momentum(r, v)
    n_vec = node_line(h_vec)
    e_vec = eccentricity_vector(r, v, mu)
    e = float(np.linalg.norm(e_vec))
    h_norm = float(np.linalg.norm(h_vec))
    vr = radial_velocity(r, v)

    rp = perigee_radius(h_norm, e, mu)
    ra = apogee_radius(h_norm, e, mu)
    a = semimajor_axis(rp, ra)

    return OrbitalElements(
        angular_momentum=h_vec,
        node_line=n_vec,
        right_ascension=right_ascension(n_vec, scale),
        eccentricity_vector=e_vec,
        eccentricity=e,
        perigee_argument=perigee_argument(n_vec, e_vec, scale),
        true_anomaly=true_anomaly(e_vec, r, vr),
        inclination=inclination(h_vec, scale),
        radial_velocity=vr,
        perigee=rp,
        apogee=ra,
        semimajor_axis=a,
        period=period(a, mu),
    )
