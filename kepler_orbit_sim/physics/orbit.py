"""Two-body orbit of a particle around a central body."""

from __future__ import annotations

from functools import cached_property
from math import sqrt

import numpy as np

from kepler_orbit_sim.errors import InvalidStateError, KeplerConvergenceError

from . import elements
from .elements import OrbitalElements
from .bodies import Body, Particle
from .kepler import SolverConfig, UniversalAnomaly, solve_universal_anomaly
from .lagrange import LagrangeCoefficients, lagrange_coefficients, propagate_state


class Orbit:
    """Orbit of ``satellite`` about ``body``, both shared rather than owned.

    Elements are computed lazily and cached; the particle state is immutable,
    so they never need invalidating.
    """

    def __init__(self, body: Body, satellite: Particle) -> None:
        if float(np.linalg.norm(satellite.r)) == 0.0:
            raise InvalidStateError(f"{satellite.name!r} position coincides with the centre of {body.name!r}")
        if float(np.linalg.norm(satellite.v)) == 0.0:
            raise InvalidStateError(f"{satellite.name!r} has zero velocity")
        self.body = body
        self.satellite = satellite

    @classmethod
    def from_altitudes(
        cls,
        body: Body,
        satellite: Particle,
        perigee_altitude: float,
        apogee_altitude: float,
    ) -> "Orbit":
        """Build an equatorial orbit with the satellite at perigee on the x axis."""
        if perigee_altitude < 0.0 or apogee_altitude < 0.0:
            raise InvalidStateError(
                f"altitudes must be non-negative, got {perigee_altitude} and {apogee_altitude}"
            )
        if perigee_altitude > apogee_altitude:
            raise InvalidStateError(
                f"perigee altitude {perigee_altitude} exceeds apogee altitude {apogee_altitude}"
            )
        rp = body.radius + perigee_altitude
        ra = body.radius + apogee_altitude
        if rp <= 0.0:
            raise InvalidStateError("perigee radius must be positive")
        h = sqrt(2.0 * body.mu * rp * ra / (rp + ra))
        state = satellite.with_state(r=[rp, 0.0, 0.0], v=[0.0, h / rp, 0.0])
        return cls(body, state)

    @property
    def mu(self) -> float:
        return self.body.mu

    @property
    def r(self) -> np.ndarray:
        return self.satellite.r

    @property
    def v(self) -> np.ndarray:
        return self.satellite.v

    @cached_property
    def _scale(self) -> float:
        return float(np.linalg.norm(self.r) * np.linalg.norm(self.v))

    @cached_property
    def angular_momentum(self) -> np.ndarray:
        return elements.angular_momentum(self.r, self.v)

    @cached_property
    def node_line(self) -> np.ndarray:
        return elements.node_line(self.angular_momentum)

    @cached_property
    def right_ascension(self) -> float:
        return elements.right_ascension(self.node_line, self._scale)

    @cached_property
    def eccentricity_vector(self) -> np.ndarray:
        return elements.eccentricity_vector(self.r, self.v, self.mu)

    @cached_property
    def eccentricity(self) -> float:
        return float(np.linalg.norm(self.eccentricity_vector))

    @cached_property
    def radial_velocity(self) -> float:
        return elements.radial_velocity(self.r, self.v)

    @cached_property
    def perigee_argument(self) -> float:
        return elements.perigee_argument(self.node_line, self.eccentricity_vector, self._scale)

    @cached_property
    def true_anomaly(self) -> float:
        return elements.true_anomaly(self.eccentricity_vector, self.r, self.radial_velocity)

    @cached_property
    def inclination(self) -> float:
        return elements.inclination(self.angular_momentum, self._scale)

    @cached_property
    def perigee(self) -> float:
        h = float(np.linalg.norm(self.angular_momentum))
        return elements.perigee_radius(h, self.eccentricity, self.mu)

    @cached_property
    def apogee(self) -> float:
        h = float(np.linalg.norm(self.angular_momentum))
        return elements.apogee_radius(h, self.eccentricity, self.mu)

    @cached_property
    def semimajor_axis(self) -> float:
        return elements.semimajor_axis(self.perigee, self.apogee)

    @cached_property
    def period(self) -> float:
        return elements.period(self.semimajor_axis, self.mu)

    @cached_property
    def elements(self) -> OrbitalElements:
        return elements.orbital_elements(self.r, self.v, self.mu)

    @property
    def alpha(self) -> float:
        """Reciprocal semimajor axis; zero for a parabola, negative for a hyperbola."""
        return 1.0 / self.semimajor_axis

    @property
    def perigee_altitude(self) -> float:
        return self.perigee - self.body.radius

    @property
    def apogee_altitude(self) -> float:
        return self.apogee - self.body.radius

    @property
    def distance(self) -> float:
        return float(np.linalg.norm(self.r))

    @property
    def specific_energy(self) -> float:
        return float(np.dot(self.v, self.v)) / 2.0 - self.mu / self.distance

    def universal_anomaly(self, dt: float, config: SolverConfig | None = None) -> UniversalAnomaly:
        return solve_universal_anomaly(
            self.mu, self.alpha, self.distance, self.radial_velocity, dt, config
        )

    def _converged_anomaly(self, dt: float, config: SolverConfig | None) -> UniversalAnomaly:
        result = self.universal_anomaly(dt, config)
        if not result.converged:
            raise KeplerConvergenceError(result)
        return result

    def lagrangian(self, dt: float, config: SolverConfig | None = None) -> LagrangeCoefficients:
        result = self._converged_anomaly(dt, config)
        return lagrange_coefficients(result.chi, self.alpha, self.r, self.v, self.mu, dt)

    def solve_state(
        self, dt: float, config: SolverConfig | None = None
    ) -> tuple[UniversalAnomaly, np.ndarray, np.ndarray]:
        """Solver result together with the position and velocity it yields."""
        result = self._converged_anomaly(dt, config)
        coefficients = lagrange_coefficients(result.chi, self.alpha, self.r, self.v, self.mu, dt)
        r, v = propagate_state(self.r, self.v, coefficients)
        return result, r, v

    def state_at(self, dt: float, config: SolverConfig | None = None) -> tuple[np.ndarray, np.ndarray]:
        """Position and velocity ``dt`` seconds from now (negative ``dt`` looks back)."""
        _, r, v = self.solve_state(dt, config)
        return r, v

    def propagate(self, dt: float, config: SolverConfig | None = None) -> Particle:
        r, v = self.state_at(dt, config)
        return self.satellite.with_state(r=r, v=v)

    def propagated(self, dt: float, config: SolverConfig | None = None) -> "Orbit":
        return Orbit(self.body, self.propagate(dt, config))

    def __repr__(self) -> str:
        return (
            f"Orbit(body={self.body.name!r}, satellite={self.satellite.name!r}, "
            f"r={self.r.tolist()}, v={self.v.tolist()})"
        )
