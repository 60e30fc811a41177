"""Central bodies and point-mass particles."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

import numpy as np

from kepler_orbit_sim.errors import InvalidStateError

G_KM = 6.67430e-20  # km^3 / (kg s^2)


def _as_vector(name: str, value) -> np.ndarray:
    vec = np.array(value, dtype=float)
    if vec.shape != (3,):
        raise InvalidStateError(f"{name} must have exactly 3 components, got shape {vec.shape}")
    if not np.all(np.isfinite(vec)):
        raise InvalidStateError(f"{name} has non-finite components: {vec}")
    vec.setflags(write=False)
    return vec


@dataclass(frozen=True)
class Body:
    """Central body given by its mass, its gravitational parameter, or both."""

    name: str
    mass: float | None = None  # kg
    mu: float | None = None  # km^3/s^2
    radius: float = 0.0  # km

    def __post_init__(self) -> None:
        if self.mass is None and self.mu is None:
            raise InvalidStateError(f"body {self.name!r} needs a mass or a gravitational parameter")
        if self.mu is None:
            object.__setattr__(self, "mu", G_KM * self.mass)
        elif self.mass is None:
            object.__setattr__(self, "mass", self.mu / G_KM)
        if not self.mass > 0.0:
            raise InvalidStateError(f"body {self.name!r} must have positive mass, got {self.mass}")
        if not self.mu > 0.0:
            raise InvalidStateError(
                f"body {self.name!r} must have positive gravitational parameter, got {self.mu}"
            )
        if self.radius < 0.0:
            raise InvalidStateError(f"body {self.name!r} has negative radius {self.radius}")

    @classmethod
    def from_mass(cls, name: str, mass: float, radius: float = 0.0) -> "Body":
        return cls(name=name, mass=mass, radius=radius)

    @classmethod
    def from_mu(cls, name: str, mu: float, radius: float = 0.0) -> "Body":
        return cls(name=name, mu=mu, radius=radius)


@dataclass(frozen=True, eq=False)
class Particle:
    """Point mass with a position, velocity and acceleration in km, km/s, km/s^2.

    Vectors are copied into read-only arrays, so a particle can be shared
    between orbits without any of them altering its state.
    """

    name: str
    mass: float
    r: np.ndarray
    v: np.ndarray
    a: np.ndarray = field(default_factory=lambda: np.zeros(3))
    radius: float = 0.0
    bound: float | None = None

    def __post_init__(self) -> None:
        if not self.mass > 0.0:
            raise InvalidStateError(f"particle {self.name!r} must have positive mass, got {self.mass}")
        object.__setattr__(self, "r", _as_vector("r", self.r))
        object.__setattr__(self, "v", _as_vector("v", self.v))
        object.__setattr__(self, "a", _as_vector("a", self.a))
        if self.radius < 0.0:
            raise InvalidStateError(f"particle {self.name!r} has negative radius {self.radius}")

    def with_state(self, r, v) -> "Particle":
        return replace(self, r=r, v=v)

    def distance(self, other: "Particle") -> float:
        return float(np.linalg.norm(self.r - other.r))


# Reference bodies (km units)
EARTH = Body(name="Earth", mass=5.972e24, mu=398600.0, radius=6378.0)
MOON = Body(name="Moon", mass=7.346e22, mu=4902.8, radius=1737.4)
MARS = Body(name="Mars", mass=6.4171e23, mu=42828.0, radius=3389.5)
SUN = Body(name="Sun", mass=1.989e30, mu=1.32712440018e11, radius=696000.0)

BODIES = {body.name.lower(): body for body in (EARTH, MOON, MARS, SUN)}

__all__ = ["Body", "Particle", "EARTH", "MOON", "MARS", "SUN", "BODIES", "G_KM"]
