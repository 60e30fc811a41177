"""Two-impulse Hohmann-style transfers between orbits around one body."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from kepler_orbit_sim.errors import InvalidStateError

from .orbit import Orbit

# Altitudes closer than this (km) are treated as the same apsis.
ALTITUDE_MATCH_TOLERANCE = 1e-6


@dataclass(frozen=True)
class TransferPath:
    first_impulse: float  # km/s
    second_impulse: float  # km/s
    transfer_time: float  # s

    @property
    def total(self) -> float:
        return self.first_impulse + self.second_impulse


@dataclass(frozen=True)
class TransferSummary:
    perigee_first: TransferPath
    apogee_first: TransferPath


def _same_altitude(a: float, b: float) -> bool:
    return abs(a - b) <= ALTITUDE_MATCH_TOLERANCE


def _speed_change(h_from: float, h_to: float, radius: float) -> float:
    # At an apsis the whole velocity is tangential, so v = h / r.
    return abs(h_from / radius - h_to / radius)


def _h(orbit: Orbit) -> float:
    return float(np.linalg.norm(orbit.angular_momentum))


class HohmannTransfer:
    """Candidate transfers from ``start`` to ``end``.

    Two transfer ellipses are derived: ``perigee_delta``, entered by burning at
    the start perigee, and ``apogee_delta``, entered by burning at the start
    apogee. Both paths are priced; choosing between them is up to the caller.
    """

    def __init__(self, start: Orbit, end: Orbit) -> None:
        if start.body != end.body:
            raise InvalidStateError(
                f"transfer orbits must share a body, got {start.body.name!r} and {end.body.name!r}"
            )
        self.start = start
        self.end = end
        self.perigee_delta = self._perigee_delta()
        self.apogee_delta = self._apogee_delta()

    @property
    def body(self):
        return self.start.body

    @property
    def satellite(self):
        return self.start.satellite

    def _spanning(self, altitude_a: float, altitude_b: float) -> Orbit:
        low, high = sorted((altitude_a, altitude_b))
        return Orbit.from_altitudes(self.body, self.satellite, low, high)

    def _perigee_delta(self) -> Orbit:
        if _same_altitude(self.start.apogee_altitude, self.end.apogee_altitude):
            return self.start
        return self._spanning(self.start.perigee_altitude, self.end.apogee_altitude)

    def _apogee_delta(self) -> Orbit:
        """Collapses to ``start``, not ``end``, when the perigees match.

        The span from start apogee to end perigee is then the start orbit itself.
        """
        if _same_altitude(self.start.perigee_altitude, self.end.perigee_altitude):
            return self.start
        return self._spanning(self.start.apogee_altitude, self.end.perigee_altitude)

    def perigee_first_impulse(self) -> float:
        return _speed_change(_h(self.start), _h(self.perigee_delta), self.start.perigee)

    def perigee_second_impulse(self) -> float:
        return _speed_change(_h(self.end), _h(self.perigee_delta), self.end.apogee)

    def delta_v(self) -> float:
        """Total cost of the path that starts with a burn at the start perigee."""
        return self.perigee_first_impulse() + self.perigee_second_impulse()

    def apogee_first_impulse(self) -> float:
        return _speed_change(_h(self.apogee_delta), _h(self.start), self.start.apogee)

    def apogee_second_impulse(self) -> float:
        return _speed_change(_h(self.end), _h(self.apogee_delta), self.end.perigee)

    def apogee_delta_v(self) -> float:
        return self.apogee_first_impulse() + self.apogee_second_impulse()

    def impulses(self) -> TransferSummary:
        return TransferSummary(
            perigee_first=TransferPath(
                first_impulse=self.perigee_first_impulse(),
                second_impulse=self.perigee_second_impulse(),
                transfer_time=0.5 * self.perigee_delta.period,
            ),
            apogee_first=TransferPath(
                first_impulse=self.apogee_first_impulse(),
                second_impulse=self.apogee_second_impulse(),
                transfer_time=0.5 * self.apogee_delta.period,
            ),
        )

    def __repr__(self) -> str:
        return (
            f"HohmannTransfer(start={self.start.perigee_altitude:.3f}x{self.start.apogee_altitude:.3f} km, "
            f"end={self.end.perigee_altitude:.3f}x{self.end.apogee_altitude:.3f} km)"
        )
