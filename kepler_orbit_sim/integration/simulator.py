"""Trajectory sampling with the analytic propagator and a numerical reference."""

from __future__ import annotations

import logging

import numpy as np
import pandas as pd
from scipy.integrate import solve_ivp

from kepler_orbit_sim.errors import OrbitError
from kepler_orbit_sim.physics.kepler import SolverConfig
from kepler_orbit_sim.physics.orbit import Orbit

logger = logging.getLogger(__name__)

STATE_COLUMNS = ["x", "y", "z", "vx", "vy", "vz"]


def _time_grid(t_end: float, dt: float) -> np.ndarray:
    if dt <= 0.0:
        raise ValueError(f"dt must be positive, got {dt}")
    step = dt if t_end >= 0.0 else -dt
    t = np.arange(0.0, t_end, step)
    return np.append(t, t_end)


def _assemble_dataframe(t: np.ndarray, states: np.ndarray, body_radius: float) -> pd.DataFrame:
    df = pd.DataFrame(states, columns=STATE_COLUMNS)
    df.insert(0, "time", t)
    r = df[["x", "y", "z"]].to_numpy()
    v = df[["vx", "vy", "vz"]].to_numpy()
    df["r"] = np.linalg.norm(r, axis=1)
    df["altitude"] = df["r"] - body_radius
    df["speed"] = np.linalg.norm(v, axis=1)
    return df


def sample_trajectory(
    orbit: Orbit,
    t_end: float | None = None,
    dt: float = 60.0,
    config: SolverConfig | None = None,
) -> pd.DataFrame:
    """Propagate ``orbit`` analytically on a uniform grid from 0 to ``t_end``.

    ``t_end`` defaults to one period, which requires a closed orbit.
    """
    if t_end is None:
        t_end = orbit.period
    t = _time_grid(t_end, dt)

    states = np.empty((t.size, 6))
    iterations = np.empty(t.size, dtype=int)
    for idx, t_k in enumerate(t):
        anomaly, r, v = orbit.solve_state(float(t_k), config)
        states[idx, :3] = r
        states[idx, 3:] = v
        iterations[idx] = anomaly.iterations
    logger.info("Sampled %d states over %.1f s (max %d solver iterations)", t.size, t_end, iterations.max())

    df = _assemble_dataframe(t, states, orbit.body.radius)
    df["iterations"] = iterations

    try:
        df.attrs["orbit_elements"] = orbit.elements
    except OrbitError as exc:
        logger.info("Full element set unavailable for this orbit: %s", exc)
    return df


def _two_body(_t: float, state: np.ndarray, mu: float) -> np.ndarray:
    r = state[0:3]
    v = state[3:6]
    r_norm = np.linalg.norm(r)
    return np.concatenate([v, -mu * r / r_norm**3])


def integrate_two_body(
    r0: np.ndarray,
    v0: np.ndarray,
    mu: float,
    t_end: float,
    dt: float = 60.0,
    body_radius: float = 0.0,
    rtol: float = 1e-10,
    atol: float = 1e-10,
) -> pd.DataFrame:
    """Numerically integrate the unperturbed two-body problem as a reference solution."""
    t_eval = _time_grid(t_end, dt)
    sol = solve_ivp(
        _two_body,
        (0.0, t_end),
        np.concatenate([r0, v0]),
        method="DOP853",
        t_eval=t_eval,
        rtol=rtol,
        atol=atol,
        args=(mu,),
    )
    if not sol.success:
        raise RuntimeError(f"two-body integration failed: {sol.message}")
    return _assemble_dataframe(sol.t, sol.y.T, body_radius)


def compare_with_numerical(orbit: Orbit, t_end: float | None = None, dt: float = 60.0) -> pd.DataFrame:
    """Position and velocity differences between analytic and numerical propagation."""
    analytic = sample_trajectory(orbit, t_end, dt)
    numerical = integrate_two_body(
        orbit.r, orbit.v, orbit.mu, float(analytic["time"].iloc[-1]), dt, orbit.body.radius
    )
    dr = analytic[["x", "y", "z"]].to_numpy() - numerical[["x", "y", "z"]].to_numpy()
    dv = analytic[["vx", "vy", "vz"]].to_numpy() - numerical[["vx", "vy", "vz"]].to_numpy()
    return pd.DataFrame(
        {
            "time": analytic["time"],
            "position_error": np.linalg.norm(dr, axis=1),
            "velocity_error": np.linalg.norm(dv, axis=1),
        }
    )
