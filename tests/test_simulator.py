import numpy as np
import pytest

from kepler_orbit_sim.integration.simulator import (
    compare_with_numerical,
    integrate_two_body,
    sample_trajectory,
)
from kepler_orbit_sim.physics.bodies import EARTH, Particle
from kepler_orbit_sim.physics.orbit import Orbit


def _orbit():
    satellite = Particle(name="Satellite", mass=1000.0, r=[1600.0, 5310.0, 3800.0], v=[-7.350, 0.460, 2.470])
    return Orbit(EARTH, satellite)


def test_sample_trajectory_covers_one_period():
    orbit = _orbit()
    df = sample_trajectory(orbit, dt=120.0)

    assert df["time"].iloc[0] == 0.0
    assert df["time"].iloc[-1] == pytest.approx(orbit.period)
    assert np.all(np.diff(df["time"]) > 0)
    first = df[["x", "y", "z"]].iloc[0].to_numpy()
    last = df[["x", "y", "z"]].iloc[-1].to_numpy()
    np.testing.assert_allclose(first, orbit.r, atol=1e-9)
    np.testing.assert_allclose(last, orbit.r, atol=1e-4)
    assert df.attrs["orbit_elements"].semimajor_axis == pytest.approx(orbit.semimajor_axis)
    assert (df["iterations"] >= 1).all()


def test_altitude_stays_between_apsides():
    orbit = _orbit()
    df = sample_trajectory(orbit, dt=60.0)
    assert df["r"].min() >= orbit.perigee - 1e-6
    assert df["r"].max() <= orbit.apogee + 1e-6
    np.testing.assert_allclose(df["altitude"], df["r"] - EARTH.radius)


def test_backward_sampling_grid():
    df = sample_trajectory(_orbit(), t_end=-600.0, dt=100.0)
    assert df["time"].iloc[-1] == -600.0
    assert np.all(np.diff(df["time"]) < 0)


def test_equatorial_orbit_samples_without_elements():
    spacecraft = Particle(name="Spacecraft", mass=2000.0, r=[0.0, 0.0, 0.0], v=[0.0, 0.0, 0.0])
    orbit = Orbit.from_altitudes(EARTH, spacecraft, 480.0, 800.0)
    df = sample_trajectory(orbit, dt=300.0)
    assert "orbit_elements" not in df.attrs
    assert np.allclose(df["z"], 0.0)


def test_numerical_integration_agrees_with_universal_propagator():
    orbit = _orbit()
    numerical = integrate_two_body(orbit.r, orbit.v, orbit.mu, 3600.0, dt=600.0)
    r, v = orbit.state_at(3600.0)
    np.testing.assert_allclose(numerical[["x", "y", "z"]].iloc[-1].to_numpy(), r, atol=1e-3)
    np.testing.assert_allclose(numerical[["vx", "vy", "vz"]].iloc[-1].to_numpy(), v, atol=1e-6)


def test_compare_with_numerical_reports_small_errors():
    errors = compare_with_numerical(_orbit(), dt=300.0)
    assert list(errors.columns) == ["time", "position_error", "velocity_error"]
    assert errors["position_error"].max() < 1e-3
    assert errors["velocity_error"].max() < 1e-6
