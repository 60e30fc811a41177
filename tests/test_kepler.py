import numpy as np
import pytest

from kepler_orbit_sim.errors import InvalidStateError
from kepler_orbit_sim.physics.kepler import (
    STUMPFF_SERIES_LIMIT,
    SolverConfig,
    SolverStatus,
    solve_universal_anomaly,
    stumpff_c,
    stumpff_s,
)

MU = 398600.0


def _residual(mu, alpha, r0, vr0, dt, chi):
    z = alpha * chi**2
    return (
        r0 * vr0 / np.sqrt(mu) * chi**2 * stumpff_c(z)
        + (1 - alpha * r0) * chi**3 * stumpff_s(z)
        + r0 * chi
        - np.sqrt(mu) * dt
    )


def test_stumpff_values_at_zero():
    assert stumpff_c(0.0) == 0.5
    assert stumpff_s(0.0) == 1.0 / 6.0


@pytest.mark.parametrize("z", [1e-16, -1e-16, 1e-12, -1e-12, 1e-7, -1e-7, 1e-5, -1e-5])
def test_stumpff_continuous_across_zero(z):
    assert np.isclose(stumpff_c(z), 0.5, rtol=1e-6, atol=0.0)
    assert np.isclose(stumpff_s(z), 1.0 / 6.0, rtol=1e-6, atol=0.0)


@pytest.mark.parametrize("limit", [STUMPFF_SERIES_LIMIT, -STUMPFF_SERIES_LIMIT])
def test_stumpff_series_meets_closed_form(limit):
    inside = limit * (1.0 - 1e-6)
    outside = limit * (1.0 + 1e-6)
    assert np.isclose(stumpff_c(inside), stumpff_c(outside), rtol=0.0, atol=1e-9)
    assert np.isclose(stumpff_s(inside), stumpff_s(outside), rtol=0.0, atol=1e-9)


def test_stumpff_closed_forms():
    assert np.isclose(stumpff_c(np.pi**2), 2.0 / np.pi**2)
    assert np.isclose(stumpff_s(np.pi**2), 1.0 / np.pi**2)
    assert np.isclose(stumpff_c(-1.0), np.cosh(1.0) - 1.0)
    assert np.isclose(stumpff_s(-1.0), np.sinh(1.0) - 1.0)


def test_hyperbolic_universal_anomaly():
    # Earth satellite with r0 = 10000 km, vr0 = 3.0752 km/s, a = -19655 km, one hour
    result = solve_universal_anomaly(MU, 1.0 / -19655.0, 10000.0, 3.0752, 3600.0)

    assert result.converged
    assert result.status is SolverStatus.CONVERGED
    assert result.chi == pytest.approx(128.51, abs=0.05)
    assert 1 <= result.iterations < 1000
    assert np.isclose(result.z, (1.0 / -19655.0) * result.chi**2)


@pytest.mark.parametrize("alpha", [1.0 / 8000.0, 0.0, -1.0 / 30000.0])
def test_solution_satisfies_kepler_equation(alpha):
    r0, vr0, dt = 7000.0, 1.2, 2500.0
    result = solve_universal_anomaly(MU, alpha, r0, vr0, dt)
    assert result.converged
    scale = np.sqrt(MU) * dt
    assert abs(_residual(MU, alpha, r0, vr0, dt, result.chi)) < 1e-8 * scale


def test_zero_time_gives_zero_anomaly():
    result = solve_universal_anomaly(MU, 1.0 / 7000.0, 7000.0, 0.5, 0.0)
    assert result.converged
    assert result.chi == 0.0


def test_negative_time_gives_negative_anomaly():
    result = solve_universal_anomaly(MU, 1.0 / 8000.0, 7000.0, 0.5, -1200.0)
    assert result.converged
    assert result.chi < 0.0


def test_iteration_cap_is_reported():
    config = SolverConfig(tolerance=1e-12, max_iterations=1)
    result = solve_universal_anomaly(MU, 1.0 / -19655.0, 10000.0, 3.0752, 3600.0, config)

    assert not result.converged
    assert result.status is SolverStatus.MAX_ITERATIONS_EXCEEDED
    assert result.iterations == 1
    assert np.isfinite(result.chi)


def test_overflow_is_reported_as_divergence():
    result = solve_universal_anomaly(MU, 1.0 / -19655.0, 10000.0, 3.0752, 1.0e9)
    assert result.status is SolverStatus.DIVERGED
    assert not result.converged


def test_solver_config_validation_and_from_dict():
    config = SolverConfig.from_dict({"tolerance": 1e-10, "max_iterations": 50})
    assert config == SolverConfig(tolerance=1e-10, max_iterations=50)
    assert SolverConfig.from_dict(None) == SolverConfig()

    with pytest.raises(InvalidStateError):
        SolverConfig(tolerance=0.0)
    with pytest.raises(InvalidStateError):
        SolverConfig(max_iterations=0)
