import numpy as np
import pytest

from kepler_orbit_sim.config import (
    body_from_config,
    load_solver_config,
    load_yaml,
    satellite_from_config,
)
from kepler_orbit_sim.physics.bodies import EARTH
from kepler_orbit_sim.physics.kepler import SolverConfig


def test_body_lookup_by_name():
    assert body_from_config("Earth") is EARTH
    assert body_from_config({"name": "earth"}) is EARTH
    with pytest.raises(KeyError):
        body_from_config("Vulcan")


def test_body_from_explicit_values():
    body = body_from_config({"name": "Toy", "mu": 1000.0, "radius": 10.0})
    assert body.mu == 1000.0
    assert body.radius == 10.0
    assert np.isclose(body.mass, 1000.0 / 6.67430e-20)

    both = body_from_config({"name": "Toy", "mu": 1000.0, "mass": 5.0e15})
    assert both.mass == 5.0e15
    assert both.mu == 1000.0

    from_mass = body_from_config({"name": "Toy", "mass": 1.0e20})
    assert np.isclose(from_mass.mu, 6.67430)

    with pytest.raises(KeyError):
        body_from_config({"name": "Toy"})


def test_scenario_round_trip(tmp_path):
    path = tmp_path / "scenario.yaml"
    path.write_text(
        "satellite:\n"
        "  name: Sounder\n"
        "  mass: 250.0\n"
        "  state:\n"
        "    r: [7000.0, 0.0, 0.0]\n"
        "    v: [0.0, 7.5, 1.0]\n"
        "solver:\n"
        "  tolerance: 1.0e-10\n"
        "  max_iterations: 20\n",
        encoding="utf-8",
    )
    cfg = load_yaml(path)

    satellite = satellite_from_config(cfg["satellite"])
    assert satellite.name == "Sounder"
    np.testing.assert_array_equal(satellite.v, [0.0, 7.5, 1.0])
    assert load_solver_config(cfg) == SolverConfig(tolerance=1e-10, max_iterations=20)
    assert load_solver_config({}) == SolverConfig()
