"""Configuration loading utilities."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict

import yaml

from kepler_orbit_sim.physics.bodies import BODIES, Body, Particle
from kepler_orbit_sim.physics.kepler import SolverConfig


def load_yaml(path: str | Path) -> Dict[str, Any]:
    """Load a YAML file and return a dict."""
    with Path(path).open("r", encoding="utf-8") as handle:
        return yaml.safe_load(handle)


def load_solver_config(cfg: Dict[str, Any]) -> SolverConfig:
    return SolverConfig.from_dict(cfg.get("solver"))


def body_from_config(body_cfg: str | Dict[str, Any]) -> Body:
    """Resolve a body by name from the constants table or build it from explicit values."""
    if isinstance(body_cfg, str):
        key = body_cfg.lower()
        if key not in BODIES:
            raise KeyError(f"unknown body {body_cfg!r}; known bodies: {sorted(BODIES)}")
        return BODIES[key]

    name = body_cfg.get("name", "body")
    radius = float(body_cfg.get("radius", 0.0))
    if "mu" in body_cfg and "mass" in body_cfg:
        return Body(name=name, mass=float(body_cfg["mass"]), mu=float(body_cfg["mu"]), radius=radius)
    if "mu" in body_cfg:
        return Body.from_mu(name, float(body_cfg["mu"]), radius)
    if "mass" in body_cfg:
        return Body.from_mass(name, float(body_cfg["mass"]), radius)
    if name.lower() in BODIES:
        return BODIES[name.lower()]
    raise KeyError("body.mu or body.mass is required")


def satellite_from_config(sat_cfg: Dict[str, Any]) -> Particle:
    state = sat_cfg.get("state", {})
    return Particle(
        name=sat_cfg.get("name", "satellite"),
        mass=float(sat_cfg.get("mass", 1000.0)),
        r=state.get("r", [0.0, 0.0, 0.0]),
        v=state.get("v", [0.0, 0.0, 0.0]),
        radius=float(sat_cfg.get("radius", 0.0)),
        bound=sat_cfg.get("bound"),
    )
