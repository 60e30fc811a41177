"""Command line entry point for two-body orbit propagation and transfer costing."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from kepler_orbit_sim.config import body_from_config, load_solver_config, load_yaml, satellite_from_config
from kepler_orbit_sim.errors import OrbitError
from kepler_orbit_sim.integration.simulator import compare_with_numerical, sample_trajectory
from kepler_orbit_sim.physics.bodies import Body, Particle
from kepler_orbit_sim.physics.orbit import Orbit
from kepler_orbit_sim.physics.transfer import HohmannTransfer
from kepler_orbit_sim.visualization.plots import plot_radius_history, plot_trajectory_3d

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Two-body orbit propagation and Hohmann transfer costs")
    parser.add_argument("--scenario", required=True, help="Scenario YAML config")
    parser.add_argument("--output", default="results", help="Output directory")
    parser.add_argument("--compare-numerical", action="store_true", help="Cross-check against solve_ivp")
    parser.add_argument("--no-plots", action="store_true", help="Skip figure generation")
    parser.add_argument("--log-level", default="INFO", help="Logging level")
    return parser.parse_args(argv)


def _build_orbit(body: Body, satellite: Particle, sat_cfg: Dict[str, Any]) -> Orbit:
    altitudes = sat_cfg.get("altitudes")
    if altitudes is not None:
        return Orbit.from_altitudes(body, satellite, float(altitudes["perigee"]), float(altitudes["apogee"]))
    if "state" not in sat_cfg:
        raise KeyError("satellite.state or satellite.altitudes is required")
    return Orbit(body, satellite)


def _element_report(orbit: Orbit) -> Dict[str, Any]:
    report: Dict[str, Any] = {
        "eccentricity": orbit.eccentricity,
        "perigee_km": orbit.perigee,
        "apogee_km": orbit.apogee,
        "semimajor_axis_km": orbit.semimajor_axis,
        "specific_energy": orbit.specific_energy,
    }
    optional = {
        "inclination_deg": "inclination",
        "right_ascension_deg": "right_ascension",
        "perigee_argument_deg": "perigee_argument",
        "true_anomaly_deg": "true_anomaly",
        "period_s": "period",
    }
    for key, attr in optional.items():
        try:
            report[key] = getattr(orbit, attr)
        except OrbitError as exc:
            logger.info("%s undefined: %s", attr, exc)
            report[key] = None
    return {key: None if value is None else float(value) for key, value in report.items()}


def _transfer_report(body: Body, satellite: Particle, transfer_cfg: Dict[str, Any]) -> Dict[str, Any]:
    start_cfg = transfer_cfg["start"]
    end_cfg = transfer_cfg["end"]
    start = Orbit.from_altitudes(body, satellite, float(start_cfg["perigee"]), float(start_cfg["apogee"]))
    end = Orbit.from_altitudes(body, satellite, float(end_cfg["perigee"]), float(end_cfg["apogee"]))
    summary = HohmannTransfer(start, end).impulses()

    report = {}
    for name, path in (("perigee_first", summary.perigee_first), ("apogee_first", summary.apogee_first)):
        report[name] = {
            "first_impulse_km_s": float(path.first_impulse),
            "second_impulse_km_s": float(path.second_impulse),
            "total_km_s": float(path.total),
            "transfer_time_s": float(path.transfer_time),
        }
    return report


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    scenario = load_yaml(args.scenario)
    body = body_from_config(scenario.get("body", "earth"))
    sat_cfg = scenario.get("satellite", {})
    satellite = satellite_from_config(sat_cfg)
    solver = load_solver_config(scenario)

    output_dir = Path(args.output)
    output_dir.mkdir(parents=True, exist_ok=True)

    orbit = None
    if "state" in sat_cfg or "altitudes" in sat_cfg:
        orbit = _build_orbit(body, satellite, sat_cfg)
        prop_cfg = scenario.get("propagation", {})
        t_end = prop_cfg.get("t_end")
        df = sample_trajectory(
            orbit,
            t_end=None if t_end is None else float(t_end),
            dt=float(prop_cfg.get("dt", 60.0)),
            config=solver,
        )
        csv_path = output_dir / "trajectory.csv"
        df.to_csv(csv_path, index=False)
        logger.info("Saved trajectory to %s", csv_path)

        with (output_dir / "elements.yaml").open("w", encoding="utf-8") as handle:
            yaml.safe_dump(_element_report(orbit), handle, sort_keys=False)

        if args.compare_numerical:
            errors = compare_with_numerical(orbit, float(df["time"].iloc[-1]), float(prop_cfg.get("dt", 60.0)))
            errors.to_csv(output_dir / "numerical_comparison.csv", index=False)
            logger.info("Max position error vs numerical integration: %.3e km", errors["position_error"].max())

        if not args.no_plots:
            r = df[["x", "y", "z"]].to_numpy()
            plot_trajectory_3d(r, body.radius, str(output_dir / "trajectory_3d.png"))
            plot_radius_history(df, str(output_dir / "altitude_speed.png"))

    if "transfer" in scenario:
        report = _transfer_report(body, satellite, scenario["transfer"])
        with (output_dir / "transfer.yaml").open("w", encoding="utf-8") as handle:
            yaml.safe_dump(report, handle, sort_keys=False)
        cheaper = min(report, key=lambda name: report[name]["total_km_s"])
        logger.info("Cheaper transfer path: %s (%.4f km/s)", cheaper, report[cheaper]["total_km_s"])

    if orbit is None and "transfer" not in scenario:
        logger.warning("Scenario %s has neither a satellite state nor a transfer", args.scenario)

    print(f"Saved results to {output_dir}")


if __name__ == "__main__":
    main()
