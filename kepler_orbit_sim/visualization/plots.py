"""Visualization helpers for propagated orbits."""

from __future__ import annotations

import numpy as np
import matplotlib.pyplot as plt
import pandas as pd


def plot_trajectory_3d(r: np.ndarray, body_radius: float, output_path: str) -> None:
    fig = plt.figure(figsize=(8, 6))
    ax = fig.add_subplot(111, projection="3d")

    ax.plot(r[:, 0], r[:, 1], r[:, 2], label="Orbit", color="tab:orange")
    ax.scatter(r[0, 0], r[0, 1], r[0, 2], color="tab:red", label="Epoch")

    if body_radius > 0.0:
        u = np.linspace(0, 2 * np.pi, 50)
        v = np.linspace(0, np.pi, 25)
        x = body_radius * np.outer(np.cos(u), np.sin(v))
        y = body_radius * np.outer(np.sin(u), np.sin(v))
        z = body_radius * np.outer(np.ones_like(u), np.cos(v))
        ax.plot_surface(x, y, z, color="lightblue", alpha=0.4, linewidth=0)

    ax.set_xlabel("X (km)")
    ax.set_ylabel("Y (km)")
    ax.set_zlabel("Z (km)")
    ax.set_title("Propagated Orbit")
    ax.legend()
    ax.set_box_aspect([1, 1, 1])
    plt.tight_layout()
    fig.savefig(output_path, dpi=200)
    plt.close(fig)


def plot_radius_history(df: pd.DataFrame, output_path: str) -> None:
    fig, (ax_alt, ax_speed) = plt.subplots(2, 1, figsize=(8, 6), sharex=True)
    ax_alt.plot(df["time"], df["altitude"], color="tab:blue")
    ax_alt.set_ylabel("Altitude (km)")
    ax_alt.grid(True, linestyle="--", alpha=0.5)

    ax_speed.plot(df["time"], df["speed"], color="tab:green")
    ax_speed.set_xlabel("Time (s)")
    ax_speed.set_ylabel("Speed (km/s)")
    ax_speed.grid(True, linestyle="--", alpha=0.5)

    fig.suptitle("Altitude and Speed")
    plt.tight_layout()
    fig.savefig(output_path, dpi=200)
    plt.close(fig)
