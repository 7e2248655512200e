"""
Matplotlib views of the actuator.

Model coordinates are Y-up; matplotlib 3D axes are Z-up, so points are
plotted as (x, z, y).
"""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib import colormaps as mpl_colormaps
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from kresling.control.tension import WIRES, TensionVector
from kresling.sim.kinematics import ActuatorKinematics
from kresling.sim.mesh import body_triangles, wire_segments

BODY_COLOR = (1.0, 0.55, 0.0, 0.9)
SLACK_COLOR = np.array([0.0, 0.4, 1.0])
TAUT_COLOR = np.array([1.0, 0.2, 0.2])


def _to_plot(points: np.ndarray) -> np.ndarray:
    """Y-up model coordinates -> Z-up plot coordinates."""
    points = np.asarray(points)
    return points[..., [0, 2, 1]]


def tension_color(tension: float) -> tuple:
    """Blue (slack) to red (taut)."""
    t = float(np.clip(tension, 0.0, 1.0))
    return tuple(SLACK_COLOR + (TAUT_COLOR - SLACK_COLOR) * t)


def plot_actuator(
    kin: ActuatorKinematics,
    tensions: Optional[TensionVector] = None,
    ax: Optional[plt.Axes] = None,
    title: str = "Kresling Actuator",
) -> plt.Axes:
    """
    Draw folded body, centreline and wires.

    Args:
        kin: Actuator state (after advance())
        tensions: Wire tensions for coloring; wires are skipped if None
        ax: Existing 3D axes (creates new if None)
        title: Plot title

    Returns:
        Matplotlib 3D axes
    """
    if ax is None:
        fig = plt.figure(figsize=(8, 8))
        ax = fig.add_subplot(111, projection="3d")

    # Body
    stroke_alpha = 0.2 + 0.6 * kin.compression
    body = Poly3DCollection(
        _to_plot(body_triangles(kin)),
        facecolors=BODY_COLOR,
        edgecolors=(0.3, 0.12, 0.0, stroke_alpha),
        linewidths=0.5,
    )
    ax.add_collection3d(body)

    # Centreline
    line = _to_plot(kin.joints)
    ax.plot(line[:, 0], line[:, 1], line[:, 2], "k-", linewidth=1, alpha=0.7)
    head = line[-1]
    ax.scatter([head[0]], [head[1]], [head[2]], c="green", s=40, marker="o", label="Head")

    if tensions is not None:
        for wire in wire_segments(kin, tensions):
            seg = _to_plot(np.stack([wire.start, wire.end]))
            ax.plot(
                seg[:, 0], seg[:, 1], seg[:, 2],
                color=tension_color(wire.tension),
                linewidth=1 + 2 * wire.tension,
            )

    ax.set_xlabel("X")
    ax.set_ylabel("Z")
    ax.set_zlabel("Y (up)")
    ax.set_title(f"{title}  comp={kin.compression * 100:.0f}%")

    # Equal aspect, floor at zero
    reach = kin.radius * max(kin.config.wire_base_scale, 1.0)
    height = kin.seg_count * kin.seg_height
    half = max(reach, height / 2)
    ax.set_xlim(-half, half)
    ax.set_ylim(-half, half)
    ax.set_zlim(0, 2 * half)

    return ax


def plot_tension_history(
    history: np.ndarray,
    timestamps_ms: Optional[np.ndarray] = None,
    commands: Optional[np.ndarray] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """
    Tensions (and optionally servo commands) over time, one row per wire.

    Args:
        history: (T, 4) tensions [up, down, left, right]
        timestamps_ms: (T,) tick times; frame index if None
        commands: (T, 4) servo commands on the same time base (NaN where unsent)
        save_path: Write PNG here if given
    """
    history = np.asarray(history)
    t = np.arange(len(history)) if timestamps_ms is None else np.asarray(timestamps_ms)
    colors = mpl_colormaps["tab10"](np.arange(4))

    fig, axes = plt.subplots(4, 1, figsize=(10, 8), sharex=True)
    for i, (ax, wire) in enumerate(zip(axes, WIRES)):
        ax.plot(t, history[:, i], color=colors[i], linewidth=1.2)
        ax.set_ylim(-0.05, 1.05)
        ax.set_ylabel(wire)
        ax.grid(True, alpha=0.3)
        if commands is not None:
            twin = ax.twinx()
            twin.plot(t, np.asarray(commands)[:, i], "k.", markersize=2, alpha=0.5)
            twin.set_ylabel("cmd")
    axes[-1].set_xlabel("time (ms)" if timestamps_ms is not None else "frame")
    fig.suptitle("Wire tensions")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=100)
    return fig
