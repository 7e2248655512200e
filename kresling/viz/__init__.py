"""Visualization tools for the Kresling rig."""

from kresling.viz.actuator_viz import (
    plot_actuator,
    plot_tension_history,
    tension_color,
)

__all__ = [
    "plot_actuator",
    "plot_tension_history",
    "tension_color",
]
