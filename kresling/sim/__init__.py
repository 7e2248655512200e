"""Actuator kinematics and body geometry."""

from kresling.sim.kinematics import ActuatorKinematics, JointFrame, bend_rotation
from kresling.sim.mesh import (
    WireSegment,
    body_triangles,
    ring_vertices,
    segment_triangles,
    wire_segments,
)

__all__ = [
    "ActuatorKinematics",
    "JointFrame",
    "bend_rotation",
    "WireSegment",
    "body_triangles",
    "ring_vertices",
    "segment_triangles",
    "wire_segments",
]
