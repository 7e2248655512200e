"""
Geometry of the folded body and the wires, for rendering collaborators.

Each joint carries a polygonal ring of ``panels_count`` vertices. The ring
radius grows with compression (the panels bulge outward as they fold) and
ring i is twisted by ``twist_angle * i``. Adjacent rings are stitched with
two triangles per panel.
"""

from dataclasses import dataclass

import numpy as np

from kresling.control.tension import TensionVector
from kresling.sim.kinematics import ActuatorKinematics, bend_rotation

# Wire anchor angle around the ring, in the XZ plane
WIRE_ANGLES = {
    "up": np.pi / 2,
    "down": -np.pi / 2,
    "left": np.pi,
    "right": 0.0,
}


@dataclass
class WireSegment:
    """Straight wire from the base anchor to the head anchor."""

    name: str
    start: np.ndarray
    end: np.ndarray
    tension: float


def ring_radius(kin: ActuatorKinematics) -> float:
    """Current panel ring radius, lerped by compression."""
    r = kin.radius
    return r + (r * kin.config.min_radius_ratio - r) * kin.compression


def ring_vertices(kin: ActuatorKinematics, index: int) -> np.ndarray:
    """(panels_count, 3) ring vertices around joint ``index``."""
    n = kin.config.panels_count
    r = ring_radius(kin)
    twist = kin.twist_angle * index

    theta = 2 * np.pi * np.arange(n) / n + twist
    local = np.stack([r * np.cos(theta), np.zeros(n), r * np.sin(theta)], axis=1)

    rot_x, rot_z = kin.rotations[index]
    verts = bend_rotation(rot_x, rot_z).apply(local) + kin.joints[index]
    verts[:, 1] = np.maximum(verts[:, 1], 0.0)
    return verts


def segment_triangles(kin: ActuatorKinematics, index: int) -> np.ndarray:
    """(2 * panels_count, 3, 3) triangles for the segment between joints index and index+1."""
    bottom = ring_vertices(kin, index)
    top = ring_vertices(kin, index + 1)
    n = len(bottom)

    triangles = []
    for i in range(n):
        j = (i + 1) % n
        triangles.append([bottom[i], bottom[j], top[i]])
        triangles.append([bottom[j], top[j], top[i]])
    return np.array(triangles)


def body_triangles(kin: ActuatorKinematics) -> np.ndarray:
    """All body triangles, segment by segment from the base."""
    return np.concatenate([segment_triangles(kin, i) for i in range(kin.seg_count)])


def wire_segments(kin: ActuatorKinematics, tensions: TensionVector) -> list[WireSegment]:
    """The four control wires, base ring to head ring."""
    cfg = kin.config
    base_r = kin.radius * cfg.wire_base_scale
    head_r = kin.radius * cfg.wire_head_scale
    head = kin.head_frame()
    head_rot = bend_rotation(head.rot_x, head.rot_z)

    wires = []
    for name, angle in WIRE_ANGLES.items():
        start = np.array([base_r * np.cos(angle), 0.0, base_r * np.sin(angle)])
        offset = head_rot.apply([head_r * np.cos(angle), 0.0, head_r * np.sin(angle)])
        end = head.position + offset
        end[1] = max(end[1], 0.0)
        wires.append(WireSegment(name, start, end, getattr(tensions, name)))
    return wires
