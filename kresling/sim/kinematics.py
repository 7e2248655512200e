"""
Kinematics Module - Wire tensions to Kresling joint chain.

Coordinate system:
- Base plate centre at the origin
- Y-axis points UP along the unbent actuator
- Bending is expressed as rotations about X and Z, applied Z first, then X
- The floor is the plane y = 0; no joint may go below it

Each tick the whole chain is recomputed from the four tensions, so the model
holds no state beyond the tensions and the geometry constants.
"""

from dataclasses import dataclass

import numpy as np
from scipy.spatial.transform import Rotation

from kresling.config import RigConfig
from kresling.control.tension import TensionVector


def bend_rotation(rot_x: float, rot_z: float) -> Rotation:
    """Rotation about Z by rot_z followed by rotation about X by rot_x."""
    # Extrinsic "zx": z is applied first, both about the fixed axes
    return Rotation.from_euler("zx", [rot_z, rot_x])


@dataclass
class JointFrame:
    """Absolute joint position and accumulated bend rotation (rad)."""

    position: np.ndarray
    rot_x: float
    rot_z: float


class ActuatorKinematics:
    """
    Segmented Kresling actuator driven by four wires.

    Wire lengths set a uniform segment height (compression) and a per-segment
    bend increment from the length difference of opposing wires. Compression
    couples to twist the way the Kresling fold pattern does.
    """

    def __init__(self, config: RigConfig):
        self.config = config
        self.seg_count = config.seg_count
        self.seg_height = config.seg_height
        self.radius = config.body_radius
        self.base = np.zeros(3)

        self.joints = np.zeros((self.seg_count + 1, 3))
        self.rotations = np.zeros((self.seg_count + 1, 2))  # [rot_x, rot_z]

        self.segment_height = self.seg_height
        self.bend_angle_x = 0.0
        self.bend_angle_z = 0.0
        self.compression = 0.0
        self.twist_angle = 0.0

        self._compute_centerline()

    def wire_length(self, tension: float) -> float:
        """Segment length for one wire: tension 0 -> full height, 1 -> minimum."""
        h_max, h_min = self.seg_height, self.config.min_height
        return h_max + tension * (h_min - h_max)

    def advance(self, tensions: TensionVector):
        """Recompute the whole actuator state from the four tensions."""
        cfg = self.config
        h_max, h_min = self.seg_height, cfg.min_height

        len_up, len_down, len_left, len_right = (
            self.wire_length(t) for t in tensions.to_array()
        )
        avg_h = (len_up + len_down + len_left + len_right) / 4

        # Bend per segment from opposing wire length difference
        angle_x = (len_down - len_up) / (self.radius * 2) * cfg.bend_sensitivity
        angle_z = (len_right - len_left) / (self.radius * 2) * cfg.bend_sensitivity

        # Physical limit on combined bend, direction preserved
        limit = np.radians(cfg.max_bend_limit_deg)
        magnitude = np.hypot(angle_x, angle_z)
        if magnitude > limit:
            scale = limit / magnitude
            angle_x *= scale
            angle_z *= scale

        self.segment_height = avg_h
        self.bend_angle_x = float(angle_x)
        self.bend_angle_z = float(angle_z)

        # 0.99 cap keeps segments from collapsing to zero length
        compression = (avg_h - h_max) / (h_min - h_max)
        self.compression = float(np.clip(compression, 0.0, 0.99))
        self.twist_angle = float(np.radians(cfg.max_twist_deg) * self.compression)

        self._compute_centerline()

    def _compute_centerline(self):
        """Walk the chain from the base, one segment at a time."""
        self.joints[0] = self.base
        self.rotations[0] = (0.0, 0.0)

        current = self.base.copy()
        acc_x, acc_z = 0.0, 0.0
        segment = np.array([0.0, self.segment_height, 0.0])

        for i in range(self.seg_count):
            # Direction at the segment midpoint approximates the curved centreline
            half_x = acc_x + self.bend_angle_x / 2
            half_z = acc_z + self.bend_angle_z / 2

            current = current + bend_rotation(half_x, half_z).apply(segment)
            if current[1] < 0:
                current[1] = 0.0

            self.joints[i + 1] = current

            acc_x += self.bend_angle_x
            acc_z += self.bend_angle_z
            self.rotations[i + 1] = (acc_x, acc_z)

    def frame(self, index: int) -> JointFrame:
        rot_x, rot_z = self.rotations[index]
        return JointFrame(self.joints[index].copy(), float(rot_x), float(rot_z))

    def head_position(self) -> np.ndarray:
        """Position of the last joint (the head plate centre)."""
        return self.joints[self.seg_count].copy()

    def head_frame(self) -> JointFrame:
        return self.frame(self.seg_count)

    def total_bend(self) -> float:
        """Magnitude of the per-segment bend increment (rad)."""
        return float(np.hypot(self.bend_angle_x, self.bend_angle_z))

    def summary(self) -> dict:
        head = self.head_position()
        return {
            "segment_height": self.segment_height,
            "bend_angle_x_deg": float(np.degrees(self.bend_angle_x)),
            "bend_angle_z_deg": float(np.degrees(self.bend_angle_z)),
            "compression": self.compression,
            "twist_deg": float(np.degrees(self.twist_angle)),
            "head": [float(v) for v in head],
        }
