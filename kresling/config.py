"""
Rig configuration.

All tuning constants for the actuator model, the motor controller and the
capture front end live in one immutable RigConfig that is built once at
startup and handed to each component.

Usage:
    cfg = load_config("configs/default.yaml")
    cfg = RigConfig(seg_count=6, speed_gain=600.0)
"""

import dataclasses
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from omegaconf import OmegaConf


@dataclass(frozen=True)
class RigConfig:
    """Configuration for the Kresling rig."""

    # Structure
    seg_count: int = 8  # Number of Kresling segments
    seg_height: float = 50.0  # Rest height of one segment
    body_radius: float = 30.0
    panels_count: int = 6  # Panels around one segment
    wire_base_scale: float = 3.5  # Wire anchor ring on the base plate (x radius)
    wire_head_scale: float = 1.3  # Wire anchor ring on the head plate (x radius)

    # Physical behaviour
    bend_sensitivity: float = 0.8
    max_twist_deg: float = 30.0
    max_bend_limit_deg: float = 10.0  # Per segment
    min_height_ratio: float = 0.15
    min_radius_ratio: float = 1.2  # Radial bulge at full compression

    # Motor control
    servo_stop: int = 93  # Command value at which the continuous servo stops
    speed_gain: float = 800.0
    min_power: int = 10
    max_power_limit: int = 87
    dead_zone_threshold: float = 0.005
    send_interval_ms: float = 50.0

    # Inputs
    manual_step: float = 0.015  # Per tick, per key
    min_palm_size: float = 10.0  # Pixels
    ratio_extended: float = 1.8  # Tip-to-wrist / palm size, open hand
    ratio_curled: float = 0.7  # Tip-to-wrist / palm size, fist

    # Devices
    baudrate: int = 115200
    serial_port: Optional[str] = None  # Auto-detect if None
    reset_delay: float = 2.0  # Seconds to wait for the ESP32 reset after opening
    camera_index: int = 0
    frame_width: int = 320
    frame_height: int = 240
    model_path: str = "hand_landmarker.task"
    mirror: bool = True

    def __post_init__(self):
        if self.seg_count < 1:
            raise ValueError(f"seg_count must be >= 1, got {self.seg_count}")
        if self.seg_height <= 0 or self.body_radius <= 0:
            raise ValueError("seg_height and body_radius must be positive")
        if self.panels_count < 3:
            raise ValueError(f"panels_count must be >= 3, got {self.panels_count}")
        if not 0.0 < self.min_height_ratio < 1.0:
            raise ValueError(
                f"min_height_ratio must be in (0, 1), got {self.min_height_ratio}"
            )
        if self.max_bend_limit_deg < 0:
            raise ValueError("max_bend_limit_deg must be >= 0")
        if not 0 <= self.min_power <= self.max_power_limit:
            raise ValueError(
                f"need 0 <= min_power <= max_power_limit, got "
                f"{self.min_power} / {self.max_power_limit}"
            )
        if self.dead_zone_threshold < 0 or self.send_interval_ms < 0:
            raise ValueError("dead_zone_threshold and send_interval_ms must be >= 0")
        if self.ratio_extended == self.ratio_curled:
            raise ValueError("ratio_extended and ratio_curled must differ")

    @property
    def min_height(self) -> float:
        return self.seg_height * self.min_height_ratio

    @property
    def command_range(self) -> tuple[int, int]:
        """Lowest and highest command value the controller can emit."""
        return (
            self.servo_stop - self.max_power_limit,
            self.servo_stop + self.max_power_limit,
        )


def load_config(path: Union[str, Path, None] = None, **overrides) -> RigConfig:
    """Load a RigConfig from the ``rig:`` section of a YAML file.

    Unknown keys are ignored. Keyword overrides win over file values.
    """
    values = {}
    if path is not None and Path(path).exists():
        cfg = OmegaConf.load(path)
        section = cfg.get("rig")
        if section is not None:
            # Filter to only RigConfig fields
            valid_fields = {f.name for f in dataclasses.fields(RigConfig)}
            values = {
                k: v
                for k, v in OmegaConf.to_container(section, resolve=True).items()
                if k in valid_fields
            }
    else:
        print("Using default config")

    values.update({k: v for k, v in overrides.items() if v is not None})
    return RigConfig(**values)
