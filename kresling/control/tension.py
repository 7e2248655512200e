"""
Wire tension state and its two input sources.

TensionVector is the single piece of shared mutable state in the rig. It is
owned by the simulation loop and written by exactly one source per tick:
TensionEstimator when a hand is visible, ManualOverride otherwise.

Landmark indices follow the 21-point hand model:
    0 = wrist, 9 = middle finger MCP,
    8 / 12 / 16 / 20 = index / middle / ring / pinky tips
"""

import math
from dataclasses import dataclass
from typing import Iterable, Sequence

from kresling.config import RigConfig

WIRES = ("up", "down", "left", "right")

WRIST = 0
MIDDLE_MCP = 9

# Fingertip driving each wire
WIRE_TIPS = {
    "up": 8,  # index
    "down": 12,  # middle
    "left": 16,  # ring
    "right": 20,  # pinky
}

# Keyboard pairs (increase, decrease) per wire
MANUAL_KEYS = {
    "up": ("q", "a"),
    "down": ("w", "s"),
    "left": ("e", "d"),
    "right": ("r", "f"),
}


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


def remap(value: float, in_lo: float, in_hi: float, out_lo: float, out_hi: float) -> float:
    """Linear map of value from [in_lo, in_hi] onto [out_lo, out_hi] (unclamped)."""
    return out_lo + (value - in_lo) * (out_hi - out_lo) / (in_hi - in_lo)


def planar_distance(a, b) -> float:
    """Distance between two keypoints in the image plane."""
    return math.hypot(a.x - b.x, a.y - b.y)


@dataclass
class TensionVector:
    """Normalized pull on each of the four wires (0 = slack, 1 = taut)."""

    up: float = 0.0
    down: float = 0.0
    left: float = 0.0
    right: float = 0.0

    def clamp(self):
        """Clamp every wire to [0, 1] in place."""
        for wire in WIRES:
            setattr(self, wire, clamp(getattr(self, wire)))

    def set(self, wire: str, value: float):
        """Set one wire, clamped. Used by UI adapters such as sliders."""
        if wire not in WIRES:
            raise KeyError(f"Unknown wire: {wire}")
        setattr(self, wire, clamp(float(value)))

    def copy(self) -> "TensionVector":
        return TensionVector(self.up, self.down, self.left, self.right)

    def assign(self, other: "TensionVector"):
        """Overwrite all four wires from another vector."""
        self.up, self.down, self.left, self.right = other.to_array()

    def to_array(self) -> list[float]:
        """Return tensions as [up, down, left, right]."""
        return [self.up, self.down, self.left, self.right]

    def as_dict(self) -> dict:
        return {wire: getattr(self, wire) for wire in WIRES}


class TensionEstimator:
    """Turns one hand's landmarks into wire tensions from finger curl."""

    def __init__(self, config: RigConfig):
        self.config = config

    def curl(self, keypoints: Sequence, tip: int, palm_size: float) -> float:
        """Normalized curl of one finger: 0 when extended, 1 when fully curled."""
        ratio = planar_distance(keypoints[WRIST], keypoints[tip]) / palm_size
        return clamp(
            remap(ratio, self.config.ratio_extended, self.config.ratio_curled, 0.0, 1.0)
        )

    def estimate(self, keypoints: Sequence):
        """Compute a TensionVector, or None when the frame is unreliable."""
        if keypoints is None or len(keypoints) <= max(WIRE_TIPS.values()):
            return None

        palm_size = planar_distance(keypoints[WRIST], keypoints[MIDDLE_MCP])
        # Hand too small / too far away to trust
        if palm_size < self.config.min_palm_size:
            return None

        return TensionVector(
            **{wire: self.curl(keypoints, tip, palm_size) for wire, tip in WIRE_TIPS.items()}
        )

    def update(self, keypoints: Sequence, tensions: TensionVector) -> bool:
        """Write estimated tensions into the shared vector.

        Returns False (and leaves tensions untouched) for rejected frames.
        """
        estimate = self.estimate(keypoints)
        if estimate is None:
            return False
        tensions.assign(estimate)
        return True


class ManualOverride:
    """Keyboard nudges applied while no hand is visible."""

    def __init__(self, config: RigConfig):
        self.step = config.manual_step

    def apply(self, pressed: Iterable[str], tensions: TensionVector) -> bool:
        """Apply one tick of key presses. Returns True if anything changed."""
        keys = {k.lower() for k in pressed}
        changed = False
        for wire, (inc, dec) in MANUAL_KEYS.items():
            value = getattr(tensions, wire)
            if inc in keys:
                value += self.step
                changed = True
            if dec in keys:
                value -= self.step
                changed = True
            setattr(tensions, wire, value)

        if changed:
            tensions.clamp()
        return changed
