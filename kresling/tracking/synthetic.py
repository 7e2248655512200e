"""
Synthetic hand keypoints for testing without a camera.

Builds a 21-point hand in pixel space whose fingertip-to-wrist distances
produce a requested curl per finger, so the tension pipeline can be driven
deterministically.

Usage:
    hand = synthetic_hand({"index": 1.0})          # index curled, rest open
    seq = curl_sequence(num_frames=40, seed=0)      # smooth open/close cycle
"""

import numpy as np

from kresling.config import RigConfig
from kresling.tracking.frames import NUM_LANDMARKS, Keypoint

FINGERS = ("thumb", "index", "middle", "ring", "pinky")

# Landmark indices per finger, base to tip
FINGER_CHAINS = {
    "thumb": (1, 2, 3, 4),
    "index": (5, 6, 7, 8),
    "middle": (9, 10, 11, 12),
    "ring": (13, 14, 15, 16),
    "pinky": (17, 18, 19, 20),
}

# Fan direction of each finger, degrees from straight up
FINGER_SPREAD_DEG = {
    "thumb": -50.0,
    "index": -12.0,
    "middle": 0.0,
    "ring": 10.0,
    "pinky": 20.0,
}


def synthetic_hand(
    curls: dict = None,
    palm_size: float = 60.0,
    wrist: tuple = (160.0, 200.0),
    config: RigConfig = None,
) -> tuple[Keypoint, ...]:
    """21 keypoints with the given curl (0 open .. 1 fist) per finger.

    Fingers not named in ``curls`` are fully extended. Tip distances use the
    extended/curled ratios of ``config`` (defaults if omitted).
    """
    config = config or RigConfig()
    curls = curls or {}
    wx, wy = wrist
    points = [None] * NUM_LANDMARKS
    points[0] = Keypoint(wx, wy)

    for finger in FINGERS:
        curl = float(np.clip(curls.get(finger, 0.0), 0.0, 1.0))
        ratio = config.ratio_extended + curl * (config.ratio_curled - config.ratio_extended)

        angle = np.radians(FINGER_SPREAD_DEG[finger])
        direction = np.array([np.sin(angle), -np.cos(angle)])  # image y grows downward

        base = np.array([wx, wy]) + direction * palm_size
        tip = np.array([wx, wy]) + direction * palm_size * ratio

        chain = FINGER_CHAINS[finger]
        for k, idx in enumerate(chain):
            p = base + (tip - base) * (k / (len(chain) - 1))
            points[idx] = Keypoint(float(p[0]), float(p[1]))

    return tuple(points)


def curl_sequence(num_frames: int = 60, seed: int = 0) -> list[dict]:
    """Smooth per-finger curl trajectories, one dict per frame."""
    rng = np.random.default_rng(seed)
    t = np.linspace(0, 2 * np.pi, num_frames)

    tracks = {}
    for finger in FINGERS:
        freq = rng.uniform(0.5, 1.5)
        phase = rng.uniform(0, 2 * np.pi)
        tracks[finger] = 0.5 + 0.5 * np.sin(freq * t + phase)

    return [{f: float(tracks[f][i]) for f in FINGERS} for i in range(num_frames)]
