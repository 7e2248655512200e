"""OpenCV overlays for the camera preview."""

import cv2 as cv

from kresling.control.tension import WIRE_TIPS

FINGER_CHAINS = [
    [0, 1, 2, 3, 4],  # thumb
    [0, 5, 6, 7, 8],  # index
    [0, 9, 10, 11, 12],  # middle
    [0, 13, 14, 15, 16],  # ring
    [0, 17, 18, 19, 20],  # pinky
]


def draw_hand_overlay(frame_bgr, keypoints):
    """Skeleton in green, joints in red, wire fingertips highlighted.

    ``keypoints`` are in pixel space of the (already mirrored) ``frame_bgr``.
    """

    def px(p):
        return int(p.x), int(p.y)

    for chain in FINGER_CHAINS:
        for a, b in zip(chain, chain[1:]):
            cv.line(frame_bgr, px(keypoints[a]), px(keypoints[b]), (0, 255, 0), 2)
    for p in keypoints:
        cv.circle(frame_bgr, px(p), 3, (0, 0, 255), -1)
    for idx in WIRE_TIPS.values():
        cv.circle(frame_bgr, px(keypoints[idx]), 5, (0, 255, 0), -1)


def draw_status(frame_bgr, state, connected: bool, fps: float = 0.0):
    """HUD with compression, head height, tensions and link state."""
    t = state.tensions
    lines = [
        f"Comp: {state.compression * 100:.0f}%   Head Y: {state.head[1]:.1f}",
        f"U {t.up:.2f}  D {t.down:.2f}  L {t.left:.2f}  R {t.right:.2f}",
        f"{'HAND' if state.hand_detected else 'KEYS'}  "
        f"{'SERIAL' if connected else 'offline'}  FPS {fps:4.1f}",
    ]
    for i, text in enumerate(lines):
        cv.putText(frame_bgr, text, (8, 18 + 18 * i),
                   cv.FONT_HERSHEY_SIMPLEX, 0.45, (255, 255, 255), 1, cv.LINE_AA)
