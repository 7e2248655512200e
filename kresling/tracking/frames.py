"""
Hand keypoints and the hand-off between the detector and the tick loop.

The detector publishes whole frames from its own thread; the loop polls the
newest one once per tick. Only complete frames are ever exchanged.
"""

from dataclasses import dataclass
from queue import Empty, Full, Queue
from typing import Optional, Sequence

NUM_LANDMARKS = 21


@dataclass(frozen=True)
class Keypoint:
    """Hand landmark in source-video pixel space."""

    x: float
    y: float
    z: float = 0.0


def keypoints_from_landmarks(
    landmarks: Sequence, width: int, height: int, mirror: bool = False
) -> tuple[Keypoint, ...]:
    """Convert normalized (0..1) landmarks to pixel keypoints.

    With ``mirror`` the x axis is flipped to match a mirrored preview.
    """
    points = []
    for lm in landmarks:
        x = (1.0 - lm.x) if mirror else lm.x
        points.append(Keypoint(x * width, lm.y * height, lm.z * width))
    return tuple(points)


class LatestFrameSlot:
    """Single-slot channel: a new frame replaces any unread one."""

    def __init__(self):
        self._queue = Queue(maxsize=1)

    def publish(self, hands: list):
        while True:
            try:
                self._queue.put_nowait(hands)
                return
            except Full:
                try:
                    self._queue.get_nowait()  # drop the stale frame
                except Empty:
                    pass

    def poll(self) -> Optional[list]:
        """Newest unread frame, or None if nothing new arrived."""
        try:
            return self._queue.get_nowait()
        except Empty:
            return None
