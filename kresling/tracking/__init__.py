"""Hand tracking front end."""

from kresling.tracking.frames import Keypoint, LatestFrameSlot, keypoints_from_landmarks
from kresling.tracking.synthetic import curl_sequence, synthetic_hand

# The MediaPipe detector is optional (needs mediapipe + a model file)
try:
    from kresling.tracking.detector import HandDetector
except ImportError:
    pass

__all__ = [
    "Keypoint",
    "LatestFrameSlot",
    "keypoints_from_landmarks",
    "curl_sequence",
    "synthetic_hand",
]
