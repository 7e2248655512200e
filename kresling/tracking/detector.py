"""
MediaPipe hand landmarker running in LIVE_STREAM mode.

Frames are submitted from the capture loop; results arrive on MediaPipe's
callback thread and are published to a LatestFrameSlot. ``latest()`` keeps
returning the last published frame until a newer one arrives, so a hand
stays "present" between detector updates.

Place the model file next to the working directory as hand_landmarker.task
(or point ``model_path`` at it).
"""

from pathlib import Path
from typing import Optional

import cv2 as cv
import mediapipe as mp

from kresling.config import RigConfig
from kresling.tracking.frames import LatestFrameSlot, keypoints_from_landmarks

BaseOptions = mp.tasks.BaseOptions
HandLandmarker = mp.tasks.vision.HandLandmarker
HandLandmarkerOptions = mp.tasks.vision.HandLandmarkerOptions
VisionRunningMode = mp.tasks.vision.RunningMode

MP_MIN_HAND_DETECTION_CONF = 0.5
MP_MIN_HAND_PRESENCE_CONF = 0.5
MP_MIN_TRACKING_CONF = 0.5


class HandDetector:
    """Asynchronous single-hand detector feeding the tension estimator."""

    def __init__(self, config: RigConfig, max_hands: int = 1):
        self.config = config
        self.max_hands = max_hands
        self.slot = LatestFrameSlot()
        self.is_ready = False
        self._landmarker = None
        self._hands: list = []
        self._last_ts_ms = -1

    def start(self):
        """Load the model and begin accepting frames."""
        model = Path(self.config.model_path)
        if not model.exists():
            raise FileNotFoundError(f"Missing model file: {model}")

        options = HandLandmarkerOptions(
            base_options=BaseOptions(model_asset_path=str(model)),
            running_mode=VisionRunningMode.LIVE_STREAM,
            num_hands=self.max_hands,
            min_hand_detection_confidence=MP_MIN_HAND_DETECTION_CONF,
            min_hand_presence_confidence=MP_MIN_HAND_PRESENCE_CONF,
            min_tracking_confidence=MP_MIN_TRACKING_CONF,
            result_callback=self._on_result,
        )
        try:
            self._landmarker = HandLandmarker.create_from_options(options)
        except (RuntimeError, ValueError) as e:
            raise RuntimeError(f"Hand landmarker failed to start: {e}") from e

        self.is_ready = True
        print("HandPose model loaded")

    def _on_result(self, result, output_image, timestamp_ms: int):
        height, width = output_image.height, output_image.width
        hands = [
            keypoints_from_landmarks(lm, width, height, mirror=self.config.mirror)
            for lm in (result.hand_landmarks or [])
        ]
        self.slot.publish(hands)

    def submit(self, frame_bgr, timestamp_ms: float):
        """Queue one BGR frame for detection. Timestamps must increase."""
        if not self.is_ready:
            return
        ts = int(timestamp_ms)
        if ts <= self._last_ts_ms:
            return
        self._last_ts_ms = ts

        rgb = cv.cvtColor(frame_bgr, cv.COLOR_BGR2RGB)
        image = mp.Image(image_format=mp.ImageFormat.SRGB, data=rgb)
        self._landmarker.detect_async(image, ts)

    def latest(self) -> Optional[list]:
        """Hands from the newest completed frame, or None before the model is ready."""
        if not self.is_ready:
            return None
        hands = self.slot.poll()
        if hands is not None:
            self._hands = hands
        return self._hands

    def close(self):
        if self._landmarker is not None:
            self._landmarker.close()
            self._landmarker = None
        self.is_ready = False

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
