"""Tests for keypoint conversion, the latest-frame slot and synthetic hands."""

import threading
from types import SimpleNamespace

import pytest

from kresling.tracking.frames import Keypoint, LatestFrameSlot, keypoints_from_landmarks
from kresling.tracking.synthetic import curl_sequence, synthetic_hand


def _lm(x, y, z=0.0):
    return SimpleNamespace(x=x, y=y, z=z)


def test_keypoints_to_pixels():
    pts = keypoints_from_landmarks([_lm(0.25, 0.5), _lm(1.0, 0.0)], 320, 240)
    assert pts[0] == Keypoint(80.0, 120.0, 0.0)
    assert pts[1].x == 320.0
    assert pts[1].y == 0.0


def test_keypoints_mirrored():
    pts = keypoints_from_landmarks([_lm(0.25, 0.5)], 320, 240, mirror=True)
    assert pts[0].x == pytest.approx(240.0)
    assert pts[0].y == pytest.approx(120.0)


def test_slot_empty():
    assert LatestFrameSlot().poll() is None


def test_slot_keeps_only_newest():
    slot = LatestFrameSlot()
    slot.publish(["a"])
    slot.publish(["b"])
    slot.publish([])
    assert slot.poll() == []
    assert slot.poll() is None


def test_slot_across_threads():
    slot = LatestFrameSlot()

    def producer():
        for i in range(200):
            slot.publish([i])

    t = threading.Thread(target=producer)
    t.start()
    t.join()
    assert slot.poll() == [199]


def test_synthetic_hand_shape():
    hand = synthetic_hand()
    assert len(hand) == 21
    assert all(isinstance(p, Keypoint) for p in hand)


def test_curl_sequence():
    seq = curl_sequence(num_frames=30, seed=3)
    assert len(seq) == 30
    assert all(0.0 <= v <= 1.0 for frame in seq for v in frame.values())
    assert curl_sequence(num_frames=30, seed=3) == seq
