"""Tests for body and wire geometry."""

import numpy as np
import pytest

from kresling.config import RigConfig
from kresling.control.tension import TensionVector
from kresling.sim.kinematics import ActuatorKinematics
from kresling.sim.mesh import (
    body_triangles,
    ring_radius,
    ring_vertices,
    segment_triangles,
    wire_segments,
)


@pytest.fixture
def kin():
    return ActuatorKinematics(RigConfig())


def test_rest_ring(kin):
    kin.advance(TensionVector())
    ring = ring_vertices(kin, 0)

    assert ring.shape == (6, 3)
    np.testing.assert_allclose(ring[0], [30.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(np.linalg.norm(ring[:, [0, 2]], axis=1), 30.0)
    np.testing.assert_allclose(ring[:, 1], 0.0, atol=1e-9)


def test_ring_bulges_and_twists_when_compressed(kin):
    kin.advance(TensionVector(1, 1, 1, 1))
    assert ring_radius(kin) == pytest.approx(30 + 6 * 0.99)

    ring = ring_vertices(kin, 2)
    angle = np.arctan2(ring[0, 2], ring[0, 0])
    assert angle == pytest.approx(2 * kin.twist_angle)
    np.testing.assert_allclose(ring[:, 1], kin.joints[2, 1], atol=1e-9)


def test_rings_follow_joint_orientation(kin):
    kin.advance(TensionVector(up=1.0))
    head_ring = ring_vertices(kin, kin.seg_count)
    centre = head_ring.mean(axis=0)
    np.testing.assert_allclose(centre, kin.head_position(), atol=1e-9)

    # Ring plane is perpendicular to the head's local Y axis
    normal = np.cross(head_ring[1] - head_ring[0], head_ring[2] - head_ring[0])
    normal /= np.linalg.norm(normal)
    rot_x = kin.rotations[-1][0]
    axis = np.array([0.0, np.cos(rot_x), np.sin(rot_x)])
    assert abs(np.dot(normal, axis)) == pytest.approx(1.0)


def test_triangle_counts(kin):
    kin.advance(TensionVector(0.3, 0.1, 0.2, 0.4))
    assert segment_triangles(kin, 0).shape == (12, 3, 3)
    assert body_triangles(kin).shape == (kin.seg_count * 12, 3, 3)


def test_mesh_above_floor():
    kin = ActuatorKinematics(RigConfig(max_bend_limit_deg=40.0, bend_sensitivity=4.0))
    kin.advance(TensionVector(right=1.0))
    assert np.all(body_triangles(kin)[..., 1] >= 0.0)


def test_wires_at_rest(kin):
    tensions = TensionVector(0.0, 0.2, 0.4, 0.6)
    kin.advance(tensions)
    wires = {w.name: w for w in wire_segments(kin, tensions)}

    assert set(wires) == {"up", "down", "left", "right"}
    np.testing.assert_allclose(wires["right"].start, [105.0, 0.0, 0.0], atol=1e-9)
    np.testing.assert_allclose(wires["up"].start, [0.0, 0.0, 105.0], atol=1e-9)
    np.testing.assert_allclose(wires["left"].start, [-105.0, 0.0, 0.0], atol=1e-9)
    assert wires["left"].tension == 0.4
    for w in wires.values():
        assert w.end[1] >= 0.0


def test_wire_head_anchor_radius(kin):
    tensions = TensionVector()
    kin.advance(tensions)
    head = kin.head_position()
    for w in wire_segments(kin, tensions):
        assert np.linalg.norm(w.end - head) == pytest.approx(30 * 1.3)
