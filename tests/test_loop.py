"""Tests for the simulation loop orchestration."""

import numpy as np
import pytest

from kresling.config import RigConfig
from kresling.control.tension import TensionVector
from kresling.loop import SimulationLoop
from kresling.tracking.synthetic import synthetic_hand

FIST = {"index": 1.0, "middle": 1.0, "ring": 1.0, "pinky": 1.0}


class FakeTransport:
    def __init__(self, connected=True):
        self.is_connected = connected
        self.lines = []

    def write(self, text):
        self.lines.append(text)


@pytest.fixture
def cfg():
    return RigConfig()


def test_manual_input_without_detector(cfg):
    loop = SimulationLoop(cfg)
    state = loop.tick(16.0, hands=None, pressed={"q"})

    assert not state.hand_detected
    assert state.tensions.up == pytest.approx(0.015)
    assert loop.kinematics.bend_angle_x > 0


def test_manual_input_with_no_hand_visible(cfg):
    loop = SimulationLoop(cfg)
    state = loop.tick(16.0, hands=[], pressed={"w"})
    assert state.tensions.down == pytest.approx(0.015)


def test_hand_takes_priority_over_keys(cfg):
    loop = SimulationLoop(cfg)
    state = loop.tick(16.0, hands=[synthetic_hand(FIST)], pressed={"a", "s", "d", "f"})

    assert state.hand_detected
    assert state.tensions.to_array() == pytest.approx([1.0, 1.0, 1.0, 1.0])
    assert state.compression == pytest.approx(0.99)


def test_rejected_hand_keeps_tensions_and_ignores_keys(cfg):
    tensions = TensionVector(0.2, 0.2, 0.2, 0.2)
    loop = SimulationLoop(cfg, tensions=tensions)
    small = synthetic_hand(FIST, palm_size=4.0)

    state = loop.tick(16.0, hands=[small], pressed={"q"})
    assert state.hand_detected
    assert state.tensions.to_array() == [0.2, 0.2, 0.2, 0.2]


def test_shared_tension_vector_is_used_in_place(cfg):
    tensions = TensionVector()
    loop = SimulationLoop(cfg, tensions=tensions)
    loop.tick(16.0, hands=[synthetic_hand({"index": 1.0})])
    assert tensions.up == pytest.approx(1.0)

    # A UI adapter writing through the same vector is picked up next tick
    tensions.set("up", 0.0)
    tensions.set("right", 1.0)
    loop.tick(32.0)
    assert loop.kinematics.head_position()[0] > 0


def test_out_of_range_tensions_are_clamped(cfg):
    tensions = TensionVector(1.7, -0.3, 0.5, 0.5)
    loop = SimulationLoop(cfg, tensions=tensions)
    state = loop.tick(16.0)
    assert state.tensions.to_array() == [1.0, 0.0, 0.5, 0.5]


def test_no_send_when_disconnected(cfg):
    transport = FakeTransport(connected=False)
    loop = SimulationLoop(cfg, transport=transport)
    state = loop.tick(1000.0, pressed={"q"})
    assert state.command is None
    assert transport.lines == []


def test_no_send_without_transport(cfg):
    loop = SimulationLoop(cfg)
    assert loop.tick(1000.0).command is None


def test_sends_at_fixed_cadence(cfg):
    transport = FakeTransport()
    loop = SimulationLoop(cfg, transport=transport)

    # 60 fps for one second
    commands = []
    for frame in range(60):
        now = frame * 1000.0 / 60
        state = loop.tick(now, pressed={"q"})
        if state.command is not None:
            commands.append(state.command)

    assert len(transport.lines) == len(commands)
    assert 10 <= len(commands) <= 20
    # Up wire is being wound steadily; other wires stop
    for cmd in commands:
        assert cmd.up > cfg.servo_stop
        assert cmd.down == cmd.left == cmd.right == cfg.servo_stop


def test_state_reports_kinematics(cfg):
    loop = SimulationLoop(cfg)
    state = loop.tick(16.0, hands=[synthetic_hand({"pinky": 0.5})])
    np.testing.assert_allclose(state.head, loop.kinematics.head_position())
    assert state.compression == loop.kinematics.compression

    # State snapshot does not alias the live vector
    loop.tensions.right = 0.0
    assert state.tensions.right == pytest.approx(0.5)


def test_open_hand_scenario(cfg):
    loop = SimulationLoop(cfg)
    state = loop.tick(16.0, hands=[synthetic_hand()])
    np.testing.assert_allclose(state.head, [0.0, cfg.seg_count * cfg.seg_height, 0.0], atol=1e-6)
    assert state.compression == 0.0
