"""
Simulation loop: one tick of the rig.

Per tick:
    1. tensions <- hand estimate if a hand is visible, else keyboard nudges
    2. clamp tensions to [0, 1]
    3. advance the actuator kinematics
    4. send motor commands if the transport is connected and a send is due

The loop owns the shared TensionVector and passes it to every component.
"""

from dataclasses import dataclass
from typing import Iterable, Optional, Sequence

import numpy as np

from kresling.config import RigConfig
from kresling.control.motor import MotorCommand, ProportionalMotorController
from kresling.control.tension import ManualOverride, TensionEstimator, TensionVector
from kresling.sim.kinematics import ActuatorKinematics


@dataclass
class TickState:
    """What the rendering / UI side needs after a tick."""

    hand_detected: bool
    tensions: TensionVector
    head: np.ndarray
    compression: float
    command: Optional[MotorCommand] = None  # Set only on ticks that sent


class SimulationLoop:
    def __init__(
        self,
        config: RigConfig,
        transport=None,
        tensions: Optional[TensionVector] = None,
    ):
        self.config = config
        self.transport = transport
        self.tensions = tensions if tensions is not None else TensionVector()

        self.estimator = TensionEstimator(config)
        self.manual = ManualOverride(config)
        self.kinematics = ActuatorKinematics(config)
        self.controller = ProportionalMotorController(config, transport)

    @property
    def sending(self) -> bool:
        return self.transport is not None and self.transport.is_connected

    def tick(
        self,
        now_ms: float,
        hands: Optional[Sequence] = None,
        pressed: Iterable[str] = (),
    ) -> TickState:
        """Advance one frame.

        Args:
            now_ms: monotonic clock in milliseconds
            hands: detected hands (each a 21-keypoint sequence); None when the
                detector is missing or not ready yet
            pressed: manual override keys held this tick
        """
        hand_detected = bool(hands)
        if hand_detected:
            self.estimator.update(hands[0], self.tensions)
        else:
            self.manual.apply(pressed, self.tensions)
        self.tensions.clamp()

        self.kinematics.advance(self.tensions)

        command = None
        if self.sending:
            command = self.controller.maybe_send(self.tensions, now_ms)

        return TickState(
            hand_detected=hand_detected,
            tensions=self.tensions.copy(),
            head=self.kinematics.head_position(),
            compression=self.kinematics.compression,
            command=command,
        )
