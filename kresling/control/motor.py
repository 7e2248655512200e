"""
Proportional (velocity) motor control.

Each wire is wound by a continuous-rotation servo. The controller does not
command positions: it commands a speed proportional to how fast the wire's
tension changed since the last send, centered on the servo's stop value.

    delta  = current - previous
    |delta| < dead zone       ->  STOP
    power  = floor(clip(|delta| * gain, min_power, max_power))
    delta > 0 (winding)       ->  STOP + power
    delta < 0 (unwinding)     ->  STOP - power

Commands go out as "up,down,left,right" (e.g. "133,53,93,93") at most once
per send interval.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np

from kresling.config import RigConfig
from kresling.control.tension import TensionVector


@dataclass
class MotorCommand:
    """One servo command per wire."""

    up: int
    down: int
    left: int
    right: int

    def to_array(self) -> list[int]:
        return [self.up, self.down, self.left, self.right]

    def to_wire(self) -> str:
        """Serialize as the comma-joined line the firmware expects (no newline)."""
        return ",".join(str(v) for v in self.to_array())


class ProportionalMotorController:
    """Rate-limited velocity controller for the four wire servos.

    The transport is any object with ``write(text)``; it is expected to
    append the line terminator and never block.
    """

    def __init__(self, config: RigConfig, transport=None):
        self.config = config
        self.transport = transport
        self.previous = TensionVector()
        self.last_send_ms = 0.0

    def wire_command(self, current: float, previous: float) -> int:
        """Servo command for a single wire."""
        cfg = self.config
        diff = current - previous
        abs_diff = abs(diff)

        # Tracking jitter
        if abs_diff < cfg.dead_zone_threshold:
            return cfg.servo_stop

        power = float(np.clip(abs_diff * cfg.speed_gain, cfg.min_power, cfg.max_power_limit))
        power = int(math.floor(power))

        if diff > 0:
            return cfg.servo_stop + power
        return cfg.servo_stop - power

    def compute(self, tensions: TensionVector) -> MotorCommand:
        """Commands for the current tensions against the last sent snapshot."""
        return MotorCommand(
            *(
                self.wire_command(cur, prev)
                for cur, prev in zip(tensions.to_array(), self.previous.to_array())
            )
        )

    def is_due(self, now_ms: float) -> bool:
        return now_ms - self.last_send_ms > self.config.send_interval_ms

    def maybe_send(self, tensions: TensionVector, now_ms: float) -> Optional[MotorCommand]:
        """Send one command line if the send interval has elapsed.

        Returns the command that was sent, or None if it was not yet due.
        """
        if not self.is_due(now_ms):
            return None

        command = self.compute(tensions)
        self.previous = tensions.copy()

        if self.transport is not None:
            self.transport.write(command.to_wire())
        self.last_send_ms = now_ms
        return command

    def reset(self, tensions: Optional[TensionVector] = None):
        """Re-baseline the velocity reference, e.g. after a reconnect."""
        self.previous = tensions.copy() if tensions is not None else TensionVector()
