"""Tension inputs, motor control and the serial link."""

from kresling.control.tension import (
    WIRES,
    ManualOverride,
    TensionEstimator,
    TensionVector,
)
from kresling.control.motor import MotorCommand, ProportionalMotorController
from kresling.control.serial_link import SerialTransport, find_esp32_port

__all__ = [
    "WIRES",
    "ManualOverride",
    "TensionEstimator",
    "TensionVector",
    "MotorCommand",
    "ProportionalMotorController",
    "SerialTransport",
    "find_esp32_port",
]
