"""
Serial link to the ESP32 wire-servo controller.

Streams motor command lines ("93,133,93,53\\n") at 115200 baud. Writes are
non-blocking and fire-and-forget: a failed write is reported and dropped.
"""

import time
from typing import Optional

import serial
import serial.tools.list_ports


def find_esp32_port() -> Optional[str]:
    """Auto-detect ESP32 serial port."""
    ports = serial.tools.list_ports.comports()

    # Common ESP32 USB-serial chip identifiers
    esp32_ids = ["CP210", "CH340", "SLAB", "Silicon Labs", "USB Serial"]

    for port in ports:
        desc = f"{port.description} {port.manufacturer or ''}"
        if any(id in desc for id in esp32_ids):
            return port.device

    # Fallback to first available
    if ports:
        return ports[0].device

    return None


def list_ports() -> list[str]:
    """Human-readable list of available serial ports."""
    return [f"{p.device}  {p.description}" for p in serial.tools.list_ports.comports()]


class SerialTransport:
    """Manages the serial connection used by the motor controller."""

    def __init__(
        self,
        port: Optional[str] = None,
        baudrate: int = 115200,
        reset_delay: float = 2.0,
    ):
        self.port = port
        self.baudrate = baudrate
        self.reset_delay = reset_delay
        self.serial: Optional[serial.Serial] = None

    @property
    def is_connected(self) -> bool:
        return self.serial is not None and self.serial.is_open

    def connect(self) -> bool:
        """Open the serial port. Returns False (after reporting why) on failure."""
        port = self.port or find_esp32_port()
        if not port:
            raise ValueError("No serial port specified and auto-detect failed")

        try:
            # write_timeout=0 makes writes non-blocking
            self.serial = serial.Serial(port, self.baudrate, timeout=0.1, write_timeout=0)
            time.sleep(self.reset_delay)  # Wait for ESP32 reset
            self.serial.reset_input_buffer()
        except serial.SerialException as e:
            print(f"Connection failed: {e}")
            self.serial = None
            return False

        self.port = port
        print(f"Serial connected: {port} @ {self.baudrate}")
        return True

    def disconnect(self):
        """Close serial connection."""
        if self.serial:
            self.serial.close()
            self.serial = None

    def write(self, text: str):
        """Send one line. Appends the newline terminator."""
        if not self.is_connected:
            return

        try:
            self.serial.write((text + "\n").encode("ascii"))
        except serial.SerialException as e:
            # Includes SerialTimeoutException when the output buffer is full
            print(f"Write error: {e}")
            # Drop any partial line so the next command starts clean
            self.serial.reset_output_buffer()

    def __enter__(self):
        self.connect()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.disconnect()
