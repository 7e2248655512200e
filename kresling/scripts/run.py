"""
Live rig controller.

Camera + MediaPipe hand tracking -> wire tensions -> actuator model ->
proportional servo commands over serial (~20 Hz).

Keys (camera window focused):
    Q/A  up wire +/-      W/S  down wire +/-
    E/D  left wire +/-    R/F  right wire +/-
    c    (re)connect serial
    p    plot actuator snapshot
    ESC  quit
Keyboard nudges are ignored while a hand is visible.

Usage:
    kresling-run
    kresling-run --port /dev/ttyUSB0 --config configs/default.yaml
    kresling-run --no-serial            # simulate only
    kresling-run --list-ports
"""

import argparse
import time

import cv2 as cv
import numpy as np

from kresling.config import load_config
from kresling.control.serial_link import SerialTransport, list_ports
from kresling.loop import SimulationLoop
from kresling.viz.overlay import draw_hand_overlay, draw_status

ESC_KEY = 27
WINDOW = "Kresling Rig"


class FPSMeter:
    """Rolling FPS measurement used for the HUD overlay."""

    def __init__(self, span: int = 30):
        self.t = []
        self.span = span

    def tick(self):
        self.t.append(time.monotonic())
        if len(self.t) > self.span:
            self.t.pop(0)

    def fps(self) -> float:
        if len(self.t) < 2:
            return 0.0
        dt = self.t[-1] - self.t[0]
        return (len(self.t) - 1) / dt if dt > 0 else 0.0


def connect_serial(transport: SerialTransport) -> bool:
    try:
        ok = transport.connect()
    except ValueError as e:
        print(f"ERROR: {e}")
        return False
    if not ok:
        print("Serial connection failed or was cancelled; simulating only.")
    return ok


def start_detector(cfg):
    try:
        from kresling.tracking.detector import HandDetector

        detector = HandDetector(cfg)
        detector.start()
    except (ImportError, FileNotFoundError, RuntimeError) as e:
        print(f"WARNING: hand tracking unavailable ({e}); keyboard control only.")
        return None
    return detector


def show_snapshot(loop: SimulationLoop):
    import matplotlib.pyplot as plt

    from kresling.viz.actuator_viz import plot_actuator

    plot_actuator(loop.kinematics, loop.tensions)
    plt.show(block=False)


def main():
    parser = argparse.ArgumentParser(description="Hand-tracked Kresling rig controller")
    parser.add_argument("--config", default="configs/default.yaml", help="Config file")
    parser.add_argument("--port", help="ESP32 serial port (auto-detect if not specified)")
    parser.add_argument("--baud", type=int, help="Serial baud rate")
    parser.add_argument("--cam", type=int, help="Camera index")
    parser.add_argument("--model", help="MediaPipe hand_landmarker.task path")
    parser.add_argument("--no-serial", action="store_true", help="Simulate without the rig")
    parser.add_argument("--list-ports", action="store_true", help="List serial ports and exit")
    args = parser.parse_args()

    if args.list_ports:
        ports = list_ports()
        print("\n".join(ports) if ports else "No serial ports found")
        return

    cfg = load_config(
        args.config,
        serial_port=args.port,
        baudrate=args.baud,
        camera_index=args.cam,
        model_path=args.model,
    )

    transport = SerialTransport(cfg.serial_port, cfg.baudrate, cfg.reset_delay)
    if not args.no_serial:
        connect_serial(transport)

    cap = cv.VideoCapture(cfg.camera_index)
    if cap.isOpened():
        cap.set(cv.CAP_PROP_FRAME_WIDTH, cfg.frame_width)
        cap.set(cv.CAP_PROP_FRAME_HEIGHT, cfg.frame_height)
        detector = start_detector(cfg)
    else:
        print(f"WARNING: camera {cfg.camera_index} not found; keyboard control only.")
        cap = None
        detector = None

    loop = SimulationLoop(cfg, transport=transport)
    fpsm = FPSMeter()
    blank = np.zeros((cfg.frame_height, cfg.frame_width, 3), dtype=np.uint8)
    t0 = time.monotonic()

    print("=" * 50)
    print("RUNNING  (ESC to quit, 'c' to connect serial)")
    print("=" * 50)

    try:
        while True:
            frame = blank.copy()
            if cap is not None:
                ok, captured = cap.read()
                if ok:
                    frame = captured

            now_ms = (time.monotonic() - t0) * 1000.0
            if detector is not None:
                detector.submit(frame, now_ms)
            hands = detector.latest() if detector is not None else None

            key = cv.waitKey(1) & 0xFF
            if key == ESC_KEY:
                break
            pressed = {chr(key)} if key != 255 else set()
            if "c" in pressed and not transport.is_connected:
                if connect_serial(transport):
                    loop.controller.reset(loop.tensions)
            if "p" in pressed:
                show_snapshot(loop)

            state = loop.tick(now_ms, hands, pressed)

            view = cv.flip(frame, 1) if cfg.mirror else frame
            if hands:
                draw_hand_overlay(view, hands[0])
            fpsm.tick()
            draw_status(view, state, transport.is_connected, fpsm.fps())
            cv.imshow(WINDOW, view)

    except KeyboardInterrupt:
        print("\nStopping...")
    finally:
        if detector is not None:
            detector.close()
        if cap is not None:
            cap.release()
        transport.disconnect()
        cv.destroyAllWindows()


if __name__ == "__main__":
    main()
