"""
Bench verification of the actuator model and motor controller.

Prints the reference scenarios so the numbers can be checked against the
physical rig before connecting the servos.

Usage:
    kresling-verify
    kresling-verify --config configs/default.yaml --plot outputs/verify.png
"""

import argparse

import numpy as np

from kresling.config import load_config
from kresling.control.motor import ProportionalMotorController
from kresling.control.tension import TensionEstimator, TensionVector
from kresling.sim.kinematics import ActuatorKinematics
from kresling.tracking.synthetic import curl_sequence, synthetic_hand


class RecordingTransport:
    """Collects written lines instead of sending them."""

    is_connected = True

    def __init__(self):
        self.lines = []

    def write(self, text: str):
        self.lines.append(text)


def run_verification(cfg, plot_path=None):
    """Comprehensive verification of the rig model."""
    print("=" * 70)
    print("KRESLING RIG VERIFICATION")
    print("=" * 70)
    print(f"  Segments:  {cfg.seg_count} x {cfg.seg_height} (min ratio {cfg.min_height_ratio})")
    print(f"  Radius:    {cfg.body_radius}, panels={cfg.panels_count}")
    print(f"  Bend:      sensitivity={cfg.bend_sensitivity}, limit={cfg.max_bend_limit_deg} deg/seg")
    print(f"  Servo:     stop={cfg.servo_stop}, gain={cfg.speed_gain}, "
          f"power=[{cfg.min_power}, {cfg.max_power_limit}], range={cfg.command_range}")

    kin = ActuatorKinematics(cfg)

    # Test 1: kinematic scenarios
    print(f"\n{'='*70}")
    print("1. KINEMATICS")
    print("=" * 70)
    print("  up    down  left  right |  seg H   comp   twist   bend   head (x, y, z)")
    print("  " + "-" * 74)
    cases = [
        (0, 0, 0, 0),
        (1, 1, 1, 1),
        (0.5, 0.5, 0.5, 0.5),
        (1, 0, 0, 0),
        (0, 1, 0, 0),
        (0, 0, 1, 0),
        (0, 0, 0, 1),
        (1, 0, 1, 0),
    ]
    for case in cases:
        kin.advance(TensionVector(*case))
        head = kin.head_position()
        print(f"  {case[0]:4.2f}  {case[1]:4.2f}  {case[2]:4.2f}  {case[3]:4.2f}  |"
              f" {kin.segment_height:6.2f}  {kin.compression:5.2f}"
              f"  {np.degrees(kin.twist_angle):5.1f}°  {np.degrees(kin.total_bend()):4.1f}°"
              f"  ({head[0]:6.1f}, {head[1]:6.1f}, {head[2]:6.1f})")

    # Test 2: controller
    print(f"\n{'='*70}")
    print("2. PROPORTIONAL CONTROL (single wire)")
    print("=" * 70)
    print("  prev   cur    delta    cmd")
    print("  " + "-" * 30)
    ctrl = ProportionalMotorController(cfg)
    for prev, cur in [(0.1, 0.3), (0.3, 0.1), (0.5, 0.5), (0.5, 0.503),
                      (0.5, 0.51), (0.5, 0.53), (0.5, 0.6)]:
        cmd = ctrl.wire_command(cur, prev)
        print(f"  {prev:4.2f}  {cur:5.3f}  {cur - prev:+6.3f}   {cmd:4d}")

    # Test 3: synthetic hand through the full pipeline
    print(f"\n{'='*70}")
    print("3. SYNTHETIC HAND -> SERIAL LINES")
    print("=" * 70)
    estimator = TensionEstimator(cfg)
    transport = RecordingTransport()
    ctrl = ProportionalMotorController(cfg, transport)
    tensions = TensionVector()
    history = []
    commands = []
    interval = cfg.send_interval_ms + 1
    for i, curls in enumerate(curl_sequence(num_frames=40, seed=0)):
        estimator.update(synthetic_hand(curls, config=cfg), tensions)
        kin.advance(tensions)
        cmd = ctrl.maybe_send(tensions, (i + 1) * interval)
        history.append(tensions.to_array())
        commands.append(cmd.to_array() if cmd else [np.nan] * 4)
    for line in transport.lines[:10]:
        print(f"  {line}")
    print(f"  ... {len(transport.lines)} lines total")

    if plot_path:
        import matplotlib
        matplotlib.use("Agg")
        import matplotlib.pyplot as plt

        from kresling.viz.actuator_viz import plot_tension_history

        fig = plot_tension_history(np.array(history), commands=np.array(commands),
                                   save_path=plot_path)
        plt.close(fig)
        print(f"  Saved plot: {plot_path}")

    print("\n" + "=" * 70)
    print("VERIFICATION COMPLETE")
    print("=" * 70)


def main():
    parser = argparse.ArgumentParser(description="Verify rig model and controller")
    parser.add_argument("--config", default="configs/default.yaml", help="Config file")
    parser.add_argument("--plot", help="Save a tension/command plot to this path")
    args = parser.parse_args()

    run_verification(load_config(args.config), args.plot)


if __name__ == "__main__":
    main()
