"""Tests for actuator plots and the verification script."""

import shutil
import tempfile
from pathlib import Path

import numpy as np
import pytest

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt

from kresling.config import RigConfig
from kresling.control.tension import TensionVector
from kresling.scripts.verify import run_verification
from kresling.sim.kinematics import ActuatorKinematics
from kresling.viz.actuator_viz import plot_actuator, plot_tension_history, tension_color


@pytest.fixture
def tmp_dir():
    d = Path(tempfile.mkdtemp())
    yield d
    shutil.rmtree(d)


@pytest.fixture
def kin():
    k = ActuatorKinematics(RigConfig())
    k.advance(TensionVector(0.8, 0.1, 0.3, 0.0))
    return k


class TestPlotFunctions:
    def test_plot_actuator_new_axes(self, kin):
        ax = plot_actuator(kin, TensionVector(0.8, 0.1, 0.3, 0.0))
        assert ax.name == "3d"
        assert "comp=" in ax.get_title()
        plt.close(ax.figure)

    def test_plot_actuator_existing_axes(self, kin):
        fig = plt.figure()
        ax = fig.add_subplot(111, projection="3d")
        result = plot_actuator(kin, ax=ax)
        assert result is ax
        plt.close(fig)

    def test_plot_tension_history(self):
        history = np.random.rand(50, 4)
        fig = plot_tension_history(history)
        assert isinstance(fig, plt.Figure)
        assert len(fig.axes) == 4
        plt.close(fig)

    def test_plot_tension_history_with_commands(self, tmp_dir):
        history = np.random.rand(20, 4)
        commands = np.full((20, 4), np.nan)
        commands[::3] = 93
        save_path = str(tmp_dir / "tensions.png")

        fig = plot_tension_history(history, np.arange(20) * 16.0, commands, save_path=save_path)
        plt.close(fig)
        assert Path(save_path).exists()
        assert Path(save_path).stat().st_size > 0


def test_tension_color_endpoints():
    assert tension_color(0.0) == pytest.approx((0.0, 0.4, 1.0))
    assert tension_color(1.0) == pytest.approx((1.0, 0.2, 0.2))
    assert tension_color(5.0) == tension_color(1.0)


def test_run_verification(tmp_dir, capsys):
    plot_path = str(tmp_dir / "verify.png")
    run_verification(RigConfig(), plot_path)

    out = capsys.readouterr().out
    assert "VERIFICATION COMPLETE" in out
    assert "180" in out
    assert Path(plot_path).exists()
