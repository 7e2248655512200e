"""Hand-tracked control of a Kresling origami actuator."""

from kresling.config import RigConfig, load_config
from kresling.control.tension import TensionVector
from kresling.loop import SimulationLoop, TickState

__version__ = "0.1.0"

__all__ = [
    "RigConfig",
    "load_config",
    "TensionVector",
    "SimulationLoop",
    "TickState",
]
