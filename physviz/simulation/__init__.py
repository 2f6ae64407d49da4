"""
Simulation runtime: parameter store, clock/stepper, session and the
cooperative animation loop.
"""

from physviz.simulation.parameters import ParameterStore
from physviz.simulation.stepper import (
    Stepper,
    SimulationConfig,
    SimulationStatus,
    TerminalPolicy,
)
from physviz.simulation.scheduler import AnimationLoop
from physviz.simulation.session import SimulationSession

__all__ = [
    "ParameterStore",
    "Stepper",
    "SimulationConfig",
    "SimulationStatus",
    "TerminalPolicy",
    "AnimationLoop",
    "SimulationSession",
]
