"""
PhysViz

Turns natural-language physics word problems into interactive,
closed-form simulations of projectile, linear, collision, pendulum,
incline and circular motion.
"""

from physviz.engine import VisualizationEngine, get_provider
from physviz.models.scenario import Scenario, Entity, MotionFamily
from physviz.models.frame import FrameState, EntityFrame
from physviz.physics.validator import ScenarioValidator, validate_scenario
from physviz.simulation.session import SimulationSession
from physviz.simulation.stepper import SimulationConfig, TerminalPolicy

__version__ = "0.1.0"

__all__ = [
    # Core
    "VisualizationEngine",
    "get_provider",
    "SimulationSession",
    "SimulationConfig",
    "TerminalPolicy",
    # Models
    "Scenario",
    "Entity",
    "MotionFamily",
    "FrameState",
    "EntityFrame",
    # Validation
    "ScenarioValidator",
    "validate_scenario",
]
