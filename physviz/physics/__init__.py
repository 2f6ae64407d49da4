"""
Closed-form physics for the simulation core.

Provides the per-family kinematics library, the elastic collision event
model, dispatch shared by the stepper and renderers, and validation of
raw scenario input.
"""

from physviz.physics.kinematics import KinematicSample
from physviz.physics.collision import CollisionEvent, elastic_collision, resolve_collision
from physviz.physics.motion import (
    evaluate_entity,
    evaluate_frame,
    sample_trajectory,
    terminal_time,
)
from physviz.physics.validator import ScenarioValidator, validate_scenario

__all__ = [
    "KinematicSample",
    "CollisionEvent",
    "elastic_collision",
    "resolve_collision",
    "evaluate_entity",
    "evaluate_frame",
    "sample_trajectory",
    "terminal_time",
    "ScenarioValidator",
    "validate_scenario",
]
