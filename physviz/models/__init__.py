"""Core data models for the physics visualization engine."""

from physviz.models.vector import Vector2
from physviz.models.scenario import (
    Scenario,
    Entity,
    EntityShape,
    MotionFamily,
    KNOWN_TUNABLE_PARAMETERS,
    REQUIRED_PARAMETERS,
)
from physviz.models.frame import FrameState, EntityFrame

__all__ = [
    # Values
    "Vector2",
    # Scenario
    "Scenario",
    "Entity",
    "EntityShape",
    "MotionFamily",
    "KNOWN_TUNABLE_PARAMETERS",
    "REQUIRED_PARAMETERS",
    # Frames
    "FrameState",
    "EntityFrame",
]
