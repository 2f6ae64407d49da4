"""Per-tick kinematic snapshot emitted by the stepper."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from physviz.models.vector import Vector2


@dataclass(frozen=True)
class EntityFrame:
    """Kinematic state of one entity at one instant."""
    
    entity_id: str
    position: Vector2
    velocity: Vector2
    acceleration: Vector2
    
    @property
    def speed(self) -> float:
        """Speed magnitude in m/s."""
        return self.velocity.magnitude()


@dataclass(frozen=True)
class FrameState:
    """
    One tick's computed snapshot for all entities.
    
    A frame is a pure function of (scenario, parameters, sim_time). The
    parameter snapshot it was computed from travels with it so renderers
    can resample trajectories without touching the live parameter store.
    """
    
    sim_time: float
    entities: tuple[EntityFrame, ...]
    parameters: Mapping[str, float] = field(default_factory=dict)
    
    def __post_init__(self) -> None:
        if self.sim_time < 0:
            raise ValueError("sim_time must be >= 0")
        # Read-only copy; the store may keep changing after the frame is built.
        object.__setattr__(self, "parameters", MappingProxyType(dict(self.parameters)))
    
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FrameState):
            return NotImplemented
        return (
            self.sim_time == other.sim_time
            and self.entities == other.entities
            and dict(self.parameters) == dict(other.parameters)
        )
    
    def __hash__(self) -> int:
        return hash((self.sim_time, self.entities))
    
    def entity(self, entity_id: str) -> EntityFrame:
        for entity_frame in self.entities:
            if entity_frame.entity_id == entity_id:
                return entity_frame
        raise KeyError(entity_id)
    
    @property
    def primary(self) -> EntityFrame:
        return self.entities[0]
