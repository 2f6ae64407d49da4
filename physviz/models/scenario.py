"""
Scenario model - the validated description of one physics problem.

A Scenario is produced once from analyzer output (see
`physviz.physics.validator.ScenarioValidator`) and never mutated for the
lifetime of a simulation run. Submitting a new problem replaces it
wholesale.
"""

from __future__ import annotations

from enum import Enum
from types import MappingProxyType
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, field_validator

from physviz.models.vector import Vector2


class MotionFamily(str, Enum):
    """Closed-form motion families the simulation core can evaluate."""
    
    PROJECTILE = "projectile"
    LINEAR = "linear"
    COLLISION = "collision"
    PENDULUM = "pendulum"
    INCLINE = "incline"
    CIRCULAR = "circular"


class EntityShape(str, Enum):
    """Glyph used when drawing an entity."""
    
    CIRCLE = "circle"
    RECTANGLE = "rectangle"
    POINT = "point"


# Names the UI may always expose as sliders, whether or not the scenario
# declares a base value for them.
KNOWN_TUNABLE_PARAMETERS: frozenset[str] = frozenset({
    "velocity",
    "gravity",
    "angle",
    "mass",
    "acceleration",
    "friction",
})

REQUIRED_PARAMETERS: Mapping[MotionFamily, tuple[str, ...]] = MappingProxyType({
    MotionFamily.PROJECTILE: ("velocity", "angle", "gravity"),
    MotionFamily.LINEAR: ("velocity", "acceleration"),
    MotionFamily.COLLISION: ("m1", "m2", "v1", "v2"),
    MotionFamily.PENDULUM: ("length", "angle", "gravity"),
    MotionFamily.INCLINE: ("angle", "gravity"),
    MotionFamily.CIRCULAR: ("radius", "velocity"),
})

# Filled in by the validator when the raw scenario omits them.
OPTIONAL_PARAMETER_DEFAULTS: Mapping[MotionFamily, Mapping[str, float]] = MappingProxyType({
    MotionFamily.INCLINE: MappingProxyType({"velocity": 0.0, "friction": 0.0}),
})

# Must be strictly positive when declared.
POSITIVE_PARAMETERS: frozenset[str] = frozenset({"m1", "m2", "length", "radius", "mass"})

# Extra positivity constraints a family's formulas depend on.
FAMILY_POSITIVE_PARAMETERS: Mapping[MotionFamily, frozenset[str]] = MappingProxyType({
    MotionFamily.PENDULUM: frozenset({"gravity"}),
})

# (minimum, maximum) entity count; None means unbounded.
ENTITY_COUNTS: Mapping[MotionFamily, tuple[int, int | None]] = MappingProxyType({
    MotionFamily.PROJECTILE: (1, None),
    MotionFamily.LINEAR: (1, None),
    MotionFamily.COLLISION: (2, 2),
    MotionFamily.PENDULUM: (1, None),
    MotionFamily.INCLINE: (1, None),
    MotionFamily.CIRCULAR: (1, None),
})

DEFAULT_UNITS: Mapping[str, str] = MappingProxyType({
    "velocity": "m/s",
    "v1": "m/s",
    "v2": "m/s",
    "acceleration": "m/s²",
    "gravity": "m/s²",
    "angle": "deg",
    "mass": "kg",
    "m1": "kg",
    "m2": "kg",
    "length": "m",
    "radius": "m",
    "distance": "m",
    "time": "s",
    "friction": "",
})


class Entity(BaseModel):
    """
    A body taking part in the scenario.
    
    `initial_position` is the reference origin for every closed-form
    formula: launch point, pivot, orbit centre or top of the incline,
    depending on the motion family.
    """
    
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    
    id: str = Field(..., min_length=1)
    name: str = ""
    mass: float | None = Field(None, gt=0.0)
    initial_position: Vector2 = Field(default_factory=Vector2, alias="initialPosition")
    shape: EntityShape = EntityShape.CIRCLE
    color: str = "#02C39A"


class Scenario(BaseModel):
    """
    Validated structured description of a physics problem.
    
    Construct through `ScenarioValidator.validate`, which enforces the
    per-family parameter requirements before this model is built.
    """
    
    model_config = ConfigDict(frozen=True, populate_by_name=True)
    
    motion_family: MotionFamily = Field(..., alias="motionFamily")
    entities: tuple[Entity, ...] = Field(..., min_length=1)
    parameters: dict[str, float] = Field(default_factory=dict)
    adjustable_parameters: frozenset[str] = Field(
        default_factory=frozenset,
        alias="adjustableParameters",
    )
    units: dict[str, str] = Field(default_factory=dict)
    description: str = ""
    
    @field_validator("entities")
    @classmethod
    def _unique_entity_ids(cls, v: tuple[Entity, ...]) -> tuple[Entity, ...]:
        seen: set[str] = set()
        for entity in v:
            if entity.id in seen:
                raise ValueError(f"duplicate entity id '{entity.id}'")
            seen.add(entity.id)
        return v
    
    @property
    def primary_entity(self) -> Entity:
        """The entity single-body readouts refer to."""
        return self.entities[0]
    
    def entity(self, entity_id: str) -> Entity:
        """Look up an entity by id."""
        for entity in self.entities:
            if entity.id == entity_id:
                return entity
        raise KeyError(entity_id)
    
    def index_of(self, entity_id: str) -> int:
        for i, entity in enumerate(self.entities):
            if entity.id == entity_id:
                return i
        raise KeyError(entity_id)
    
    def unit_for(self, name: str) -> str:
        """Unit string for a parameter, falling back to the SI default."""
        return self.units.get(name, DEFAULT_UNITS.get(name, ""))
    
    def default_parameters(self) -> dict[str, float]:
        """Copy of the declared base parameter values."""
        return dict(self.parameters)
    
    def to_raw(self) -> dict:
        """Serialize back to the camelCase raw scenario shape."""
        data = self.model_dump(mode="json", by_alias=True)
        data["adjustableParameters"] = sorted(self.adjustable_parameters)
        return data
