"""
Scenario validation for analyzer output.

Analyzer output is untrusted JSON-like data. This module is the only
place malformed input is rejected; everything downstream may assume a
`Scenario` is internally consistent for its motion family.
"""

from __future__ import annotations

import math
from numbers import Real
from typing import Any, Mapping

import pydantic
import structlog

from physviz.errors import (
    MissingParameterError,
    UnknownMotionFamilyError,
    ValidationError,
)
from physviz.models.scenario import (
    ENTITY_COUNTS,
    FAMILY_POSITIVE_PARAMETERS,
    KNOWN_TUNABLE_PARAMETERS,
    OPTIONAL_PARAMETER_DEFAULTS,
    POSITIVE_PARAMETERS,
    REQUIRED_PARAMETERS,
    MotionFamily,
    Scenario,
)

logger = structlog.get_logger(__name__)


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class ScenarioValidator:
    """
    Validates raw scenario mappings and builds `Scenario` instances.
    
    Checks, in order:
    - motionFamily is a known family (fails closed, no default)
    - entities are present and their count fits the family
    - every required parameter is present and a finite number
    - declared parameters are finite numbers, masses/lengths positive,
      pendulum gravity positive
    - adjustableParameters only names declared or known tunable parameters
    """
    
    def __init__(self):
        self.logger = structlog.get_logger(__name__)
    
    def validate(self, raw: Any) -> Scenario:
        """
        Validate a raw scenario.
        
        Args:
            raw: Mapping in the camelCase raw scenario shape
        
        Returns:
            A validated, immutable Scenario
        
        Raises:
            UnknownMotionFamilyError: motionFamily missing from the known set
            MissingParameterError: a required parameter is absent or NaN
            ValidationError: any other structural problem
        """
        if isinstance(raw, Scenario):
            return raw
        if not isinstance(raw, Mapping):
            raise ValidationError(f"Scenario must be a mapping, got {type(raw).__name__}")
        
        family = self._motion_family(raw)
        entities = self._entities(raw, family)
        parameters = self._parameters(raw, family)
        adjustable = self._adjustable(raw, parameters)
        units = self._units(raw)
        
        description = raw.get("description") or ""
        if not isinstance(description, str):
            raise ValidationError("description must be a string")
        
        try:
            scenario = Scenario(
                motion_family=family,
                entities=entities,
                parameters=parameters,
                adjustable_parameters=adjustable,
                units=units,
                description=description,
            )
        except pydantic.ValidationError as e:
            raise ValidationError(self._format_pydantic_error(e)) from e
        
        self.logger.info(
            "Scenario validated",
            motion_family=family.value,
            entities=len(scenario.entities),
            adjustable=sorted(adjustable),
        )
        return scenario
    
    def _motion_family(self, raw: Mapping[str, Any]) -> MotionFamily:
        value = raw.get("motionFamily", raw.get("motion_family"))
        if value is None:
            raise UnknownMotionFamilyError(None)
        if isinstance(value, MotionFamily):
            return value
        if not isinstance(value, str):
            raise UnknownMotionFamilyError(value)
        try:
            return MotionFamily(value.strip().lower())
        except ValueError:
            raise UnknownMotionFamilyError(value) from None
    
    def _entities(self, raw: Mapping[str, Any], family: MotionFamily) -> list[dict[str, Any]]:
        entities = raw.get("entities")
        if not isinstance(entities, (list, tuple)) or not entities:
            raise ValidationError("Scenario needs at least one entity")
        
        minimum, maximum = ENTITY_COUNTS[family]
        if len(entities) < minimum or (maximum is not None and len(entities) > maximum):
            expected = str(minimum) if minimum == maximum else f"at least {minimum}"
            raise ValidationError(
                f"{family.value} motion needs {expected} entities, got {len(entities)}"
            )
        
        result = []
        for i, entity in enumerate(entities):
            if not isinstance(entity, Mapping):
                raise ValidationError(f"entities[{i}] must be a mapping")
            data = dict(entity)
            if not data.get("id"):
                data["id"] = f"entity-{i + 1}"
            if "mass" in data and data["mass"] is not None and not _is_number(data["mass"]):
                raise ValidationError(f"entities[{i}].mass must be a number")
            result.append(data)
        return result
    
    def _parameters(self, raw: Mapping[str, Any], family: MotionFamily) -> dict[str, float]:
        declared = raw.get("parameters") or {}
        if not isinstance(declared, Mapping):
            raise ValidationError("parameters must be a mapping of name to number")
        
        for name in REQUIRED_PARAMETERS[family]:
            value = declared.get(name)
            if not _is_number(value) or math.isnan(value):
                raise MissingParameterError(name, family.value)
        
        parameters: dict[str, float] = {}
        for name, value in declared.items():
            if not isinstance(name, str):
                raise ValidationError(f"Parameter names must be strings, got {name!r}")
            if not _is_number(value) or not math.isfinite(value):
                raise ValidationError(f"Parameter '{name}' must be a finite number, got {value!r}")
            parameters[name] = float(value)
        
        for name, default in OPTIONAL_PARAMETER_DEFAULTS.get(family, {}).items():
            parameters.setdefault(name, default)
        
        positive = POSITIVE_PARAMETERS | FAMILY_POSITIVE_PARAMETERS.get(family, frozenset())
        for name in positive & parameters.keys():
            if parameters[name] <= 0:
                raise ValidationError(f"Parameter '{name}' must be positive, got {parameters[name]}")
        
        return parameters
    
    def _adjustable(self, raw: Mapping[str, Any], parameters: Mapping[str, float]) -> frozenset[str]:
        adjustable = raw.get("adjustableParameters", raw.get("adjustable_parameters")) or []
        if isinstance(adjustable, str) or not isinstance(adjustable, (list, tuple, set, frozenset)):
            raise ValidationError("adjustableParameters must be a list of parameter names")
        
        allowed = KNOWN_TUNABLE_PARAMETERS | parameters.keys()
        unknown = [name for name in adjustable if name not in allowed]
        if unknown:
            raise ValidationError(f"Unrecognized adjustable parameters: {', '.join(map(str, unknown))}")
        return frozenset(adjustable)
    
    def _units(self, raw: Mapping[str, Any]) -> dict[str, str]:
        units = raw.get("units") or {}
        if not isinstance(units, Mapping):
            raise ValidationError("units must be a mapping of name to unit string")
        return {str(k): str(v) for k, v in units.items()}
    
    def _format_pydantic_error(self, error: pydantic.ValidationError) -> str:
        parts = []
        for err in error.errors():
            location = ".".join(str(p) for p in err["loc"])
            parts.append(f"{location}: {err['msg']}")
        return "Invalid scenario: " + "; ".join(parts)


_default_validator = ScenarioValidator()


def validate_scenario(raw: Any) -> Scenario:
    """Validate with a shared ScenarioValidator."""
    return _default_validator.validate(raw)
