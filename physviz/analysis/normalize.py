"""
Normalization of analyzer JSON into the raw scenario shape.

LLM extraction follows a loose, human-oriented schema (problemType,
objects, nested initialVelocity). This module flattens it into the
per-family parameter names the scenario validator expects, applying the
analyzer-layer defaults (gravity 9.8, a stationary second body, ...).
It never validates: that stays the core's job.
"""

from __future__ import annotations

import re
from numbers import Real
from typing import Any, Mapping

import structlog

from physviz.models.scenario import KNOWN_TUNABLE_PARAMETERS

logger = structlog.get_logger(__name__)

DEFAULT_GRAVITY = 9.8
DEFAULT_SPEED = 10.0

DIRECTION_ANGLES = {
    "up": 90.0,
    "upward": 90.0,
    "right": 0.0,
    "forward": 0.0,
    "left": 180.0,
    "down": -90.0,
    "downward": -90.0,
}

FAMILY_ALIASES = {
    "free fall": "projectile",
    "freefall": "projectile",
    "kinematics": "linear",
    "elastic collision": "collision",
    "inclined plane": "incline",
    "circular motion": "circular",
}


def _number(value: Any) -> float | None:
    if isinstance(value, Real) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _slug(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "object"


def _vector(value: Any) -> dict[str, float]:
    if isinstance(value, Mapping):
        return {"x": _number(value.get("x")) or 0.0, "y": _number(value.get("y")) or 0.0}
    return {"x": 0.0, "y": 0.0}


def _entities(objects: list[Any]) -> list[dict[str, Any]]:
    entities = []
    used: set[str] = set()
    for i, obj in enumerate(objects):
        if not isinstance(obj, Mapping):
            continue
        name = str(obj.get("name") or f"Object {i + 1}")
        entity_id = str(obj.get("id") or _slug(name))
        if entity_id in used:
            entity_id = f"{entity_id}-{i + 1}"
        used.add(entity_id)
        
        entity: dict[str, Any] = {
            "id": entity_id,
            "name": name,
            "initialPosition": _vector(obj.get("initialPosition")),
        }
        mass = _number(obj.get("mass"))
        if mass is not None and mass > 0:
            entity["mass"] = mass
        for key in ("shape", "color"):
            if isinstance(obj.get(key), str):
                entity[key] = obj[key]
        entities.append(entity)
    return entities


def _initial_velocity(params: Mapping[str, Any]) -> tuple[float | None, str | None, float | None]:
    """(magnitude, direction, angle) from initialVelocity or a bare velocity."""
    iv = params.get("initialVelocity", params.get("velocity"))
    if isinstance(iv, Mapping):
        direction = iv.get("direction")
        return (
            _number(iv.get("magnitude")),
            direction.lower() if isinstance(direction, str) else None,
            _number(iv.get("angle")),
        )
    return _number(iv), None, None


def _acceleration(params: Mapping[str, Any]) -> tuple[float | None, float | None]:
    acc = params.get("acceleration")
    if isinstance(acc, Mapping):
        return _number(acc.get("x")), _number(acc.get("y"))
    return _number(acc), None


def normalize_family(value: Any) -> str:
    family = str(value or "").strip().lower()
    return FAMILY_ALIASES.get(family, family)


def normalize_analysis(parsed: Mapping[str, Any]) -> dict[str, Any]:
    """
    Convert analyzer JSON into a raw scenario mapping.
    
    Args:
        parsed: Decoded analyzer output in the extraction-prompt schema
    
    Returns:
        Mapping with motionFamily, entities, parameters,
        adjustableParameters, units and description
    """
    family = normalize_family(parsed.get("problemType", parsed.get("motionFamily")))
    objects = parsed.get("objects", parsed.get("entities")) or []
    if not isinstance(objects, list):
        objects = []
    entities = _entities(objects)
    
    params_in = parsed.get("parameters") or {}
    if not isinstance(params_in, Mapping):
        params_in = {}
    
    magnitude, direction, iv_angle = _initial_velocity(params_in)
    acc_x, acc_y = _acceleration(params_in)
    gravity = _number(params_in.get("gravity"))
    if gravity is None and acc_y is not None and acc_y < 0:
        gravity = -acc_y
    if gravity is None:
        gravity = DEFAULT_GRAVITY
    
    angle = _number(params_in.get("angle"))
    if angle is None:
        angle = iv_angle
    
    parameters: dict[str, float] = {}
    
    if family == "projectile":
        if angle is None:
            angle = DIRECTION_ANGLES.get(direction or "", 90.0)
        parameters.update({
            "velocity": magnitude if magnitude is not None else DEFAULT_SPEED,
            "angle": angle,
            "gravity": gravity,
        })
    
    elif family == "linear":
        speed = magnitude if magnitude is not None else 0.0
        if direction == "left":
            speed = -abs(speed)
        parameters.update({
            "velocity": speed,
            "acceleration": acc_x if acc_x is not None else 0.0,
        })
        duration = _number(params_in.get("time"))
        if duration is not None and duration > 0:
            parameters["time"] = duration
    
    elif family == "collision":
        masses = [e.get("mass", 1.0) for e in entities[:2]]
        speeds = [
            _number(obj.get("velocity")) if isinstance(obj, Mapping) else None
            for obj in objects[:2]
        ]
        if speeds and speeds[0] is None:
            speeds[0] = magnitude
        if len(masses) == 2:
            parameters.update({
                "m1": masses[0],
                "m2": masses[1],
                "v1": speeds[0] if speeds[0] is not None else 0.0,
                "v2": speeds[1] if len(speeds) > 1 and speeds[1] is not None else 0.0,
            })
    
    elif family == "pendulum":
        length = _number(params_in.get("length", params_in.get("distance")))
        if length is not None:
            parameters["length"] = length
        parameters["angle"] = angle if angle is not None else 15.0
        parameters["gravity"] = gravity
    
    elif family == "incline":
        parameters.update({
            "angle": angle if angle is not None else 30.0,
            "gravity": gravity,
            "velocity": magnitude if magnitude is not None else 0.0,
            "friction": _number(params_in.get("friction")) or 0.0,
        })
        distance = _number(params_in.get("distance"))
        if distance is not None and distance > 0:
            parameters["distance"] = distance
    
    elif family == "circular":
        radius = _number(params_in.get("radius", params_in.get("distance")))
        if radius is not None:
            parameters["radius"] = radius
        if magnitude is not None:
            parameters["velocity"] = magnitude
    
    if family != "collision" and entities and "mass" in entities[0]:
        parameters["mass"] = entities[0]["mass"]
    
    allowed = KNOWN_TUNABLE_PARAMETERS | parameters.keys()
    requested = parsed.get("adjustableParameters") or []
    if not isinstance(requested, list):
        requested = []
    adjustable = [name for name in requested if isinstance(name, str) and name in allowed]
    dropped = [name for name in requested if name not in adjustable]
    if dropped:
        logger.debug("Dropped unrecognized adjustable parameters", dropped=dropped)
    
    units = parsed.get("units") or {}
    if not isinstance(units, Mapping):
        units = {}
    
    description = parsed.get("description")
    
    return {
        "motionFamily": family,
        "entities": entities,
        "parameters": parameters,
        "adjustableParameters": adjustable,
        "units": {str(k): str(v) for k, v in units.items()},
        "description": description if isinstance(description, str) else "",
    }
