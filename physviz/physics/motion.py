"""
Dispatch from a scenario's motion family to its closed-form functions.

This is the seam the stepper and the renderers share: both evaluate
frames and trajectories through here, so a frame drawn from a sampled
trajectory matches the frame the stepper emitted for the same time.
"""

from __future__ import annotations

import math
from typing import Mapping

from physviz.errors import ComputationError
from physviz.models.frame import EntityFrame, FrameState
from physviz.models.scenario import MotionFamily, Scenario
from physviz.models.vector import Vector2
from physviz.physics import kinematics
from physviz.physics.collision import CollisionEvent, collision_motion, resolve_collision
from physviz.physics.kinematics import KinematicSample, MotionFunction

MOTION_FUNCTIONS: dict[MotionFamily, MotionFunction] = {
    MotionFamily.PROJECTILE: kinematics.projectile,
    MotionFamily.LINEAR: kinematics.linear,
    MotionFamily.PENDULUM: kinematics.pendulum,
    MotionFamily.INCLINE: kinematics.incline,
    MotionFamily.CIRCULAR: kinematics.circular,
}

# Families whose "simulation" is an instantaneous transition.
EVENT_FAMILIES: frozenset[MotionFamily] = frozenset({MotionFamily.COLLISION})


def resolve_event(scenario: Scenario, params: Mapping[str, float]) -> CollisionEvent | None:
    """Resolve the discrete event for event-driven families, None otherwise."""
    if scenario.motion_family not in EVENT_FAMILIES:
        return None
    try:
        return resolve_collision(scenario.entities, params)
    except ComputationError:
        raise
    except (ArithmeticError, ValueError, TypeError) as e:
        raise ComputationError(f"Collision could not be resolved: {e}") from e


def evaluate_entity(
    scenario: Scenario,
    index: int,
    params: Mapping[str, float],
    sim_time: float,
    event: CollisionEvent | None = None,
) -> KinematicSample:
    """
    Evaluate one entity at `sim_time`.
    
    Any failure inside a formula surfaces as ComputationError tagged with
    the entity and time.
    """
    entity = scenario.entities[index]
    t = max(sim_time, 0.0)
    
    try:
        if scenario.motion_family in EVENT_FAMILIES:
            if event is None:
                event = resolve_event(scenario, params)
            sample = collision_motion(entity, index, event, t)
        else:
            sample = MOTION_FUNCTIONS[scenario.motion_family](entity, params, t)
    except ComputationError as e:
        if e.entity_id is None:
            e.entity_id = entity.id
        e.sim_time = t
        raise
    except (ArithmeticError, ValueError, TypeError, KeyError) as e:
        raise ComputationError(
            f"Kinematics failed for '{entity.id}': {e}",
            entity_id=entity.id,
            sim_time=t,
        ) from e
    
    if not sample.is_finite():
        raise ComputationError(
            f"Kinematics produced a non-finite state for '{entity.id}'",
            entity_id=entity.id,
            sim_time=t,
        )
    
    return sample


def evaluate_frame(
    scenario: Scenario,
    params: Mapping[str, float],
    sim_time: float,
    event: CollisionEvent | None = None,
) -> FrameState:
    """Compute a full FrameState; all entities succeed or none do."""
    t = max(sim_time, 0.0)
    if event is None:
        event = resolve_event(scenario, params)
    
    entity_frames = []
    for i, entity in enumerate(scenario.entities):
        sample = evaluate_entity(scenario, i, params, t, event)
        entity_frames.append(EntityFrame(
            entity_id=entity.id,
            position=sample.position,
            velocity=sample.velocity,
            acceleration=sample.acceleration,
        ))
    
    return FrameState(sim_time=t, entities=tuple(entity_frames), parameters=params)


def sample_trajectory(
    scenario: Scenario,
    index: int,
    params: Mapping[str, float],
    until: float,
    step: float,
    event: CollisionEvent | None = None,
) -> list[Vector2]:
    """
    Positions of one entity sampled every `step` seconds from 0 to `until`.
    
    The end point at exactly `until` is always included so the polyline
    meets the entity glyph.
    """
    if step <= 0:
        raise ValueError("step must be positive")
    
    until = max(until, 0.0)
    if event is None:
        event = resolve_event(scenario, params)
    
    points = []
    n = int(math.floor(until / step + 1e-9))
    for k in range(n + 1):
        points.append(evaluate_entity(scenario, index, params, k * step, event).position)
    if n * step < until:
        points.append(evaluate_entity(scenario, index, params, until, event).position)
    return points


def terminal_time(
    scenario: Scenario,
    params: Mapping[str, float],
    min_flight_time: float = 0.0,
) -> float | None:
    """
    Time at which the motion reaches its natural end, if it has one.
    
    Projectiles end on landing, linear motion after its `time` parameter,
    pendulum and circular motion after one period, an incline block at the
    bottom of the slope or when it stops. With several entities the latest
    end wins.
    """
    family = scenario.motion_family
    
    try:
        if family is MotionFamily.PROJECTILE:
            landings = []
            for entity in scenario.entities:
                landing = kinematics.projectile_landing_time(entity, params)
                if landing is None or landing <= min_flight_time:
                    return None
                landings.append(landing)
            return max(landings)
        
        if family is MotionFamily.LINEAR:
            if "time" in params:
                duration = kinematics.param(params, "time")
                return duration if duration > 0 else None
            return None
        
        if family is MotionFamily.PENDULUM:
            return kinematics.pendulum_period(params)
        
        if family is MotionFamily.CIRCULAR:
            return kinematics.circular_period(params)
        
        if family is MotionFamily.INCLINE:
            return kinematics.incline_end_time(params)
    except ComputationError:
        raise
    except (ArithmeticError, ValueError) as e:
        raise ComputationError(f"Terminal time could not be computed: {e}") from e
    
    return None
