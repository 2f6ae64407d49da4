"""
One-dimensional elastic collision between two bodies.

Unlike the other motion families the collision itself is not a function
of continuous time: it is a discrete event resolved once into a
`CollisionEvent`. Before the event each body coasts at its
pre-collision velocity; afterwards each follows a uniform-velocity linear
motion from its contact position with the post-collision velocity.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping, Sequence

import structlog

from physviz.errors import ComputationError
from physviz.models.scenario import Entity
from physviz.models.vector import Vector2
from physviz.physics.kinematics import KinematicSample, param, uniform_acceleration

logger = structlog.get_logger(__name__)


def elastic_collision(m1: float, v1: float, m2: float, v2: float) -> tuple[float, float]:
    """
    Final velocities of a 1-D perfectly elastic two-body collision.
    
    Returns:
        (v1', v2') conserving both momentum and kinetic energy.
    """
    total = m1 + m2
    if total == 0:
        raise ComputationError("Total mass of colliding bodies is zero")
    v1_final = ((m1 - m2) * v1 + 2.0 * m2 * v2) / total
    v2_final = ((m2 - m1) * v2 + 2.0 * m1 * v1) / total
    return v1_final, v2_final


def momentum(masses: Sequence[float], velocities: Sequence[float]) -> float:
    """Total linear momentum along the collision axis."""
    return math.fsum(m * v for m, v in zip(masses, velocities))


def kinetic_energy(masses: Sequence[float], velocities: Sequence[float]) -> float:
    """Total kinetic energy along the collision axis."""
    return math.fsum(0.5 * m * v * v for m, v in zip(masses, velocities))


@dataclass(frozen=True)
class CollisionEvent:
    """
    A resolved collision.
    
    `time` is None when the bodies never close on each other, in which
    case the post-collision velocities equal the pre-collision ones and
    are never used.
    """
    
    time: float | None
    contact_x: tuple[float, float]
    masses: tuple[float, float]
    pre_velocities: tuple[float, float]
    post_velocities: tuple[float, float]
    
    @property
    def occurs(self) -> bool:
        return self.time is not None
    
    @property
    def momentum_before(self) -> float:
        return momentum(self.masses, self.pre_velocities)
    
    @property
    def momentum_after(self) -> float:
        return momentum(self.masses, self.post_velocities)


def contact_time(x1: float, v1: float, x2: float, v2: float) -> float | None:
    """
    Time until two point bodies on the x axis meet, None if never.
    
    Coincident bodies count body 2 as the one on the right, so they are
    in contact now only if body 1 is moving faster to the right.
    """
    gap = x2 - x1
    closing_speed = (v1 - v2) * (math.copysign(1.0, gap) if gap else 1.0)
    if closing_speed <= 0:
        return None
    return abs(gap) / closing_speed


def resolve_collision(
    entities: Sequence[Entity],
    params: Mapping[str, float],
) -> CollisionEvent:
    """
    Resolve the collision event for the first two entities.
    
    Args:
        entities: Scenario entities; body 1 and body 2 are the first two
        params: Parameter snapshot providing m1, m2, v1, v2
    
    Returns:
        CollisionEvent with contact time, contact positions and the
        post-collision velocities
    """
    if len(entities) < 2:
        raise ComputationError("Collision needs two entities")
    
    first, second = entities[0], entities[1]
    m1 = param(params, "m1", first)
    v1 = param(params, "v1", first)
    m2 = param(params, "m2", second)
    v2 = param(params, "v2", second)
    
    x1 = first.initial_position.x
    x2 = second.initial_position.x
    t_c = contact_time(x1, v1, x2, v2)
    
    if t_c is None:
        return CollisionEvent(
            time=None,
            contact_x=(x1, x2),
            masses=(m1, m2),
            pre_velocities=(v1, v2),
            post_velocities=(v1, v2),
        )
    
    v1_final, v2_final = elastic_collision(m1, v1, m2, v2)
    event = CollisionEvent(
        time=t_c,
        contact_x=(x1 + v1 * t_c, x2 + v2 * t_c),
        masses=(m1, m2),
        pre_velocities=(v1, v2),
        post_velocities=(v1_final, v2_final),
    )
    
    logger.debug(
        "Collision resolved",
        time=t_c,
        pre_velocities=event.pre_velocities,
        post_velocities=event.post_velocities,
    )
    
    return event


def collision_motion(entity: Entity, index: int, event: CollisionEvent, t: float) -> KinematicSample:
    """Kinematic state of body `index` (0 or 1) given a resolved event."""
    if index not in (0, 1):
        # Extra entities are scenery.
        return KinematicSample(
            position=entity.initial_position,
            velocity=Vector2(),
            acceleration=Vector2(),
        )
    
    if event.time is None or t < event.time:
        return uniform_acceleration(entity.initial_position, event.pre_velocities[index], 0.0, t)
    
    contact = Vector2(event.contact_x[index], entity.initial_position.y)
    return uniform_acceleration(contact, event.post_velocities[index], 0.0, t - event.time)
