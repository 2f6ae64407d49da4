"""
Closed-form kinematics for every supported motion family.

Each function maps (entity, parameters, elapsed time) to the entity's
position, velocity and acceleration. There is no state and no numerical
integration: any instant can be evaluated directly, which is what makes
the stepper seekable and lets renderers resample trajectories from t=0.

Angles arrive in degrees and are converted to radians only inside the
trigonometric evaluation. All quantities are SI.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Mapping

from physviz.errors import ComputationError
from physviz.models.scenario import Entity
from physviz.models.vector import Vector2


@dataclass(frozen=True)
class KinematicSample:
    """Position, velocity and acceleration of one entity at one instant."""
    
    position: Vector2
    velocity: Vector2
    acceleration: Vector2
    
    def is_finite(self) -> bool:
        return (
            self.position.is_finite()
            and self.velocity.is_finite()
            and self.acceleration.is_finite()
        )


MotionFunction = Callable[[Entity, Mapping[str, float], float], KinematicSample]


def param(params: Mapping[str, float], name: str, entity: Entity | None = None) -> float:
    """Read a parameter, rejecting absent or non-finite values."""
    try:
        value = float(params[name])
    except KeyError:
        raise ComputationError(
            f"Parameter '{name}' is not available",
            entity_id=entity.id if entity else None,
        ) from None
    except (TypeError, ValueError) as e:
        raise ComputationError(
            f"Parameter '{name}' is not numeric: {params[name]!r}",
            entity_id=entity.id if entity else None,
        ) from e
    if not math.isfinite(value):
        raise ComputationError(
            f"Parameter '{name}' is not finite: {value}",
            entity_id=entity.id if entity else None,
        )
    return value


def projectile(entity: Entity, params: Mapping[str, float], t: float) -> KinematicSample:
    """Ballistic flight under constant gravity, launched at `angle` degrees."""
    v0 = param(params, "velocity", entity)
    theta = math.radians(param(params, "angle", entity))
    g = param(params, "gravity", entity)
    
    vx = v0 * math.cos(theta)
    vy = v0 * math.sin(theta)
    
    origin = entity.initial_position
    return KinematicSample(
        position=Vector2(origin.x + vx * t, origin.y + vy * t - 0.5 * g * t * t),
        velocity=Vector2(vx, vy - g * t),
        acceleration=Vector2(0.0, -g),
    )


def linear(entity: Entity, params: Mapping[str, float], t: float) -> KinematicSample:
    """Constant acceleration along x; y stays at the entity's initial height."""
    v0 = param(params, "velocity", entity)
    a = param(params, "acceleration", entity)
    return uniform_acceleration(entity.initial_position, v0, a, t)


def uniform_acceleration(origin: Vector2, v0: float, a: float, t: float) -> KinematicSample:
    """1-D constant acceleration along x from `origin`."""
    return KinematicSample(
        position=Vector2(origin.x + v0 * t + 0.5 * a * t * t, origin.y),
        velocity=Vector2(v0 + a * t, 0.0),
        acceleration=Vector2(a, 0.0),
    )


def pendulum(entity: Entity, params: Mapping[str, float], t: float) -> KinematicSample:
    """
    Small-angle simple pendulum.
    
    The pivot sits at the entity's initial position; `angle` is the release
    amplitude in degrees measured from the downward vertical.
    """
    length = param(params, "length", entity)
    theta0 = math.radians(param(params, "angle", entity))
    g = param(params, "gravity", entity)
    
    omega = math.sqrt(g / length)
    theta = theta0 * math.cos(omega * t)
    theta_dot = -theta0 * omega * math.sin(omega * t)
    theta_ddot = -theta0 * omega * omega * math.cos(omega * t)
    
    sin_t = math.sin(theta)
    cos_t = math.cos(theta)
    tangent = Vector2(cos_t, sin_t)
    inward = Vector2(-sin_t, cos_t)
    
    pivot = entity.initial_position
    return KinematicSample(
        position=pivot + Vector2(length * sin_t, -length * cos_t),
        velocity=tangent * (length * theta_dot),
        acceleration=tangent * (length * theta_ddot) + inward * (length * theta_dot * theta_dot),
    )


def incline_acceleration(params: Mapping[str, float], entity: Entity | None = None) -> float:
    """Acceleration along the slope (positive = down the slope)."""
    alpha = math.radians(param(params, "angle", entity))
    g = param(params, "gravity", entity)
    mu = param(params, "friction", entity) if "friction" in params else 0.0
    return g * (math.sin(alpha) - mu * math.cos(alpha))


def incline_stop_time(v0: float, a: float) -> float | None:
    """Time at which a decelerating block comes to rest, if it ever does."""
    if a < 0 and v0 > 0:
        return v0 / -a
    return None


def incline(entity: Entity, params: Mapping[str, float], t: float) -> KinematicSample:
    """
    Block sliding down a fixed slope with kinetic friction.
    
    Motion is along (cos a, -sin a) from the entity's initial position.
    A block that decelerates stops and then stays put; a block at rest
    with friction holding it never starts.
    """
    alpha = math.radians(param(params, "angle", entity))
    v0 = param(params, "velocity", entity) if "velocity" in params else 0.0
    a = incline_acceleration(params, entity)
    direction = Vector2(math.cos(alpha), -math.sin(alpha))
    
    if v0 <= 0 and a <= 0:
        # Static friction holds the block.
        return KinematicSample(
            position=entity.initial_position,
            velocity=Vector2(),
            acceleration=Vector2(),
        )
    
    stop_time = incline_stop_time(v0, a)
    if stop_time is not None and t >= stop_time:
        distance = v0 * stop_time + 0.5 * a * stop_time * stop_time
        return KinematicSample(
            position=entity.initial_position + direction * distance,
            velocity=Vector2(),
            acceleration=Vector2(),
        )
    
    distance = v0 * t + 0.5 * a * t * t
    return KinematicSample(
        position=entity.initial_position + direction * distance,
        velocity=direction * (v0 + a * t),
        acceleration=direction * a,
    )


def circular(entity: Entity, params: Mapping[str, float], t: float) -> KinematicSample:
    """Uniform circular motion, counter-clockwise about the initial position."""
    r = param(params, "radius", entity)
    v = param(params, "velocity", entity)
    omega = v / r
    
    cos_w = math.cos(omega * t)
    sin_w = math.sin(omega * t)
    
    return KinematicSample(
        position=entity.initial_position + Vector2(r * cos_w, r * sin_w),
        velocity=Vector2(-v * sin_w, v * cos_w),
        acceleration=Vector2(-omega * omega * r * cos_w, -omega * omega * r * sin_w),
    )


def projectile_landing_time(
    entity: Entity,
    params: Mapping[str, float],
    ground_y: float = 0.0,
) -> float | None:
    """
    Positive time at which the projectile comes back down to `ground_y`.
    
    Returns None when it never does (no gravity, or launched away from a
    ground it can never reach).
    """
    v0 = param(params, "velocity", entity)
    theta = math.radians(param(params, "angle", entity))
    g = param(params, "gravity", entity)
    
    vy = v0 * math.sin(theta)
    height = entity.initial_position.y - ground_y
    
    if g <= 0:
        return None
    
    disc = vy * vy + 2.0 * g * height
    if disc < 0:
        return None
    
    landing = (vy + math.sqrt(disc)) / g
    return landing if landing > 0 else None


def pendulum_period(params: Mapping[str, float]) -> float:
    """Small-angle period 2*pi*sqrt(L/g)."""
    return 2.0 * math.pi * math.sqrt(param(params, "length") / param(params, "gravity"))


def circular_period(params: Mapping[str, float]) -> float | None:
    v = param(params, "velocity")
    if v == 0:
        return None
    return 2.0 * math.pi * param(params, "radius") / abs(v)


def incline_end_time(params: Mapping[str, float]) -> float | None:
    """Time to slide the full slope `distance`, or to come to rest."""
    v0 = param(params, "velocity") if "velocity" in params else 0.0
    a = incline_acceleration(params)
    stop_time = incline_stop_time(v0, a)
    
    if "distance" in params:
        distance = param(params, "distance")
        if a == 0:
            if v0 > 0:
                return distance / v0
        else:
            disc = v0 * v0 + 2.0 * a * distance
            if disc >= 0:
                root = (-v0 + math.sqrt(disc)) / a
                if root > 0 and (stop_time is None or root <= stop_time):
                    return root
    
    return stop_time
