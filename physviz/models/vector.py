"""2D vector value type used for positions, velocities and accelerations."""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Vector2:
    """2D vector. World space has y increasing upward."""
    
    x: float = 0.0
    y: float = 0.0
    
    def __add__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x + other.x, self.y + other.y)
    
    def __sub__(self, other: "Vector2") -> "Vector2":
        return Vector2(self.x - other.x, self.y - other.y)
    
    def __mul__(self, scalar: float) -> "Vector2":
        return Vector2(self.x * scalar, self.y * scalar)
    
    __rmul__ = __mul__
    
    def __neg__(self) -> "Vector2":
        return Vector2(-self.x, -self.y)
    
    def magnitude(self) -> float:
        return math.hypot(self.x, self.y)
    
    def normalized(self) -> "Vector2":
        mag = self.magnitude()
        if mag == 0:
            return Vector2()
        return Vector2(self.x / mag, self.y / mag)
    
    def dot(self, other: "Vector2") -> float:
        return self.x * other.x + self.y * other.y
    
    def is_finite(self) -> bool:
        return math.isfinite(self.x) and math.isfinite(self.y)
    
    def to_tuple(self) -> tuple[float, float]:
        return (self.x, self.y)
