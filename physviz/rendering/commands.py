"""Backend-neutral drawing instructions, all in screen pixels."""

from __future__ import annotations

from dataclasses import dataclass, field

Point = tuple[float, float]


@dataclass(frozen=True)
class DrawCommand:
    """Base class for drawing instructions."""
    
    @property
    def kind(self) -> str:
        return type(self).__name__.removesuffix("Command").lower()


@dataclass(frozen=True)
class ClearCommand(DrawCommand):
    """Fill the whole canvas."""
    
    width: float
    height: float
    color: str


@dataclass(frozen=True)
class LineCommand(DrawCommand):
    start: Point
    end: Point
    color: str
    width: float = 2.0


@dataclass(frozen=True)
class PolylineCommand(DrawCommand):
    points: tuple[Point, ...]
    color: str
    width: float = 2.0
    dash: tuple[float, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class CircleCommand(DrawCommand):
    center: Point
    radius: float
    fill: str | None
    stroke: str | None = None
    stroke_width: float = 0.0


@dataclass(frozen=True)
class RectCommand(DrawCommand):
    """Axis-aligned rectangle given by its top-left corner."""
    
    origin: Point
    width: float
    height: float
    fill: str | None
    stroke: str | None = None
    stroke_width: float = 0.0


@dataclass(frozen=True)
class ArrowCommand(DrawCommand):
    """Shaft from `start` to `end` with a filled head at `end`."""
    
    start: Point
    end: Point
    color: str
    width: float = 2.0
    head: tuple[Point, Point, Point] | None = None


@dataclass(frozen=True)
class TextCommand(DrawCommand):
    position: Point
    text: str
    color: str
    font: str = "14px Arial"
