"""SVG rendering backend."""

from __future__ import annotations

from pathlib import Path
from xml.sax.saxutils import escape, quoteattr

from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.rendering.base import SceneRenderer
from physviz.rendering.commands import (
    ArrowCommand,
    CircleCommand,
    ClearCommand,
    DrawCommand,
    LineCommand,
    PolylineCommand,
    RectCommand,
    TextCommand,
)


def _num(value: float) -> str:
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _paint(fill: str | None, stroke: str | None, stroke_width: float) -> str:
    attrs = [f'fill={quoteattr(fill)}' if fill else 'fill="none"']
    if stroke:
        attrs.append(f'stroke={quoteattr(stroke)} stroke-width="{_num(stroke_width)}"')
    return " ".join(attrs)


class SVGRenderer(SceneRenderer):
    """Renders a frame as a standalone SVG document."""
    
    def render(self, frame: FrameState, scenario: Scenario) -> str:
        body = "\n".join(
            "  " + element
            for element in (self._element(c) for c in self.compose(frame, scenario))
            if element
        )
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" '
            f'width="{self.config.width}" height="{self.config.height}" '
            f'viewBox="0 0 {self.config.width} {self.config.height}">\n'
            f"{body}\n"
            f"</svg>\n"
        )
    
    def render_to_file(self, frame: FrameState, scenario: Scenario, path: Path) -> Path:
        path = Path(path)
        path.write_text(self.render(frame, scenario), encoding="utf-8")
        return path
    
    def _element(self, command: DrawCommand) -> str:
        if isinstance(command, ClearCommand):
            return (
                f'<rect x="0" y="0" width="{_num(command.width)}" '
                f'height="{_num(command.height)}" fill={quoteattr(command.color)}/>'
            )
        
        if isinstance(command, LineCommand):
            (x1, y1), (x2, y2) = command.start, command.end
            return (
                f'<line x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
                f'stroke={quoteattr(command.color)} stroke-width="{_num(command.width)}"/>'
            )
        
        if isinstance(command, PolylineCommand):
            points = " ".join(f"{_num(x)},{_num(y)}" for x, y in command.points)
            dash = ""
            if command.dash:
                dash = f' stroke-dasharray="{",".join(_num(d) for d in command.dash)}"'
            return (
                f'<polyline points="{points}" fill="none" stroke={quoteattr(command.color)} '
                f'stroke-width="{_num(command.width)}"{dash}/>'
            )
        
        if isinstance(command, CircleCommand):
            cx, cy = command.center
            return (
                f'<circle cx="{_num(cx)}" cy="{_num(cy)}" r="{_num(command.radius)}" '
                f"{_paint(command.fill, command.stroke, command.stroke_width)}/>"
            )
        
        if isinstance(command, RectCommand):
            x, y = command.origin
            return (
                f'<rect x="{_num(x)}" y="{_num(y)}" width="{_num(command.width)}" '
                f'height="{_num(command.height)}" '
                f"{_paint(command.fill, command.stroke, command.stroke_width)}/>"
            )
        
        if isinstance(command, ArrowCommand):
            (x1, y1), (x2, y2) = command.start, command.end
            shaft = (
                f'<line x1="{_num(x1)}" y1="{_num(y1)}" x2="{_num(x2)}" y2="{_num(y2)}" '
                f'stroke={quoteattr(command.color)} stroke-width="{_num(command.width)}"/>'
            )
            if command.head is None:
                return shaft
            head = " ".join(f"{_num(x)},{_num(y)}" for x, y in command.head)
            return shaft + f'<polygon points="{head}" fill={quoteattr(command.color)}/>'
        
        if isinstance(command, TextCommand):
            x, y = command.position
            size = command.font.split("px", 1)[0]
            family = command.font.split(" ", 1)[1] if " " in command.font else "sans-serif"
            return (
                f'<text x="{_num(x)}" y="{_num(y)}" fill={quoteattr(command.color)} '
                f'font-size="{size}" font-family={quoteattr(family)}>{escape(command.text)}</text>'
            )
        
        return ""
