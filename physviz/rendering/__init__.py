"""
Rendering backends for simulation frames.

All backends share `SceneRenderer.compose`, which produces
backend-neutral draw commands through a fixed world-to-screen transform.
"""

from physviz.rendering.base import RenderConfig, SceneRenderer, WorldTransform
from physviz.rendering.commands import (
    DrawCommand,
    ClearCommand,
    LineCommand,
    PolylineCommand,
    CircleCommand,
    RectCommand,
    ArrowCommand,
    TextCommand,
)
from physviz.rendering.headless import CommandRenderer
from physviz.rendering.svg import SVGRenderer

__all__ = [
    "RenderConfig",
    "SceneRenderer",
    "WorldTransform",
    "CommandRenderer",
    "SVGRenderer",
    "DrawCommand",
    "ClearCommand",
    "LineCommand",
    "PolylineCommand",
    "CircleCommand",
    "RectCommand",
    "ArrowCommand",
    "TextCommand",
]
