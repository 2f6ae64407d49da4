"""
Scene renderer contract.

A renderer turns a FrameState plus the owning Scenario into a drawing.
It owns no simulation state: trajectories are resampled from the closed
form on every draw using the parameter snapshot carried by the frame, so
any backend can be swapped in without touching the stepper.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any

import structlog

from physviz.errors import ComputationError
from physviz.models.frame import EntityFrame, FrameState
from physviz.models.scenario import EntityShape, MotionFamily, Scenario
from physviz.models.vector import Vector2
from physviz.physics.motion import resolve_event, sample_trajectory
from physviz.rendering.commands import (
    ArrowCommand,
    CircleCommand,
    ClearCommand,
    DrawCommand,
    LineCommand,
    Point,
    PolylineCommand,
    RectCommand,
    TextCommand,
)

logger = structlog.get_logger(__name__)


@dataclass
class RenderConfig:
    """Canvas geometry and styling."""
    
    width: int = 600
    height: int = 400
    ground_offset: float = 50.0  # Ground line distance from the bottom edge, px
    scale: float = 20.0  # Pixels per metre
    velocity_scale: float = 3.0  # Arrow pixels per m/s
    trajectory_step: float = 0.1  # Seconds between trajectory samples
    glyph_radius: float = 15.0
    point_radius: float = 3.0
    arrow_head: float = 10.0
    
    background: str = "#f0f4f8"
    ground_color: str = "#333"
    trajectory_color: str = "#028090"
    outline_color: str = "#028090"
    velocity_color: str = "#FF6B6B"
    text_color: str = "#1E293B"
    scenery_color: str = "#94A3B8"
    
    show_trajectory: bool = True
    show_velocity: bool = True
    show_info: bool = True


@dataclass(frozen=True)
class WorldTransform:
    """
    Fixed world-to-screen affine map.
    
    screen_x = origin_x + world_x * scale
    screen_y = ground_y - world_y * scale
    """
    
    origin_x: float
    ground_y: float
    scale: float
    
    @classmethod
    def from_config(cls, config: RenderConfig) -> "WorldTransform":
        return cls(
            origin_x=config.width / 2,
            ground_y=config.height - config.ground_offset,
            scale=config.scale,
        )
    
    def to_screen(self, point: Vector2) -> Point:
        return (self.origin_x + point.x * self.scale, self.ground_y - point.y * self.scale)
    
    def to_world(self, point: Point) -> Vector2:
        x, y = point
        return Vector2((x - self.origin_x) / self.scale, (self.ground_y - y) / self.scale)


class SceneRenderer(ABC):
    """
    Abstract base class for rendering backends.
    
    Subclasses implement `render`; `compose` builds the backend-neutral
    command list they translate.
    """
    
    def __init__(self, config: RenderConfig | None = None):
        self.config = config or RenderConfig()
        self.transform = WorldTransform.from_config(self.config)
    
    @abstractmethod
    def render(self, frame: FrameState, scenario: Scenario) -> Any:
        """Draw one frame."""
        pass
    
    def compose(self, frame: FrameState, scenario: Scenario) -> list[DrawCommand]:
        """Build the drawing instructions for a frame, back to front."""
        cfg = self.config
        commands: list[DrawCommand] = [
            ClearCommand(width=cfg.width, height=cfg.height, color=cfg.background),
            LineCommand(
                start=(0.0, self.transform.ground_y),
                end=(float(cfg.width), self.transform.ground_y),
                color=cfg.ground_color,
            ),
        ]
        
        commands.extend(self._scenery(frame, scenario))
        
        if cfg.show_trajectory:
            commands.extend(self._trajectories(frame, scenario))
        
        for entity_frame in frame.entities:
            entity = scenario.entity(entity_frame.entity_id)
            commands.append(self._glyph(entity_frame, entity.shape, entity.color))
            if cfg.show_velocity:
                arrow = self._velocity_arrow(entity_frame)
                if arrow is not None:
                    commands.append(arrow)
        
        if cfg.show_info:
            commands.extend(self._info(frame))
        
        return commands
    
    def _scenery(self, frame: FrameState, scenario: Scenario) -> list[DrawCommand]:
        """Static elements implied by the motion family."""
        cfg = self.config
        params = frame.parameters
        commands: list[DrawCommand] = []
        
        for entity, entity_frame in zip(scenario.entities, frame.entities):
            origin = entity.initial_position
            
            if scenario.motion_family is MotionFamily.INCLINE and "angle" in params:
                alpha = math.radians(params["angle"])
                direction = Vector2(math.cos(alpha), -math.sin(alpha))
                if "distance" in params:
                    length = params["distance"]
                elif origin.y > 0 and math.sin(alpha) > 0:
                    length = origin.y / math.sin(alpha)
                else:
                    length = 10.0
                bottom = origin + direction * length
                commands.append(LineCommand(
                    start=self.transform.to_screen(origin),
                    end=self.transform.to_screen(bottom),
                    color=cfg.scenery_color,
                ))
            
            elif scenario.motion_family is MotionFamily.PENDULUM:
                pivot = self.transform.to_screen(origin)
                commands.append(LineCommand(
                    start=pivot,
                    end=self.transform.to_screen(entity_frame.position),
                    color=cfg.scenery_color,
                ))
                commands.append(CircleCommand(center=pivot, radius=cfg.point_radius, fill=cfg.ground_color))
            
            elif scenario.motion_family is MotionFamily.CIRCULAR and "radius" in params:
                commands.append(CircleCommand(
                    center=self.transform.to_screen(origin),
                    radius=params["radius"] * cfg.scale,
                    fill=None,
                    stroke=cfg.scenery_color,
                    stroke_width=1.0,
                ))
        
        return commands
    
    def _trajectories(self, frame: FrameState, scenario: Scenario) -> list[DrawCommand]:
        cfg = self.config
        commands: list[DrawCommand] = []
        
        try:
            event = resolve_event(scenario, frame.parameters)
            for index in range(len(scenario.entities)):
                points = sample_trajectory(
                    scenario,
                    index,
                    frame.parameters,
                    frame.sim_time,
                    cfg.trajectory_step,
                    event,
                )
                if len(points) < 2:
                    continue
                commands.append(PolylineCommand(
                    points=tuple(self.transform.to_screen(p) for p in points),
                    color=cfg.trajectory_color,
                    dash=(5.0, 5.0),
                ))
        except ComputationError as e:
            # The frame itself was computable; only the trail is dropped.
            logger.warning("Trajectory skipped", error=str(e))
            return []
        
        return commands
    
    def _glyph(self, entity_frame: EntityFrame, shape: EntityShape, color: str) -> DrawCommand:
        cfg = self.config
        center = self.transform.to_screen(entity_frame.position)
        
        if shape is EntityShape.RECTANGLE:
            r = cfg.glyph_radius
            return RectCommand(
                origin=(center[0] - r, center[1] - r),
                width=2 * r,
                height=2 * r,
                fill=color,
                stroke=cfg.outline_color,
                stroke_width=3.0,
            )
        if shape is EntityShape.POINT:
            return CircleCommand(center=center, radius=cfg.point_radius, fill=color)
        return CircleCommand(
            center=center,
            radius=cfg.glyph_radius,
            fill=color,
            stroke=cfg.outline_color,
            stroke_width=3.0,
        )
    
    def _velocity_arrow(self, entity_frame: EntityFrame) -> ArrowCommand | None:
        cfg = self.config
        velocity = entity_frame.velocity
        if velocity.magnitude() == 0:
            return None
        
        sx, sy = self.transform.to_screen(entity_frame.position)
        ex = sx + velocity.x * cfg.velocity_scale
        ey = sy - velocity.y * cfg.velocity_scale
        
        # Head flanks at +/-30 degrees from the shaft, in screen space.
        angle = math.atan2(-velocity.y, velocity.x)
        head = (
            (ex, ey),
            (
                ex - cfg.arrow_head * math.cos(angle - math.pi / 6),
                ey - cfg.arrow_head * math.sin(angle - math.pi / 6),
            ),
            (
                ex - cfg.arrow_head * math.cos(angle + math.pi / 6),
                ey - cfg.arrow_head * math.sin(angle + math.pi / 6),
            ),
        )
        return ArrowCommand(start=(sx, sy), end=(ex, ey), color=cfg.velocity_color, head=head)
    
    def _info(self, frame: FrameState) -> list[DrawCommand]:
        cfg = self.config
        primary = frame.primary
        lines = [
            f"Time: {frame.sim_time:.2f}s",
            f"Height: {primary.position.y:.2f}m",
            f"Velocity: {primary.speed:.2f} m/s",
            f"Position: ({primary.position.x:.2f}, {primary.position.y:.2f})m",
        ]
        return [
            TextCommand(position=(20.0, 30.0 + 20.0 * i), text=line, color=cfg.text_color)
            for i, line in enumerate(lines)
        ]
