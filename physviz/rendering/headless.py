"""Reference renderer that returns drawing instructions instead of drawing."""

from __future__ import annotations

from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.rendering.base import SceneRenderer
from physviz.rendering.commands import DrawCommand


class CommandRenderer(SceneRenderer):
    """
    Headless renderer for tests and remote clients.
    
    Keeps the command list of the last draw so callers subscribed to a
    session can inspect what was drawn.
    """
    
    def __init__(self, config=None):
        super().__init__(config)
        self.last_commands: list[DrawCommand] = []
        self.frames_rendered = 0
    
    def render(self, frame: FrameState, scenario: Scenario) -> list[DrawCommand]:
        self.last_commands = self.compose(frame, scenario)
        self.frames_rendered += 1
        return self.last_commands
