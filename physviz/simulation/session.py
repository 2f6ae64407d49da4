"""
Simulation session - single owner of the scenario, its parameters and
the stepper.

The UI (or CLI) talks to the core only through a session. Renderers and
widgets hold references for reading; all mutation goes through the
operations here.
"""

from __future__ import annotations

from typing import Any, Callable

import structlog

from physviz.errors import SimulationStateError
from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.physics.validator import ScenarioValidator
from physviz.simulation.parameters import ParameterStore
from physviz.simulation.scheduler import AnimationLoop
from physviz.simulation.stepper import (
    ErrorCallback,
    FrameCallback,
    SimulationConfig,
    SimulationStatus,
    Stepper,
)

logger = structlog.get_logger(__name__)


class SimulationSession:
    """
    High-level interface to the simulation core.
    
    Example:
        ```python
        session = SimulationSession()
        session.load_scenario({
            "motionFamily": "projectile",
            "entities": [{"id": "ball", "name": "Ball"}],
            "parameters": {"velocity": 10, "angle": 90, "gravity": 9.8},
            "adjustableParameters": ["velocity", "gravity", "angle"],
        })
        session.set_parameter("velocity", 15)
        frame = session.tick()
        ```
    """
    
    def __init__(
        self,
        config: SimulationConfig | None = None,
        validator: ScenarioValidator | None = None,
    ):
        self.config = config or SimulationConfig()
        self.validator = validator or ScenarioValidator()
        self.stepper = Stepper(self.config)
        self._scenario: Scenario | None = None
        self._parameters: ParameterStore | None = None
        self._animation: AnimationLoop | None = None
    
    @property
    def scenario(self) -> Scenario | None:
        return self._scenario
    
    @property
    def parameters(self) -> ParameterStore | None:
        return self._parameters
    
    @property
    def status(self) -> SimulationStatus:
        return self.stepper.status
    
    @property
    def sim_time(self) -> float:
        return self.stepper.sim_time
    
    @property
    def current_frame(self) -> FrameState | None:
        return self.stepper.current_frame
    
    @property
    def animation(self) -> AnimationLoop | None:
        return self._animation
    
    def load_scenario(self, raw: Any) -> Scenario:
        """
        Validate raw analyzer output and start simulating it.
        
        On a validation error nothing changes: an idle session stays idle
        and a running one keeps its current scenario.
        """
        scenario = self.validator.validate(raw)
        
        self._scenario = scenario
        self._parameters = ParameterStore(scenario)
        self.stepper.load(scenario, self._parameters)
        return scenario
    
    def set_parameter(self, name: str, value: float) -> None:
        """Override an adjustable parameter; takes effect on the next tick."""
        self._require_scenario("set a parameter")
        self._parameters.set(name, value)
    
    def get_parameter(self, name: str) -> float:
        self._require_scenario("read a parameter")
        return self._parameters.get(name)
    
    def reset_to_defaults(self) -> None:
        """Restore every parameter to the scenario's declared value."""
        self._require_scenario("reset parameters")
        self._parameters.reset_to_defaults()
    
    def reset(self) -> None:
        """Restart the simulation clock at t=0."""
        self.stepper.reset()
    
    def clear(self) -> None:
        """Cancel any pending animation tick and drop the scenario."""
        if self._animation is not None:
            self._animation.stop()
        self.stepper.clear()
        self._scenario = None
        self._parameters = None
    
    def close(self) -> None:
        """Tear down the session; equivalent to clear()."""
        self.clear()
    
    def tick(self, elapsed_real_seconds: float | None = None) -> FrameState | None:
        return self.stepper.tick(elapsed_real_seconds)
    
    def seek(self, sim_time: float) -> None:
        self.stepper.seek(sim_time)
    
    def frame_at(self, sim_time: float) -> FrameState:
        return self.stepper.frame_at(sim_time)
    
    def subscribe(self, callback: FrameCallback) -> Callable[[], None]:
        return self.stepper.subscribe(callback)
    
    def subscribe_errors(self, callback: ErrorCallback) -> Callable[[], None]:
        return self.stepper.subscribe_errors(callback)
    
    def drive(self, interval: float | None = None) -> AnimationLoop:
        """
        Attach an animation loop to this session.
        
        Any previously attached loop is stopped first, so at most one
        callback is ever pending. `clear()` stops the attached loop.
        """
        if self._animation is not None:
            self._animation.stop()
        self._animation = AnimationLoop(self, interval)
        return self._animation
    
    def __enter__(self) -> "SimulationSession":
        return self
    
    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
    
    def _require_scenario(self, operation: str) -> None:
        if self._scenario is None:
            raise SimulationStateError(f"Cannot {operation}: no scenario loaded")
