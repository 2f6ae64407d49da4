"""
Simulation clock and stepper.

The stepper is an explicit two-state machine (idle / running) around a
pure frame function: every tick evaluates the kinematics for each entity
at the current simulation time using the live parameter values, emits
the frame, then advances time by a fixed logical step. Wall-clock timing
never feeds into the simulation, so runs are deterministic and can be
driven without a real timer.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Mapping, Optional

import structlog

from physviz.errors import ComputationError, SimulationStateError
from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.physics.collision import CollisionEvent
from physviz.physics.motion import evaluate_frame, resolve_event, terminal_time
from physviz.simulation.parameters import ParameterStore

logger = structlog.get_logger(__name__)


class SimulationStatus(str, Enum):
    """Stepper lifecycle states."""
    
    IDLE = "idle"
    RUNNING = "running"


class TerminalPolicy(str, Enum):
    """What the clock does once the motion reaches its end."""
    
    LOOP = "loop"  # Restart from t=0 (perpetual demo)
    HALT = "halt"  # Hold the final instant


@dataclass
class SimulationConfig:
    """Configuration for the simulation clock."""
    
    tick_seconds: float = 1.0 / 60.0  # Logical step per tick
    terminal_policy: TerminalPolicy = TerminalPolicy.LOOP
    max_sim_time: Optional[float] = 10.0  # End time for motions with no natural end
    min_flight_time: float = 0.0  # A projectile landing must come later than this
    
    def __post_init__(self) -> None:
        if self.tick_seconds <= 0:
            raise ValueError("tick_seconds must be positive")
        self.terminal_policy = TerminalPolicy(self.terminal_policy)
    
    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "SimulationConfig":
        """
        Build a config from PHYSVIZ_* environment variables.
        
        PHYSVIZ_TICK_SECONDS, PHYSVIZ_TERMINAL_POLICY (loop|halt) and
        PHYSVIZ_MAX_SIM_TIME ("none" disables the fallback end time).
        """
        env = os.environ if environ is None else environ
        config = cls()
        
        if "PHYSVIZ_TICK_SECONDS" in env:
            config.tick_seconds = float(env["PHYSVIZ_TICK_SECONDS"])
        if "PHYSVIZ_TERMINAL_POLICY" in env:
            config.terminal_policy = TerminalPolicy(env["PHYSVIZ_TERMINAL_POLICY"].lower())
        if "PHYSVIZ_MAX_SIM_TIME" in env:
            raw = env["PHYSVIZ_MAX_SIM_TIME"]
            config.max_sim_time = None if raw.lower() == "none" else float(raw)
        
        config.__post_init__()
        return config


FrameCallback = Callable[[FrameState], None]
ErrorCallback = Callable[[ComputationError], None]


class Stepper:
    """
    Advances simulation time and emits one FrameState per tick.
    
    Transitions:
    - load(scenario): idle/running -> running at t=0
    - tick(): running only; a no-op returning None while idle
    - reset(): running -> running at t=0; no-op while idle
    - clear(): any -> idle
    
    A tick that fails for any entity emits nothing and leaves time and the
    last good frame untouched; error subscribers receive the
    ComputationError.
    """
    
    def __init__(self, config: SimulationConfig | None = None):
        self.config = config or SimulationConfig()
        self.logger = structlog.get_logger(__name__)
        
        self._status = SimulationStatus.IDLE
        self._scenario: Scenario | None = None
        self._parameters: ParameterStore | None = None
        self._sim_time = 0.0
        self._halted = False
        self._current_frame: FrameState | None = None
        
        # Collision event cache, keyed by parameter store revision
        self._event: CollisionEvent | None = None
        self._event_revision: int | None = None
        
        self._subscribers: list[FrameCallback] = []
        self._error_subscribers: list[ErrorCallback] = []
        
        self.last_error: ComputationError | None = None
        self.last_real_interval: float | None = None
        self.ticks = 0
    
    @property
    def status(self) -> SimulationStatus:
        return self._status
    
    @property
    def scenario(self) -> Scenario | None:
        return self._scenario
    
    @property
    def parameters(self) -> ParameterStore | None:
        return self._parameters
    
    @property
    def sim_time(self) -> float:
        return self._sim_time
    
    @property
    def halted(self) -> bool:
        """True while the halt policy is holding the final instant."""
        return self._halted
    
    @property
    def current_frame(self) -> FrameState | None:
        """Most recent successfully computed frame."""
        return self._current_frame
    
    def load(self, scenario: Scenario, parameters: ParameterStore | None = None) -> None:
        """Start running `scenario` from t=0."""
        if parameters is None:
            parameters = ParameterStore(scenario)
        elif parameters.scenario is not scenario:
            raise ValueError("Parameter store belongs to a different scenario")
        
        self._scenario = scenario
        self._parameters = parameters
        self._status = SimulationStatus.RUNNING
        self._rewind()
        self._current_frame = None
        self.last_error = None
        self._event = None
        self._event_revision = None
        
        self.logger.info(
            "Scenario loaded",
            motion_family=scenario.motion_family.value,
            entities=len(scenario.entities),
            tick_seconds=self.config.tick_seconds,
            policy=self.config.terminal_policy.value,
        )
    
    def tick(self, elapsed_real_seconds: float | None = None) -> FrameState | None:
        """
        Emit the frame for the current time and advance the clock.
        
        Args:
            elapsed_real_seconds: Wall-clock time since the previous tick.
                Recorded for diagnostics only; the clock always advances by
                `config.tick_seconds`.
        
        Returns:
            The emitted frame, or None when idle or when the tick failed
        """
        if self._status is SimulationStatus.IDLE:
            self.logger.debug("Tick ignored while idle")
            return None
        
        self.last_real_interval = elapsed_real_seconds
        params = self._parameters.snapshot()
        
        try:
            event = self._collision_event(params)
            end_time = self._end_time(params)
            t = self._clamp_to_end(self._sim_time, end_time)
            frame = evaluate_frame(self._scenario, params, t, event)
        except ComputationError as e:
            self.last_error = e
            self.logger.warning(
                "Tick skipped",
                error=str(e),
                entity_id=e.entity_id,
                sim_time=self._sim_time,
            )
            for callback in list(self._error_subscribers):
                callback(e)
            return None
        
        self._sim_time = t
        self._current_frame = frame
        self.last_error = None
        self.ticks += 1
        self._advance(end_time)
        
        self.logger.debug("Tick", sim_time=frame.sim_time, next_time=self._sim_time)
        for callback in list(self._subscribers):
            callback(frame)
        return frame
    
    def reset(self) -> None:
        """Restart the current scenario at t=0, keeping parameters."""
        if self._status is SimulationStatus.IDLE:
            self.logger.debug("Reset ignored while idle")
            return
        self._rewind()
        self._current_frame = None
        self.logger.info("Simulation reset")
    
    def clear(self) -> None:
        """Drop the scenario and return to idle."""
        self._status = SimulationStatus.IDLE
        self._scenario = None
        self._parameters = None
        self._current_frame = None
        self._event = None
        self._event_revision = None
        self.last_error = None
        self._rewind()
        self.logger.info("Simulation cleared")
    
    def seek(self, sim_time: float) -> None:
        """Jump to any time; negative times clamp to 0."""
        self._require_running("seek")
        self._sim_time = max(float(sim_time), 0.0)
        self._halted = False
    
    def frame_at(self, sim_time: float) -> FrameState:
        """Evaluate a frame at `sim_time` without touching the clock."""
        self._require_running("frame_at")
        params = self._parameters.snapshot()
        return evaluate_frame(self._scenario, params, max(sim_time, 0.0), self._collision_event(params))
    
    def end_time(self) -> float | None:
        """End time of the motion under the current parameters."""
        self._require_running("end_time")
        return self._end_time(self._parameters.snapshot())
    
    def subscribe(self, callback: FrameCallback) -> Callable[[], None]:
        """Receive every emitted frame. Returns an unsubscribe function."""
        self._subscribers.append(callback)
        return lambda: self._discard(self._subscribers, callback)
    
    def subscribe_errors(self, callback: ErrorCallback) -> Callable[[], None]:
        """Receive ComputationErrors from skipped ticks."""
        self._error_subscribers.append(callback)
        return lambda: self._discard(self._error_subscribers, callback)
    
    def _rewind(self) -> None:
        self._sim_time = 0.0
        self._halted = False
    
    def _require_running(self, operation: str) -> None:
        if self._status is not SimulationStatus.RUNNING:
            raise SimulationStateError(f"Cannot {operation} while {self._status.value}")
    
    def _collision_event(self, params: Mapping[str, float]) -> CollisionEvent | None:
        revision = self._parameters.revision
        if self._event_revision != revision:
            self._event = resolve_event(self._scenario, params)
            self._event_revision = revision
            if self._event is not None:
                self.logger.info(
                    "Collision event resolved",
                    time=self._event.time,
                    post_velocities=self._event.post_velocities,
                )
        return self._event
    
    def _end_time(self, params: Mapping[str, float]) -> float | None:
        end = terminal_time(self._scenario, params, self.config.min_flight_time)
        if end is None:
            end = self.config.max_sim_time
        return end
    
    def _clamp_to_end(self, t: float, end_time: float | None) -> float:
        """Apply the terminal policy to a time that is already past the end."""
        if end_time is None:
            self._halted = False
            return t
        if self._halted or t > end_time:
            if self.config.terminal_policy is TerminalPolicy.HALT:
                self._halted = True
                return end_time
            return 0.0
        return t
    
    def _advance(self, end_time: float | None) -> None:
        if self._halted:
            return
        
        next_time = self._sim_time + self.config.tick_seconds
        if end_time is not None and next_time > end_time:
            if self.config.terminal_policy is TerminalPolicy.LOOP:
                self.logger.debug("Motion finished, looping", end_time=end_time)
                self._sim_time = 0.0
            else:
                self.logger.info("Motion finished, holding final state", end_time=end_time)
                self._sim_time = end_time
                self._halted = True
            return
        
        self._sim_time = next_time
    
    @staticmethod
    def _discard(callbacks: list, callback) -> None:
        if callback in callbacks:
            callbacks.remove(callback)
