"""
Error taxonomy for the physics visualization core.

Validation errors are fatal to loading a scenario; parameter and
computation errors are reported to the caller while the running
simulation keeps its last good state.
"""

from __future__ import annotations


class PhysVizError(Exception):
    """Base class for all physviz errors."""


class ValidationError(PhysVizError, ValueError):
    """Raw scenario data is malformed or incomplete."""


class MissingParameterError(ValidationError):
    """A parameter required by the motion family is absent or not a number."""
    
    def __init__(self, parameter: str, motion_family: str | None = None):
        self.parameter = parameter
        self.motion_family = motion_family
        where = f" for {motion_family} motion" if motion_family else ""
        super().__init__(f"Missing or non-numeric parameter '{parameter}'{where}")


class UnknownMotionFamilyError(ValidationError):
    """The scenario names a motion family the core cannot simulate."""
    
    def __init__(self, motion_family: object):
        self.motion_family = motion_family
        super().__init__(f"Unknown motion family: {motion_family!r}")


class UnknownParameterError(PhysVizError, KeyError):
    """A parameter write targeted a name that is not adjustable."""
    
    def __init__(self, parameter: str, adjustable: frozenset[str] | None = None):
        self.parameter = parameter
        self.adjustable = adjustable or frozenset()
        super().__init__(parameter)
    
    def __str__(self) -> str:
        allowed = ", ".join(sorted(self.adjustable)) or "none"
        return f"Parameter '{self.parameter}' is not adjustable (allowed: {allowed})"


class ComputationError(PhysVizError, ArithmeticError):
    """A kinematics evaluation failed for one entity at one instant."""
    
    def __init__(
        self,
        message: str,
        entity_id: str | None = None,
        sim_time: float | None = None,
    ):
        self.entity_id = entity_id
        self.sim_time = sim_time
        super().__init__(message)


class SimulationStateError(PhysVizError, RuntimeError):
    """An operation was invoked in a stepper state that does not allow it."""


class AnalysisError(PhysVizError):
    """The scenario analyzer could not turn problem text into a raw scenario."""
