"""
Parameter store - the live, UI-editable "what if" values for a scenario.

Writes are restricted to the scenario's adjustable parameters and are
last-write-wins per key. The store is meant to be touched from a single
thread (the UI/simulation thread); anything running elsewhere must work
from `snapshot()`, which copies on read.
"""

from __future__ import annotations

from numbers import Real
from typing import Iterator, Mapping

import structlog

from physviz.errors import MissingParameterError, UnknownParameterError
from physviz.models.scenario import Scenario

logger = structlog.get_logger(__name__)


class ParameterStore(Mapping[str, float]):
    """
    Mutable view of a scenario's parameters.
    
    Reading a name returns the override if one was set, otherwise the
    scenario's declared base value. The mapping interface iterates over
    the effective values (base parameters plus overrides).
    """
    
    def __init__(self, scenario: Scenario):
        self._scenario = scenario
        self._overrides: dict[str, float] = {}
        self._revision = 0
    
    @property
    def scenario(self) -> Scenario:
        return self._scenario
    
    @property
    def adjustable(self) -> frozenset[str]:
        return self._scenario.adjustable_parameters
    
    @property
    def revision(self) -> int:
        """Incremented on every accepted write or reset."""
        return self._revision
    
    def set(self, name: str, value: float) -> None:
        """
        Override an adjustable parameter.
        
        Raises:
            UnknownParameterError: `name` is not adjustable; the store is unchanged
            TypeError: `value` is not a real number
        """
        if name not in self._scenario.adjustable_parameters:
            logger.warning("Rejected parameter write", parameter=name, value=value)
            raise UnknownParameterError(name, self._scenario.adjustable_parameters)
        if not isinstance(value, Real) or isinstance(value, bool):
            raise TypeError(f"Parameter '{name}' must be a number, got {type(value).__name__}")
        
        self._overrides[name] = float(value)
        self._revision += 1
        logger.debug("Parameter set", parameter=name, value=float(value), revision=self._revision)
    
    def get(self, name: str, default: float | None = None) -> float:  # type: ignore[override]
        """
        Effective value of a parameter.
        
        Falls back to the scenario's declared base value, then `default`.
        
        Raises:
            MissingParameterError: no override, no base value and no default
        """
        if name in self._overrides:
            return self._overrides[name]
        if name in self._scenario.parameters:
            return self._scenario.parameters[name]
        if default is not None:
            return default
        raise MissingParameterError(name, self._scenario.motion_family.value)
    
    def reset_to_defaults(self) -> None:
        """Drop every override, restoring the scenario's declared values."""
        self._overrides.clear()
        self._revision += 1
        logger.info("Parameters reset to defaults", revision=self._revision)
    
    def is_overridden(self, name: str) -> bool:
        return name in self._overrides
    
    def snapshot(self) -> dict[str, float]:
        """Independent copy of all effective values."""
        values = self._scenario.default_parameters()
        values.update(self._overrides)
        return values
    
    def __getitem__(self, name: str) -> float:
        if name in self._overrides:
            return self._overrides[name]
        return self._scenario.parameters[name]
    
    def __iter__(self) -> Iterator[str]:
        return iter(self.snapshot())
    
    def __len__(self) -> int:
        return len(self._scenario.parameters.keys() | self._overrides.keys())
    
    def __contains__(self, name: object) -> bool:
        return name in self._overrides or name in self._scenario.parameters
    
    def __repr__(self) -> str:
        return f"ParameterStore({self.snapshot()!r})"
