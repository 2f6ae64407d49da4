"""
Scenario analyzers: turn a word problem into raw scenario data.

Analyzers only produce raw mappings. Validation is done by the core when
the result is loaded into a session, so a bad analysis can never reach
the stepper.
"""

from __future__ import annotations

import json
import re
from abc import ABC, abstractmethod
from typing import Any

import structlog

from physviz.analysis.normalize import normalize_analysis
from physviz.analysis.prompts import build_extraction_prompt
from physviz.analysis.providers.base import LLMProvider, Message
from physviz.errors import AnalysisError

logger = structlog.get_logger(__name__)

JSON_OBJECT_PATTERN = re.compile(r"\{[\s\S]*\}")

_NUMBER = r"(-?\d+(?:\.\d+)?)"
ACCELERATION_PATTERN = re.compile(_NUMBER + r"\s*m/s(?:²|\^2|2\b|\s*squared)", re.IGNORECASE)
SPEED_PATTERN = re.compile(_NUMBER + r"\s*m/s(?!\s*(?:²|\^2|2\b|squared))", re.IGNORECASE)
ANGLE_PATTERN = re.compile(_NUMBER + r"\s*(?:°|degrees?\b|deg\b)", re.IGNORECASE)
MASS_PATTERN = re.compile(_NUMBER + r"\s*(?:kg|kilograms?)\b", re.IGNORECASE)
TIME_PATTERN = re.compile(_NUMBER + r"\s*(?:s|sec|secs|seconds?)\b", re.IGNORECASE)
LENGTH_PATTERN = re.compile(_NUMBER + r"\s*(?:m|meters?|metres?)\b(?!/)", re.IGNORECASE)
FRICTION_PATTERN = re.compile(r"(?:coefficient of (?:kinetic )?friction|friction coefficient|μ|\bmu\b)\D{0,10}" + _NUMBER, re.IGNORECASE)

FAMILY_KEYWORDS: list[tuple[str, tuple[str, ...]]] = [
    ("collision", ("collide", "collision", "crash into", "crashes into")),
    ("pendulum", ("pendulum", "swing")),
    ("incline", ("incline", "ramp", "slope")),
    ("circular", ("circular", "circle", "orbit", "revolv")),
    ("linear", ("accelerat", "decelerat", "drives", "car ", "train", "along a straight")),
]


def extract_json_object(text: str | None) -> dict[str, Any]:
    """
    Pull the JSON object out of an LLM reply.
    
    Models wrap their JSON in prose or code fences often enough that the
    outermost braces are located first.
    """
    match = JSON_OBJECT_PATTERN.search(text or "")
    if not match:
        raise AnalysisError("Analyzer reply contained no JSON object")
    try:
        parsed = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise AnalysisError(f"Analyzer reply was not valid JSON: {e}") from e
    if not isinstance(parsed, dict):
        raise AnalysisError("Analyzer reply JSON was not an object")
    return parsed


class ScenarioAnalyzer(ABC):
    """Abstract base class for word-problem analyzers."""
    
    name: str = "analyzer"
    
    @abstractmethod
    async def analyze(self, problem_text: str) -> dict[str, Any]:
        """
        Analyze a problem statement.
        
        Args:
            problem_text: Natural-language physics problem
            
        Returns:
            Raw scenario mapping ready for validation
            
        Raises:
            AnalysisError: If the text could not be analyzed
        """
        pass


class LLMScenarioAnalyzer(ScenarioAnalyzer):
    """Analyzer backed by an LLM provider."""
    
    name = "llm"
    
    def __init__(self, provider: LLMProvider):
        self.provider = provider
        self.logger = logger.bind(provider=provider.provider_type.value, model=provider.model)
    
    async def analyze(self, problem_text: str) -> dict[str, Any]:
        if not problem_text.strip():
            raise AnalysisError("Problem text is empty")
        
        messages = [Message.user(build_extraction_prompt(problem_text))]
        
        try:
            response = await self.provider.generate(messages)
        except Exception as e:
            self.logger.warning("LLM request failed", error=str(e))
            raise AnalysisError(f"LLM request failed: {e}") from e
        
        self.logger.debug(
            "LLM analysis received",
            tokens=response.total_tokens,
            latency_ms=round(response.latency_ms, 1),
        )
        
        return normalize_analysis(extract_json_object(response.text))


class KeywordScenarioAnalyzer(ScenarioAnalyzer):
    """
    Offline analyzer using keyword and unit matching.
    
    Recognizes the common textbook phrasings ("thrown straight up at
    10 m/s", "accelerates from rest at 2 m/s²", "2 kg ... hits a
    stationary 1 kg") and defaults to a vertical launch otherwise.
    """
    
    name = "keyword"
    
    async def analyze(self, problem_text: str) -> dict[str, Any]:
        return self.parse(problem_text)
    
    def parse(self, problem_text: str) -> dict[str, Any]:
        if not problem_text.strip():
            raise AnalysisError("Problem text is empty")
        
        text = problem_text.lower()
        family = self.detect_family(text)
        
        speeds = [float(v) for v in SPEED_PATTERN.findall(problem_text)]
        accelerations = [float(v) for v in ACCELERATION_PATTERN.findall(problem_text)]
        angles = [float(v) for v in ANGLE_PATTERN.findall(problem_text)]
        masses = [float(v) for v in MASS_PATTERN.findall(problem_text)]
        times = [float(v) for v in TIME_PATTERN.findall(problem_text)]
        lengths = [float(v) for v in LENGTH_PATTERN.findall(problem_text)]
        
        parameters: dict[str, Any] = {}
        velocity: dict[str, Any] = {}
        if speeds:
            velocity["magnitude"] = speeds[0]
        elif "from rest" in text or "released" in text:
            velocity["magnitude"] = 0.0
        for word in ("up", "down", "left", "right"):
            if re.search(rf"\b{word}(?:ward)?\b", text):
                velocity["direction"] = word
                break
        if velocity:
            parameters["initialVelocity"] = velocity
        if angles:
            parameters["angle"] = angles[0]
        if accelerations:
            sign = -1.0 if "decelerat" in text else 1.0
            parameters["acceleration"] = {"x": sign * abs(accelerations[0]), "y": 0.0}
        if times:
            parameters["time"] = times[0]
        if lengths:
            key = {"pendulum": "length", "circular": "radius"}.get(family, "distance")
            parameters[key] = lengths[0]
        if family == "incline":
            friction = FRICTION_PATTERN.search(problem_text)
            if friction and "frictionless" not in text:
                parameters["friction"] = float(friction.group(1))
        
        objects = self._objects(family, text, masses, speeds)
        adjustable = {
            "projectile": ["velocity", "angle", "gravity"],
            "linear": ["velocity", "acceleration"],
            "collision": ["m1", "m2", "v1", "v2"],
            "pendulum": ["length", "angle", "gravity"],
            "incline": ["angle", "friction", "gravity"],
            "circular": ["radius", "velocity"],
        }[family]
        
        logger.debug("Keyword analysis complete", motion_family=family, speeds=speeds, masses=masses)
        
        return normalize_analysis({
            "problemType": family,
            "objects": objects,
            "parameters": parameters,
            "units": {"velocity": "m/s", "acceleration": "m/s²", "distance": "m", "mass": "kg"},
            "adjustableParameters": adjustable,
            "description": problem_text.strip(),
        })
    
    @staticmethod
    def detect_family(text: str) -> str:
        text = text.lower()
        for family, keywords in FAMILY_KEYWORDS:
            if any(keyword in text for keyword in keywords):
                return family
        return "projectile"
    
    @staticmethod
    def _objects(family: str, text: str, masses: list[float], speeds: list[float]) -> list[dict[str, Any]]:
        if family == "collision":
            objects = []
            for i, label in enumerate(("A", "B")):
                obj: dict[str, Any] = {
                    "name": f"Object {label}",
                    "initialPosition": {"x": -5.0 if i == 0 else 5.0, "y": 0.0},
                }
                if i < len(masses):
                    obj["mass"] = masses[i]
                if i < len(speeds):
                    obj["velocity"] = speeds[i]
                objects.append(obj)
            return objects
        
        names = {
            "projectile": "Ball",
            "linear": "Car" if "car" in text else "Object",
            "pendulum": "Bob",
            "incline": "Block",
            "circular": "Object",
        }
        obj = {"name": names[family], "initialPosition": {"x": 0.0, "y": 0.0}}
        if masses:
            obj["mass"] = masses[0]
        return [obj]


class FallbackScenarioAnalyzer(ScenarioAnalyzer):
    """Try a primary analyzer and fall back to another on AnalysisError."""
    
    name = "fallback"
    
    def __init__(self, primary: ScenarioAnalyzer, fallback: ScenarioAnalyzer | None = None):
        self.primary = primary
        self.fallback = fallback or KeywordScenarioAnalyzer()
        self.last_used: str | None = None
    
    async def analyze(self, problem_text: str) -> dict[str, Any]:
        try:
            result = await self.primary.analyze(problem_text)
            self.last_used = self.primary.name
            return result
        except AnalysisError as e:
            logger.warning(
                "Primary analyzer failed, using fallback",
                primary=self.primary.name,
                fallback=self.fallback.name,
                error=str(e),
            )
        result = await self.fallback.analyze(problem_text)
        self.last_used = self.fallback.name
        return result
