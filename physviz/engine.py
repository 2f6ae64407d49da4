"""Main physics visualization engine."""

from __future__ import annotations

import os
from typing import Any

import structlog

from physviz.analysis.analyzer import (
    FallbackScenarioAnalyzer,
    KeywordScenarioAnalyzer,
    LLMScenarioAnalyzer,
    ScenarioAnalyzer,
)
from physviz.analysis.providers.anthropic import AnthropicProvider
from physviz.analysis.providers.base import LLMConfig, LLMProvider, LLMProviderType
from physviz.analysis.providers.openai import OpenAIProvider
from physviz.errors import SimulationStateError, ValidationError
from physviz.models.frame import FrameState
from physviz.models.scenario import Scenario
from physviz.rendering.base import SceneRenderer
from physviz.rendering.headless import CommandRenderer
from physviz.simulation.session import SimulationSession
from physviz.simulation.stepper import SimulationConfig

logger = structlog.get_logger()

ENV_KEYS = {
    LLMProviderType.ANTHROPIC: "ANTHROPIC_API_KEY",
    LLMProviderType.OPENAI: "OPENAI_API_KEY",
}


def get_provider(
    provider_type: str | LLMProviderType,
    api_key: str | None = None,
    model: str | None = None,
    **kwargs,
) -> LLMProvider:
    """
    Get an LLM provider instance.
    
    Args:
        provider_type: Provider type (anthropic, openai)
        api_key: API key (defaults to environment variable)
        model: Model to use (defaults to provider's default)
        **kwargs: Additional provider configuration
        
    Returns:
        Configured LLMProvider instance
    """
    if isinstance(provider_type, str):
        try:
            provider_type = LLMProviderType(provider_type.lower())
        except ValueError:
            raise ValueError(f"Unsupported provider: {provider_type}") from None
    
    if not api_key:
        api_key = os.environ.get(ENV_KEYS.get(provider_type, ""))
    
    if not api_key:
        raise ValueError(f"API key required for {provider_type.value}")
    
    config = LLMConfig(
        provider=provider_type,
        api_key=api_key,
        model=model,
        **kwargs,
    )
    
    providers = {
        LLMProviderType.ANTHROPIC: AnthropicProvider,
        LLMProviderType.OPENAI: OpenAIProvider,
    }
    
    provider_class = providers.get(provider_type)
    if not provider_class:
        raise ValueError(f"Unsupported provider: {provider_type}")
    
    return provider_class(config)


class VisualizationEngine:
    """
    Main interface for turning word problems into animated simulations.
    
    Wires an analyzer, a simulation session and a renderer together.
    
    Example:
        ```python
        engine = VisualizationEngine(provider="anthropic")
        
        scenario = await engine.analyze_problem(
            "A ball is thrown straight up with a speed of 10 m/s"
        )
        engine.session.set_parameter("velocity", 15)
        frame = engine.session.tick()
        commands = engine.render(frame)
        ```
    """
    
    def __init__(
        self,
        provider: str | LLMProvider | None = None,
        api_key: str | None = None,
        model: str | None = None,
        analyzer: ScenarioAnalyzer | None = None,
        renderer: SceneRenderer | None = None,
        config: SimulationConfig | None = None,
        fallback: bool = True,
    ):
        """
        Initialize the engine.
        
        Args:
            provider: LLM provider (name or instance); None analyzes offline
            api_key: API key for a named provider
            model: Model override for a named provider
            analyzer: Explicit analyzer, overriding `provider`
            renderer: Rendering backend (defaults to the command renderer)
            config: Simulation clock configuration
            fallback: Fall back to keyword analysis when the LLM fails
        """
        self.keyword_analyzer = KeywordScenarioAnalyzer()
        self.fallback = fallback
        
        if analyzer is not None:
            self.analyzer = analyzer
        elif provider is None:
            self.analyzer = self.keyword_analyzer
        else:
            if isinstance(provider, str):
                provider = get_provider(provider, api_key=api_key, model=model)
            llm = LLMScenarioAnalyzer(provider)
            self.analyzer = (
                FallbackScenarioAnalyzer(llm, self.keyword_analyzer) if fallback else llm
            )
        
        self.session = SimulationSession(config or SimulationConfig())
        self.renderer = renderer or CommandRenderer()
        
        logger.info("Visualization engine initialized", analyzer=self.analyzer.name)
    
    @property
    def scenario(self) -> Scenario | None:
        return self.session.scenario
    
    async def analyze(self, problem_text: str) -> dict[str, Any]:
        """Analyze a problem without loading it."""
        return await self.analyzer.analyze(problem_text)
    
    async def analyze_problem(self, problem_text: str) -> Scenario:
        """
        Analyze a problem and load the resulting scenario.
        
        When the LLM's analysis does not validate and fallback is enabled,
        the keyword analysis is loaded instead. Otherwise the validation
        error propagates and the session is left unchanged.
        """
        raw = await self.analyzer.analyze(problem_text)
        try:
            return self.session.load_scenario(raw)
        except ValidationError as e:
            if not self.fallback or self.analyzer is self.keyword_analyzer:
                raise
            logger.warning("Analyzed scenario failed validation, using keyword analysis", error=str(e))
        
        raw = await self.keyword_analyzer.analyze(problem_text)
        return self.session.load_scenario(raw)
    
    def load_scenario(self, raw: Any) -> Scenario:
        return self.session.load_scenario(raw)
    
    def render(self, frame: FrameState | None = None) -> Any:
        """Render a frame (the current one by default) with the configured backend."""
        scenario = self.session.scenario
        frame = frame or self.session.current_frame
        if scenario is None or frame is None:
            raise SimulationStateError("Nothing to render: no scenario loaded")
        return self.renderer.render(frame, scenario)
    
    def close(self) -> None:
        self.session.close()
