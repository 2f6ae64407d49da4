"""Word-problem analysis: LLM and offline analyzers."""

from physviz.analysis.analyzer import (
    ScenarioAnalyzer,
    LLMScenarioAnalyzer,
    KeywordScenarioAnalyzer,
    FallbackScenarioAnalyzer,
    extract_json_object,
)
from physviz.analysis.normalize import normalize_analysis

__all__ = [
    "ScenarioAnalyzer",
    "LLMScenarioAnalyzer",
    "KeywordScenarioAnalyzer",
    "FallbackScenarioAnalyzer",
    "extract_json_object",
    "normalize_analysis",
]
