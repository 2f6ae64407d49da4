"""LLM providers."""

from physviz.analysis.providers.base import (
    LLMProvider,
    LLMProviderType,
    LLMConfig,
    LLMResponse,
    Message,
)

__all__ = [
    "LLMProvider",
    "LLMProviderType",
    "LLMConfig",
    "LLMResponse",
    "Message",
]
