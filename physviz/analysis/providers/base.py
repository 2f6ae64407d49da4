"""Base LLM provider interface used by the scenario analyzer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel


class LLMProviderType(str, Enum):
    """Supported LLM providers."""
    
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass
class LLMConfig:
    """Configuration for an LLM provider."""
    
    provider: LLMProviderType
    api_key: str
    model: str | None = None  # Use provider default if None
    
    # Generation parameters; extraction wants near-deterministic output
    temperature: float = 0.0
    max_tokens: int = 1000
    
    timeout_seconds: int = 60


class Message(BaseModel):
    """A message in a conversation."""
    
    role: str  # "user", "assistant", "system"
    content: str
    
    @classmethod
    def user(cls, text: str) -> Message:
        return cls(role="user", content=text)


@dataclass
class LLMResponse:
    """Response from an LLM provider."""
    
    id: str = field(default_factory=lambda: str(uuid4()))
    
    text: str | None = None
    finish_reason: str | None = None  # "stop", "max_tokens", etc.
    
    # Usage stats
    input_tokens: int = 0
    output_tokens: int = 0
    
    # Raw response for debugging
    raw_response: Any = None
    
    latency_ms: float = 0.0
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    
    provider: str | None = None
    model: str | None = None
    
    @property
    def total_tokens(self) -> int:
        return self.input_tokens + self.output_tokens


class LLMProvider(ABC):
    """Abstract base class for LLM providers."""
    
    def __init__(self, config: LLMConfig):
        self.config = config
    
    @property
    @abstractmethod
    def provider_type(self) -> LLMProviderType:
        """Get the provider type."""
        pass
    
    @property
    @abstractmethod
    def default_model(self) -> str:
        """Get the default model for this provider."""
        pass
    
    @property
    def model(self) -> str:
        """Get the model to use."""
        return self.config.model or self.default_model
    
    @abstractmethod
    async def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """
        Generate a response from the LLM.
        
        Args:
            messages: Conversation history
            **kwargs: Overrides for max_tokens / temperature
            
        Returns:
            LLMResponse with the model's text
        """
        pass
