"""OpenAI LLM provider."""

from __future__ import annotations

import time

from physviz.analysis.providers.base import (
    LLMConfig,
    LLMProvider,
    LLMProviderType,
    LLMResponse,
    Message,
)


class OpenAIProvider(LLMProvider):
    """
    OpenAI chat-completions provider.
    
    Supports GPT-4o and other chat models.
    """
    
    def __init__(self, config: LLMConfig):
        super().__init__(config)
        self._client = None
    
    @property
    def provider_type(self) -> LLMProviderType:
        return LLMProviderType.OPENAI
    
    @property
    def default_model(self) -> str:
        return "gpt-4o"
    
    def _get_client(self):
        """Get or create the OpenAI client."""
        if self._client is None:
            import openai
            self._client = openai.AsyncOpenAI(
                api_key=self.config.api_key,
                timeout=self.config.timeout_seconds,
            )
        return self._client
    
    async def generate(self, messages: list[Message], **kwargs) -> LLMResponse:
        """Generate a response from an OpenAI chat model."""
        client = self._get_client()
        
        params = {
            "model": self.model,
            "messages": [{"role": m.role, "content": m.content} for m in messages],
            "max_tokens": kwargs.get("max_tokens", self.config.max_tokens),
            "temperature": kwargs.get("temperature", self.config.temperature),
        }
        
        start_time = time.time()
        response = await client.chat.completions.create(**params)
        latency_ms = (time.time() - start_time) * 1000
        
        choice = response.choices[0]
        
        return LLMResponse(
            text=choice.message.content,
            finish_reason=choice.finish_reason,
            input_tokens=response.usage.prompt_tokens if response.usage else 0,
            output_tokens=response.usage.completion_tokens if response.usage else 0,
            raw_response=response,
            latency_ms=latency_ms,
            provider="openai",
            model=self.model,
        )
