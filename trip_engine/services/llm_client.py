"""
LLM Client - Text completion over an OpenAI-compatible API.
Supports OpenAI, Mistral, OpenRouter, and Ollama.
"""
from openai import AsyncOpenAI, APIError, APITimeoutError
from typing import Optional
import logging

from ..config import get_llm_config, has_ai_credential

logger = logging.getLogger(__name__)


class ExternalServiceError(Exception):
    """The completion provider failed, timed out, or returned nothing usable."""


class LLMClient:
    """Async LLM client with OpenAI-compatible API."""

    def __init__(self):
        config = get_llm_config()
        self.client = AsyncOpenAI(
            api_key=config["api_key"],
            base_url=config["base_url"],
            timeout=config["timeout"],
            max_retries=0,
        )
        self.model = config["model"]
        self.temperature = config["temperature"]
        self.max_tokens = config["max_tokens"]
        logger.info(f"Initializing LLMClient with model={self.model}, base_url={config['base_url']}")

    async def chat(
        self,
        messages: list[dict],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None
    ) -> str:
        """
        Send a chat completion request.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Override default temperature
            max_tokens: Override default max tokens

        Returns:
            The assistant's response content

        Raises:
            ExternalServiceError: On timeout, API failure or an empty reply
        """
        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }

        try:
            response = await self.client.chat.completions.create(**kwargs)
        except APITimeoutError as e:
            raise ExternalServiceError(f"LLM request timed out: {e}") from e
        except APIError as e:
            raise ExternalServiceError(f"LLM request failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExternalServiceError("LLM returned an empty response")
        return content

    async def complete(self, prompt: str) -> str:
        """Single-prompt text completion."""
        return await self.chat([{"role": "user", "content": prompt}])


# Global LLM client instance
llm_client: Optional[LLMClient] = None


def get_llm_client() -> Optional[LLMClient]:
    """Get or create the global LLM client, None when no provider is configured."""
    global llm_client
    if llm_client is None and has_ai_credential():
        llm_client = LLMClient()
    return llm_client
