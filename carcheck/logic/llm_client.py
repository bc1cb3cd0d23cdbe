"""
ChatClient - Wrapper for an OpenAI-compatible chat completion API

Provides a clean interface to the hosted text-generation provider:
- /chat/completions: Chat completion, optionally constrained to JSON output
"""

import httpx
import logging
from typing import Optional, Protocol

from carcheck.config import CarCheckConfig

logger = logging.getLogger(__name__)


class LLMClientError(Exception):
    """Raised when the provider call fails or returns an unusable body"""
    pass


class TextGenerator(Protocol):
    async def chat(self, messages: list, temperature: Optional[float] = None, json_mode: bool = False) -> str: ...


class ChatClient:
    """Client for communicating with the text-generation provider."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        temperature: Optional[float] = None,
        timeout: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the chat client.

        Args:
            base_url: Base URL of the provider API (e.g., https://api.openai.com/v1)
            api_key: Bearer token for the provider
            model: Model name (e.g., 'gpt-3.5-turbo')
            temperature: Default sampling temperature
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self.base_url = (base_url or CarCheckConfig.LLM_API_URL).rstrip('/')
        self.api_key = api_key if api_key is not None else CarCheckConfig.LLM_API_KEY
        self.model = model or CarCheckConfig.LLM_MODEL
        self.temperature = CarCheckConfig.LLM_TEMPERATURE if temperature is None else temperature
        self.timeout = timeout or CarCheckConfig.LLM_TIMEOUT
        self.transport = transport

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def chat(
        self,
        messages: list,
        temperature: Optional[float] = None,
        json_mode: bool = False
    ) -> str:
        """
        Call the /chat/completions endpoint.

        Args:
            messages: List of message dicts with 'role' and 'content'
            temperature: Sampling temperature (defaults to the client setting)
            json_mode: Ask the provider for syntactically valid JSON output

        Returns:
            Assistant's response text

        Raises:
            LLMClientError: If the request fails or the body has no message
        """
        payload = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature if temperature is None else temperature,
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(
                    f"{self.base_url}/chat/completions",
                    json=payload,
                    headers=self._headers()
                )
        except httpx.TimeoutException as e:
            raise LLMClientError(f"LLM request timed out after {self.timeout}s") from e
        except httpx.HTTPError as e:
            logger.error(f"LLM /chat/completions transport error: {e}")
            raise LLMClientError(f"Could not reach LLM provider: {e}") from e

        if response.status_code != 200:
            logger.error(f"LLM error {response.status_code}: {response.text[:500]}")
            raise LLMClientError(f"LLM error {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            raise LLMClientError("LLM returned a non-JSON body") from e

        # Extract message content from OpenAI-compatible response
        choices = data.get("choices", [])
        if not choices:
            raise LLMClientError("LLM response has no choices")
        message = choices[0].get("message") or {}
        return message.get("content") or ""
