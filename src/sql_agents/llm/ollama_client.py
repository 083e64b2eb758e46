"""
Client for a local Ollama model-serving endpoint.

This is the single adapter between the agents and the chat API shape:
request {model, messages, stream: false}, response {message: {content}}.
"""

import json
import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class ModelResponseError(ValueError):
    """Raised when the model endpoint returns a body without message content."""


class OllamaChatClient:
    """
    Async context manager around the Ollama chat endpoint.

    Calls are single, non-streamed requests. There is no retry; network and
    HTTP errors propagate to the caller unchanged.

    Usage:
        async with OllamaChatClient(base_url, model="llama3:8b") as client:
            text = await client.generate("Say hi")
    """

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama3:8b",
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: Root URL of the model-serving endpoint
            model: Model name sent with every request
            timeout: Request timeout in seconds, None to wait indefinitely
            transport: Optional httpx transport (used by tests)
        """
        self.base_url = base_url.rstrip("/")
        self.model = model
        self._http = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._http.aclose()

    async def chat(
        self,
        messages: list[dict[str, str]],
        *,
        temperature: float | None = None,
    ) -> str:
        """
        Send chat messages and return the assistant's reply text.

        Args:
            messages: Ordered list of {"role", "content"} dictionaries
            temperature: Optional sampling temperature

        Returns:
            The content of the response message
        """
        payload: dict[str, Any] = {
            "model": self.model,
            "messages": messages,
            "stream": False,
        }
        if temperature is not None:
            payload["options"] = {"temperature": temperature}

        logger.debug("Messages sent to model: %s", json.dumps(messages))

        response = await self._http.post("/api/chat", json=payload)
        response.raise_for_status()
        data = response.json()

        message = data.get("message") if isinstance(data, dict) else None
        if not isinstance(message, dict) or not isinstance(message.get("content"), str):
            raise ModelResponseError(f"Malformed model response: {str(data)[:200]}")

        return message["content"]

    async def generate(self, prompt: str, *, temperature: float | None = None) -> str:
        """Run a single-prompt generation as one user chat message."""
        return await self.chat(
            [{"role": "user", "content": prompt}],
            temperature=temperature,
        )
