"""
Generative-model collaborators.

The adapter only needs `is_ready()` and `generate(prompt) -> str`. The
default implementation talks to any OpenAI-compatible chat-completions
server (llama.cpp, LM Studio, vLLM, ...). Each call is a single attempt.
"""

import logging
from typing import Any, Dict, Optional, Protocol

import requests

from ..errors import SignalUnavailableError

logger = logging.getLogger(__name__)


class GenerativeModel(Protocol):
    """Contract for the deep-analysis collaborator."""

    def is_ready(self) -> bool:
        ...

    def generate(self, prompt: str) -> str:
        ...


class OpenAICompatibleModel:
    """
    Chat-completions client for a local or remote inference server.

    Attributes:
        endpoint: Base URL, e.g. http://localhost:1234/v1
        model: Model name sent with each request
        timeout: Read timeout in seconds
    """

    def __init__(
        self,
        endpoint: str = "http://localhost:1234/v1",
        model: str = "local-model",
        timeout: float = 120.0,
        temperature: float = 0.3,
        max_tokens: int = 2048,
        api_key: Optional[str] = None,
        session: Optional[requests.Session] = None,
    ):
        self.endpoint = endpoint.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.api_key = api_key
        self._session = session or requests.Session()

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def is_ready(self) -> bool:
        """Probe the models listing; any failure means not ready."""
        try:
            response = self._session.get(
                f"{self.endpoint}/models", headers=self._headers(), timeout=(5, 10)
            )
        except requests.RequestException as e:
            logger.debug(f"Model endpoint not reachable: {e}")
            return False
        return response.ok

    def generate(self, prompt: str) -> str:
        """
        Run one chat completion.

        Raises:
            SignalUnavailableError: On transport errors, HTTP errors or
                malformed responses
        """
        payload: Dict[str, Any] = {
            "model": self.model,
            "messages": [{"role": "user", "content": prompt}],
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }
        try:
            response = self._session.post(
                f"{self.endpoint}/chat/completions",
                json=payload,
                headers=self._headers(),
                timeout=(10, self.timeout),
            )
            response.raise_for_status()
            data = response.json()
            return data["choices"][0]["message"]["content"]
        except (requests.RequestException, ValueError, KeyError, IndexError, TypeError) as e:
            raise SignalUnavailableError(f"Generation failed: {e}") from e

    def close(self) -> None:
        self._session.close()
