"""Narrative text from a chat-completions model behind OpenRouter.

The insight service only needs ``complete(system_prompt, user_prompt) -> str``;
any failure surfaces as :class:`GeneratorUnavailable`.

API docs: https://openrouter.ai/docs
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import httpx

from .config import Config
from .errors import GeneratorUnavailable

logger = logging.getLogger(__name__)

OPENROUTER_BASE = "https://openrouter.ai/api/v1"


@runtime_checkable
class NarrativeGenerator(Protocol):
    """Anything that turns a prompt into free text. May raise."""

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        ...


@dataclass
class ModelResponse:
    """One completion with the model that produced it."""

    model: str
    content: str
    usage: dict | None = None


class OpenRouterGenerator:
    """Synchronous OpenRouter client issuing one request per completion.

    There is no retry: a failed call raises immediately so callers can fall
    back to template text.
    """

    def __init__(self, config: Config, client: httpx.Client | None = None):
        self.config = config
        self.model = config.narrative_model
        self._headers = {
            "Authorization": f"Bearer {config.openrouter_api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://github.com/fraud-records/fraud-records",
            "X-Title": "fraud-records",
        }
        self._client = client

    def _get_client(self) -> httpx.Client:
        if self._client is None or self._client.is_closed:
            timeout = self.config.generator_timeout
            self._client = httpx.Client(
                timeout=httpx.Timeout(timeout, connect=min(10.0, timeout)),
                headers=self._headers,
            )
        return self._client

    def close(self) -> None:
        if self._client and not self._client.is_closed:
            self._client.close()
            self._client = None

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def query(self, system_prompt: str, user_prompt: str) -> ModelResponse:
        """Send one chat-completions request.

        Returns:
            ModelResponse with the model's output

        Raises:
            GeneratorUnavailable: On missing credentials, transport errors,
                non-2xx status codes or a malformed response body.
        """
        if not self.config.openrouter_api_key:
            raise GeneratorUnavailable("OPENROUTER_API_KEY is not configured")

        payload = {
            "model": self.model,
            "max_tokens": self.config.max_tokens,
            "temperature": self.config.temperature,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
        }

        try:
            resp = self._get_client().post(
                f"{OPENROUTER_BASE}/chat/completions", json=payload
            )
            resp.raise_for_status()
            data = resp.json()
            content = data["choices"][0]["message"]["content"]
        except httpx.HTTPStatusError as e:
            raise GeneratorUnavailable(
                f"{self.model} returned HTTP {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            raise GeneratorUnavailable(f"{self.model} request failed: {e}") from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GeneratorUnavailable(f"{self.model} sent a malformed response") from e

        if not isinstance(content, str) or not content.strip():
            raise GeneratorUnavailable(f"{self.model} returned an empty completion")

        logger.debug("Completion from %s, usage=%s", self.model, data.get("usage"))
        return ModelResponse(model=self.model, content=content, usage=data.get("usage"))

    def complete(self, system_prompt: str, user_prompt: str) -> str:
        return self.query(system_prompt, user_prompt).content
