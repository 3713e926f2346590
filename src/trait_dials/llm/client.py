"""
Generation Client

Thin async client for an OpenAI-compatible chat-completion endpoint that
requests JSON-object output.

Failure modes are reported as distinct exceptions so the HTTP layer can
map each one to a status:

- transport failure or timeout      -> UpstreamUnavailable
- body that is not JSON             -> UpstreamMalformed (with snippet)
- non-success status with JSON body -> UpstreamRejected (upstream status)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..config import Settings
from ..core.errors import (
    UpstreamMalformed,
    UpstreamRejected,
    UpstreamUnavailable,
    snippet,
)

logger = logging.getLogger("dials.llm")


class GenerationClient:
    def __init__(
        self,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.settings = settings
        self.model = settings.openai_model
        self.url = settings.openai_chat_url
        self.temperature = settings.generation_temperature
        self.timeout = settings.generation_timeout
        self._transport = transport

    async def generate(self, system: str, user: str) -> Dict[str, Any]:
        """
        Run one chat completion and return the parsed response body, e.g.:
        {
            "choices": [{"message": {"role": "assistant", "content": "{...}"}}]
        }

        Raises
        ------
        MissingConfiguration
            If no API key is configured. No request is sent.

        UpstreamUnavailable, UpstreamMalformed, UpstreamRejected
            See module docstring.
        """
        api_key = self.settings.require_api_key()

        payload = {
            "model": self.model,
            "temperature": self.temperature,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "response_format": {"type": "json_object"},
        }

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post(
                    self.url,
                    json=payload,
                    headers={"Authorization": f"Bearer {api_key}"},
                )
        except httpx.HTTPError as exc:
            logger.error(
                "Generation request failed (%s): %s",
                type(exc).__name__,
                str(exc),
                extra={"model": self.model},
            )
            raise UpstreamUnavailable(
                f"Generation request failed: {type(exc).__name__}"
            ) from exc

        try:
            data = resp.json()
        except ValueError as exc:
            logger.error(
                "Generation service returned non-JSON body",
                extra={"status": resp.status_code, "model": self.model},
            )
            raise UpstreamMalformed(snippet=snippet(resp.text)) from exc

        if not resp.is_success:
            message = _error_message(data)
            logger.error(
                "Generation service rejected request: %s",
                message,
                extra={"status": resp.status_code, "model": self.model},
            )
            raise UpstreamRejected(message, status_code=resp.status_code)

        return data


def _error_message(data: Any) -> Optional[str]:
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict):
            message = error.get("message")
            if message:
                return str(message)
    return None


def extract_content(data: Any) -> Any:
    """Return choices[0].message.content, or None when the shape is missing."""
    if not isinstance(data, dict):
        return None
    choices = data.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    return message.get("content")
