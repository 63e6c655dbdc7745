"""Chat-completion client that turns a repository snapshot into documentation."""

from __future__ import annotations

from typing import Any

import httpx

from ..models import GenerationRequest
from .prompts import SYSTEM_PROMPT, build_user_prompt


class GenerationFailure(RuntimeError):
    """Base class for documentation generation failures."""


class GenerationError(GenerationFailure):
    """The completion endpoint answered with a non-success status."""

    def __init__(self, status: int, body: str) -> None:
        super().__init__(f"LLM API request failed ({status}): {body}")
        self.status = status
        self.body = body


class EmptyResponseError(GenerationFailure):
    """The completion endpoint returned no usable text."""

    def __init__(self) -> None:
        super().__init__("LLM API returned an empty response.")


class GenerationTimeoutError(GenerationFailure):
    """The completion request exceeded its configured timeout."""

    def __init__(self, timeout_ms: int) -> None:
        super().__init__(f"LLM API request timed out after {timeout_ms} ms")
        self.timeout_ms = timeout_ms


class DocumentationGenerator:
    """Issues one chat-completion request per run and extracts the Markdown."""

    DEFAULT_BASE_URL = "https://api.openai.com/v1"

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_BASE_URL,
        temperature: float = 0.2,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.temperature = temperature
        self._transport = transport

    async def generate(self, request: GenerationRequest) -> str:
        """Return trimmed Markdown for ``request`` or raise a ``GenerationFailure``."""
        payload = {
            "model": request.model,
            "messages": self.build_messages(request),
            "temperature": self.temperature,
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {request.api_key}",
        }
        timeout = httpx.Timeout(request.timeout_ms / 1000)

        async with httpx.AsyncClient(transport=self._transport, timeout=timeout) as client:
            try:
                response = await client.post(
                    f"{self.base_url}/chat/completions", json=payload, headers=headers
                )
            except httpx.TimeoutException as exc:
                raise GenerationTimeoutError(request.timeout_ms) from exc

        if not response.is_success:
            raise GenerationError(response.status_code, response.text)

        try:
            body = response.json()
        except ValueError as exc:
            raise GenerationError(response.status_code, "invalid JSON in response body") from exc

        text = self.extract_content(body).strip()
        if not text:
            raise EmptyResponseError()
        return text

    @staticmethod
    def build_messages(request: GenerationRequest) -> list[dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {
                "role": "user",
                "content": build_user_prompt(
                    request.owner, request.repo, request.branch, request.snapshot
                ),
            },
        ]

    @staticmethod
    def extract_content(payload: Any) -> str:
        if not isinstance(payload, dict):
            return ""
        choices = payload.get("choices")
        if not isinstance(choices, list) or not choices:
            return ""
        first = choices[0]
        if not isinstance(first, dict):
            return ""
        message = first.get("message")
        if isinstance(message, dict):
            content = message.get("content")
            if isinstance(content, str):
                return content
        return ""
