"""GitHub App authentication: app JWTs and installation tokens."""

from __future__ import annotations

import time
from typing import Callable

import httpx
import jwt

from .client import DEFAULT_API_URL, GitHubClient, default_headers, raise_for_status

# GitHub rejects app JWTs that live longer than ten minutes.
JWT_TTL_SECONDS = 540
JWT_CLOCK_SKEW_SECONDS = 60


class GitHubApp:
    """Exchanges the app identity for installation-scoped API clients."""

    def __init__(
        self,
        app_id: str,
        private_key: str,
        *,
        base_url: str = DEFAULT_API_URL,
        transport: httpx.AsyncBaseTransport | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.app_id = str(app_id)
        self.private_key = private_key
        self.base_url = base_url.rstrip("/")
        self._transport = transport
        self._clock = clock

    def create_jwt(self) -> str:
        now = int(self._clock())
        payload = {
            "iat": now - JWT_CLOCK_SKEW_SECONDS,
            "exp": now + JWT_TTL_SECONDS,
            "iss": self.app_id,
        }
        return jwt.encode(payload, self.private_key, algorithm="RS256")

    async def create_installation_token(self, installation_id: int) -> str:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            headers=default_headers(self.create_jwt()),
            transport=self._transport,
            timeout=30.0,
        ) as client:
            response = await client.post(f"/app/installations/{installation_id}/access_tokens")
        raise_for_status(response)
        return str(response.json()["token"])

    async def installation_client(self, installation_id: int) -> GitHubClient:
        """Return a client authenticated as the given installation."""
        token = await self.create_installation_token(installation_id)
        return GitHubClient(token, base_url=self.base_url, transport=self._transport)
