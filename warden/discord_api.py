"""
Minimal Discord REST client.

Covers the handful of endpoints the whitelist needs: reading a guild
member's roles, adding/removing a role, and posting a channel message.
Every failure (connection error, non-2xx response) surfaces as
ExternalServiceError; callers decide whether to log and carry on.
"""

import logging
from typing import Any

import httpx

from warden.errors import ExternalServiceError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://discord.com/api/v10"
DEFAULT_TIMEOUT = 10.0
USER_AGENT = "DiscordBot (https://github.com/whitelist-warden, 0.1.0)"


class DiscordClient:

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={
                "Authorization": f"Bot {token}",
                "User-Agent": USER_AGENT,
            },
            timeout=timeout,
            transport=transport,
        )

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            resp = await self._client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise ExternalServiceError(f"Discord {method} {path} failed: {e}") from e

        if resp.is_error:
            raise ExternalServiceError(
                f"Discord {method} {path} returned {resp.status_code}",
                status_code=resp.status_code,
                body=resp.text,
            )
        return resp

    def _json(self, resp: httpx.Response) -> Any:
        try:
            return resp.json()
        except ValueError as e:
            raise ExternalServiceError(
                f"Discord returned a non-JSON body for {resp.request.method} {resp.request.url.path}",
                status_code=resp.status_code,
                body=resp.text,
            ) from e

    async def get_member(self, guild_id: str, user_id: str) -> dict[str, Any] | None:
        """Guild member object, or None if the user is not in the guild."""
        try:
            resp = await self._request("GET", f"/guilds/{guild_id}/members/{user_id}")
        except ExternalServiceError as e:
            if e.status_code == 404:
                return None
            raise
        return self._json(resp)

    async def add_role(self, guild_id: str, user_id: str, role_id: str) -> None:
        await self._request("PUT", f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}")

    async def remove_role(self, guild_id: str, user_id: str, role_id: str) -> None:
        await self._request("DELETE", f"/guilds/{guild_id}/members/{user_id}/roles/{role_id}")

    async def send_message(self, channel_id: str, content: str) -> dict[str, Any]:
        resp = await self._request(
            "POST", f"/channels/{channel_id}/messages", json={"content": content},
        )
        return self._json(resp)

    async def aclose(self) -> None:
        await self._client.aclose()
