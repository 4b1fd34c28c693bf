"""
Discord Application-Command Registry Client

Thin async wrapper around the one REST call the sync needs: the
guild-scoped bulk overwrite of application commands.

IMPORTANT:
- Exactly one request per call, no retry and no backoff
- Configuration is passed in explicitly; nothing is read from os.environ
- Non-2xx responses raise RegistryHTTPError; transport failures
  propagate as httpx exceptions for the failure classifier
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from runtime.version import user_agent
from shared.config.registration import RegistrationConfig
from shared.logging.logger import get_logger

log = get_logger("discord.registry")

DEFAULT_API_BASE = "https://discord.com/api/v10"


class RegistryHTTPError(Exception):
    """
    The registry answered with a non-2xx status.

    Attributes:
    - status: HTTP status code
    - code: Discord JSON error code (e.g. 50001), when the body has one
    - raw_error: decoded JSON body (empty dict if the body was not JSON)
    """

    def __init__(
        self,
        *,
        status: int,
        code: Optional[int] = None,
        message: str = "",
        raw_error: Optional[Dict[str, Any]] = None,
        method: str = "PUT",
        url: str = "",
    ):
        self.status = status
        self.code = code
        self.message = message
        self.raw_error = raw_error or {}
        self.method = method
        self.url = url

        text = f"{method} {url} failed [{status}]"
        if message:
            text += f": {message}"
        if code is not None:
            text += f" (code {code})"
        super().__init__(text)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "RegistryHTTPError":
        try:
            body = response.json()
        except ValueError:
            body = None

        raw_error: Dict[str, Any] = body if isinstance(body, dict) else {}
        code = raw_error.get("code")

        return cls(
            status=response.status_code,
            code=code if isinstance(code, int) else None,
            message=str(raw_error.get("message") or response.reason_phrase),
            raw_error=raw_error,
            method=response.request.method,
            url=str(response.request.url),
        )


def guild_commands_route(application_id: str, guild_id: str) -> str:
    return f"/applications/{application_id}/guilds/{guild_id}/commands"


class GuildCommandRegistry:
    """
    Client for the guild-scoped command registry of one application.
    """

    def __init__(
        self,
        config: RegistrationConfig,
        *,
        api_base: str = DEFAULT_API_BASE,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._config = config
        self._api_base = api_base.rstrip("/")
        self._transport = transport

    @property
    def url(self) -> str:
        return self._api_base + guild_commands_route(
            self._config.application_id,
            self._config.guild_id,
        )

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bot {self._config.token}",
            "User-Agent": user_agent(),
            "Content-Type": "application/json",
        }

    async def bulk_overwrite(
        self,
        commands: List[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        """
        Replace every guild command with `commands`.

        Commands registered earlier but absent from the list are removed
        by Discord as part of this call. Returns the registered commands
        as echoed back by the API.
        """

        log.debug(f"PUT {self.url} ({len(commands)} commands)")

        async with httpx.AsyncClient(
            headers=self._headers(),
            transport=self._transport,
        ) as client:
            response = await client.put(self.url, json=commands)

        log.debug(f"Registry responded [{response.status_code}]")

        if response.is_success:
            # The replace has already been applied; an odd body is not a failure
            try:
                body = response.json()
            except ValueError:
                log.warning("Registry accepted the commands but returned a non-JSON body")
                return []
            return body if isinstance(body, list) else []

        raise RegistryHTTPError.from_response(response)
