from __future__ import annotations

import json
import logging
from typing import Any, Optional

import httpx

from ...core.logging_utils import log_event
from .constants import DISCORD_API_BASE_URL
from .errors import DeliveryFailedError

logger = logging.getLogger(__name__)


def _body_preview(response: httpx.Response) -> str:
    return (response.text or "").strip().replace("\n", " ")[:200]


class DiscordRestClient:
    """Minimal Discord REST client.

    Requests are sent once; any non-2xx status or transport failure raises
    ``DeliveryFailedError``.
    """

    def __init__(
        self,
        *,
        bot_token: str,
        timeout_seconds: float = 10.0,
        base_url: str = DISCORD_API_BASE_URL,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._client = httpx.AsyncClient(
            base_url=base_url, timeout=timeout_seconds, transport=transport
        )
        self._authorization_header = f"Bot {bot_token}"

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "DiscordRestClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _send(
        self,
        method: str,
        path: str,
        *,
        payload: dict[str, Any] | list[dict[str, Any]] | None = None,
        data: Optional[dict[str, str]] = None,
        files: Optional[list[tuple[str, tuple[str, bytes, str]]]] = None,
    ) -> httpx.Response:
        try:
            response = await self._client.request(
                method,
                path,
                json=payload,
                data=data,
                files=files,
                headers={"Authorization": self._authorization_header},
            )
        except httpx.HTTPError as exc:
            log_event(
                logger,
                logging.WARNING,
                "discord.request.failed",
                method=method,
                path=_redact_token(path),
                exc=exc,
            )
            raise DeliveryFailedError(
                f"Discord API network error for {method} {_redact_token(path)}: {exc}"
            ) from exc

        if not 200 <= response.status_code < 300:
            log_event(
                logger,
                logging.WARNING,
                "discord.request.failed",
                method=method,
                path=_redact_token(path),
                status_code=response.status_code,
            )
            raise DeliveryFailedError(
                f"Discord API request failed for {method} {_redact_token(path)}: "
                f"status={response.status_code} body={_body_preview(response)!r}",
                status_code=response.status_code,
                body=response.text,
            )
        return response

    @staticmethod
    def _json_or_empty(response: httpx.Response) -> Any:
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError:
            return {}

    async def bulk_overwrite_application_commands(
        self,
        *,
        application_id: str,
        commands: list[dict[str, Any]],
        guild_id: str | None = None,
    ) -> list[dict[str, Any]]:
        path = (
            f"/applications/{application_id}/commands"
            if guild_id is None
            else f"/applications/{application_id}/guilds/{guild_id}/commands"
        )
        payload = self._json_or_empty(await self._send("PUT", path, payload=commands))
        if not isinstance(payload, list):
            return []
        return [item for item in payload if isinstance(item, dict)]

    async def create_interaction_response(
        self,
        *,
        interaction_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> None:
        await self._send(
            "POST",
            f"/interactions/{interaction_id}/{interaction_token}/callback",
            payload=payload,
        )

    async def create_followup_message(
        self,
        *,
        application_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        response = await self._send(
            "POST",
            f"/webhooks/{application_id}/{interaction_token}",
            payload=payload,
        )
        body = self._json_or_empty(response)
        return body if isinstance(body, dict) else {}

    async def create_followup_message_with_attachment(
        self,
        *,
        application_id: str,
        interaction_token: str,
        data: bytes,
        filename: str,
        content_type: str = "application/json",
        content: Optional[str] = None,
    ) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if content:
            payload["content"] = content
        response = await self._send(
            "POST",
            f"/webhooks/{application_id}/{interaction_token}",
            data={"payload_json": json.dumps(payload)},
            files=[("files[0]", (filename, data, content_type))],
        )
        body = self._json_or_empty(response)
        return body if isinstance(body, dict) else {}


def _redact_token(path: str) -> str:
    # Interaction tokens are bearer credentials for the followup webhook.
    parts = path.split("/")
    if len(parts) >= 4 and parts[1] in {"webhooks", "interactions"}:
        parts[3] = "<token>"
    return "/".join(parts)
