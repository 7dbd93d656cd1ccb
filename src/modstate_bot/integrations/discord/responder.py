from __future__ import annotations

from typing import Any, Optional

from .constants import (
    CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE,
    CALLBACK_DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE,
    CALLBACK_PONG,
    DISCORD_MAX_MESSAGE_LENGTH,
)
from .rest import DiscordRestClient

_ELLIPSIS = "..."


def truncate_for_discord(text: str, max_len: int = DISCORD_MAX_MESSAGE_LENGTH) -> str:
    if not text:
        return ""
    if len(text) <= max_len:
        return text
    return text[: max(max_len - len(_ELLIPSIS), 0)] + _ELLIPSIS


class InteractionResponder:
    """Builds interaction acknowledgements and posts followups for one application.

    Acknowledgements are usually returned as the body of Discord's inbound
    HTTP request, so the ``*_ack`` builders only produce payloads;
    ``post_ack`` sends one through the REST callback endpoint instead.
    Followups go to the per-interaction webhook and may arrive up to 15
    minutes after the acknowledgement.
    """

    def __init__(self, rest: DiscordRestClient, *, application_id: str) -> None:
        self._rest = rest
        self._application_id = application_id

    @staticmethod
    def pong() -> dict[str, Any]:
        return {"type": CALLBACK_PONG}

    @staticmethod
    def deferred_ack() -> dict[str, Any]:
        return {"type": CALLBACK_DEFERRED_CHANNEL_MESSAGE_WITH_SOURCE}

    @staticmethod
    def immediate_reply(content: str) -> dict[str, Any]:
        return {
            "type": CALLBACK_CHANNEL_MESSAGE_WITH_SOURCE,
            "data": {"content": truncate_for_discord(content)},
        }

    async def post_ack(
        self, interaction_id: str, interaction_token: str, body: dict[str, Any]
    ) -> None:
        await self._rest.create_interaction_response(
            interaction_id=interaction_id,
            interaction_token=interaction_token,
            payload=body,
        )

    async def send_followup(self, interaction_token: str, content: str) -> None:
        await self._rest.create_followup_message(
            application_id=self._application_id,
            interaction_token=interaction_token,
            payload={"content": truncate_for_discord(content)},
        )

    async def send_followup_file(
        self,
        interaction_token: str,
        *,
        filename: str,
        data: bytes,
        content: Optional[str] = None,
    ) -> None:
        await self._rest.create_followup_message_with_attachment(
            application_id=self._application_id,
            interaction_token=interaction_token,
            data=data,
            filename=filename,
            content_type="application/json",
            content=truncate_for_discord(content) if content else None,
        )
