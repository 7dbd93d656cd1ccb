from __future__ import annotations

from typing import Optional

from ...core.exceptions import ModStateError, TransientError


class DiscordError(ModStateError):
    """Base Discord integration error."""


class DeliveryFailedError(DiscordError, TransientError):
    """Discord rejected or never received an interaction response or followup."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        body: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class InvalidSessionTransition(DiscordError):
    """An interaction session was asked to move to a state it cannot reach."""
