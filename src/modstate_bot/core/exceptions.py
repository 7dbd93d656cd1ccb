"""Shared error hierarchy.

Integration-specific errors (mod.io, Discord) subclass these so the dispatcher
can tell retryable-by-the-user failures from permanent ones without knowing
which integration raised them.
"""

from __future__ import annotations

from typing import Optional


class ModStateError(Exception):
    """Base error for the bot."""

    recoverable: bool = True

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class TransientError(ModStateError):
    """Failure that may go away if the user runs the command again."""


class PermanentError(ModStateError):
    """Failure that will repeat until something outside the bot changes."""

    recoverable = False


class ConfigError(PermanentError):
    """Required configuration is missing or invalid."""
