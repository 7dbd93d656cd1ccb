"""Discord interactions: acknowledgement, followups and command handling."""

from .command_registry import sync_commands
from .commands import build_application_commands
from .constants import DISCORD_API_BASE_URL, DISCORD_MAX_MESSAGE_LENGTH
from .dispatcher import CommandDispatcher, InteractionAck
from .errors import DeliveryFailedError, DiscordError, InvalidSessionTransition
from .handlers import (
    FindModHandler,
    Followup,
    GetStateHandler,
    build_command_handlers,
)
from .responder import InteractionResponder
from .rest import DiscordRestClient
from .session import AckKind, InteractionSession, SessionState

__all__ = [
    "DISCORD_API_BASE_URL",
    "DISCORD_MAX_MESSAGE_LENGTH",
    "AckKind",
    "CommandDispatcher",
    "DeliveryFailedError",
    "DiscordError",
    "DiscordRestClient",
    "FindModHandler",
    "Followup",
    "GetStateHandler",
    "InteractionAck",
    "InteractionResponder",
    "InteractionSession",
    "InvalidSessionTransition",
    "SessionState",
    "build_application_commands",
    "build_command_handlers",
    "sync_commands",
]
