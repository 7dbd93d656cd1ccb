"""Slash-command handlers.

A handler fetches what its command needs and returns the single followup
the dispatcher should deliver. Failures are raised, not reported: the
dispatcher owns error delivery and asks the handler for the wording.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Awaitable, Optional, Protocol, Sequence, TypeVar

from ...state.models import STATE_FILENAME
from ...state.translator import render_state_json, translate
from ..modio.client import ModioClient
from ..modio.errors import (
    MalformedUpstreamRecordError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from ..modio.models import ModioModSummary
from .session import InteractionSession, SessionState

T = TypeVar("T")

GETSTATE_COMMAND = "getstate"
FINDMOD_COMMAND = "findmod"

SEARCH_RESULT_LIMIT = 5
SUMMARY_PREVIEW_CHARS = 100
SUMMARY_ELLIPSIS = "..."

NO_RESULTS_MESSAGE = "No mods found matching your search."
SEARCH_FAILED_MESSAGE = "Error searching for mods."
GENERIC_ERROR_MESSAGE = "An error occurred while processing your request."


@dataclass(frozen=True)
class Followup:
    content: str
    attachment: Optional[bytes] = None
    filename: Optional[str] = None


class CommandHandler(Protocol):
    name: str

    async def run(self, session: InteractionSession) -> Followup: ...

    def error_message(self, session: InteractionSession, exc: BaseException) -> str: ...


async def fetch_with_timeout(
    awaitable: Awaitable[T], timeout_seconds: Optional[float]
) -> T:
    if timeout_seconds is None:
        return await awaitable
    try:
        return await asyncio.wait_for(awaitable, timeout=timeout_seconds)
    except asyncio.TimeoutError as exc:
        raise UpstreamUnavailableError(
            f"mod.io did not answer within {timeout_seconds:g}s"
        ) from exc


def format_search_results(mods: Sequence[ModioModSummary]) -> str:
    if not mods:
        return NO_RESULTS_MESSAGE
    entries = [
        f"{mod.name} (ID: {mod.id}) - "
        f"{str(mod.summary or '')[:SUMMARY_PREVIEW_CHARS]}{SUMMARY_ELLIPSIS}"
        for mod in mods[:SEARCH_RESULT_LIMIT]
    ]
    return (
        "Found these mods:\n\n"
        + "\n\n".join(entries)
        + f"\n\nUse /{GETSTATE_COMMAND} with the mod ID to get the "
        f"{STATE_FILENAME} file."
    )


class FindModHandler:
    name = FINDMOD_COMMAND

    def __init__(
        self, modio: ModioClient, *, timeout_seconds: Optional[float] = None
    ) -> None:
        self._modio = modio
        self._timeout_seconds = timeout_seconds

    async def run(self, session: InteractionSession) -> Followup:
        query = session.option("name")
        session.transition(SessionState.FETCHING)
        mods = await fetch_with_timeout(
            self._modio.search_mods(query), self._timeout_seconds
        )
        return Followup(content=format_search_results(mods))

    def error_message(self, session: InteractionSession, exc: BaseException) -> str:
        if isinstance(exc, UpstreamError):
            return SEARCH_FAILED_MESSAGE
        return GENERIC_ERROR_MESSAGE


class GetStateHandler:
    name = GETSTATE_COMMAND

    def __init__(
        self, modio: ModioClient, *, timeout_seconds: Optional[float] = None
    ) -> None:
        self._modio = modio
        self._timeout_seconds = timeout_seconds

    async def run(self, session: InteractionSession) -> Followup:
        mod_id = session.option("mod_id")
        session.transition(SessionState.FETCHING)
        if not (mod_id.isascii() and mod_id.isdigit()):
            raise UpstreamNotFoundError(mod_id, status_code=None)
        record = await fetch_with_timeout(
            self._modio.get_mod(mod_id), self._timeout_seconds
        )
        session.transition(SessionState.TRANSLATING)
        document = render_state_json(translate(record))
        return Followup(
            content=f"Here's the {STATE_FILENAME} for {record.name}:",
            attachment=document,
            filename=STATE_FILENAME,
        )

    def error_message(self, session: InteractionSession, exc: BaseException) -> str:
        mod_id = session.option("mod_id")
        if isinstance(exc, UpstreamNotFoundError):
            return f"Error: Could not find a mod with ID {mod_id}."
        if isinstance(exc, MalformedUpstreamRecordError):
            return f"Error: mod.io returned incomplete data for mod ID {mod_id}"
        if isinstance(exc, UpstreamError):
            return f"Error: Could not fetch mod with ID {mod_id}"
        return GENERIC_ERROR_MESSAGE


def build_command_handlers(
    modio: ModioClient, *, timeout_seconds: Optional[float] = None
) -> list[CommandHandler]:
    return [
        GetStateHandler(modio, timeout_seconds=timeout_seconds),
        FindModHandler(modio, timeout_seconds=timeout_seconds),
    ]
