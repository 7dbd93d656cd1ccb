from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, Optional

from ...core.exceptions import ModStateError
from ...core.logging_utils import log_event
from .errors import DeliveryFailedError
from .handlers import GENERIC_ERROR_MESSAGE, CommandHandler, Followup
from .interactions import (
    extract_command_name_and_options,
    extract_interaction_id,
    extract_interaction_token,
    extract_user_id,
    is_application_command,
    is_ping,
)
from .responder import InteractionResponder
from .session import AckKind, InteractionSession, SessionState

SendAck = Callable[[dict[str, Any]], Awaitable[None]]


@dataclass(frozen=True)
class InteractionAck:
    """Acknowledgement body plus the session still owed a followup, if any."""

    body: dict[str, Any]
    session: Optional[InteractionSession] = None


class CommandDispatcher:
    """Drives one interaction from acknowledgement to its single followup.

    ``acknowledge`` is synchronous so the ack can be returned within Discord's
    three-second window before any upstream call starts. ``complete`` does the
    slow part and never raises: every failure ends as one text followup, and
    a failure to send that followup is logged and dropped.
    """

    def __init__(
        self,
        *,
        responder: InteractionResponder,
        handlers: Iterable[CommandHandler],
        logger: logging.Logger,
    ) -> None:
        self._responder = responder
        self._handlers = {handler.name: handler for handler in handlers}
        self._logger = logger

    @property
    def command_names(self) -> tuple[str, ...]:
        return tuple(self._handlers)

    def acknowledge(self, payload: dict[str, Any]) -> Optional[InteractionAck]:
        if is_ping(payload):
            return InteractionAck(body=self._responder.pong())
        if not is_application_command(payload):
            log_event(
                self._logger,
                logging.WARNING,
                "discord.interaction.ignored",
                reason="unsupported_type",
                interaction_type=payload.get("type"),
            )
            return None

        command_name, options = extract_command_name_and_options(payload)
        token = extract_interaction_token(payload)
        interaction_id = extract_interaction_id(payload)
        if command_name not in self._handlers or not token:
            log_event(
                self._logger,
                logging.WARNING,
                "discord.interaction.ignored",
                reason="unknown_command" if token else "missing_token",
                command=command_name,
                interaction_id=interaction_id,
            )
            return None

        session = InteractionSession(
            interaction_id=interaction_id,
            token=token,
            command_name=command_name,
            options=options,
            user_id=extract_user_id(payload),
        )
        session.mark_acked(AckKind.DEFERRED)
        log_event(
            self._logger,
            logging.INFO,
            "discord.interaction.acked",
            command=command_name,
            interaction_id=interaction_id,
            ack=AckKind.DEFERRED.value,
        )
        return InteractionAck(body=self._responder.deferred_ack(), session=session)

    async def complete(self, session: InteractionSession) -> None:
        handler = self._handlers[session.command_name]
        try:
            followup = await handler.run(session)
            session.transition(SessionState.DELIVERING_FOLLOWUP)
            await self._deliver(session, followup)
            session.followups_sent += 1
            session.transition(SessionState.DONE)
        except Exception as exc:
            failed_in = session.state
            session.fail(exc)
            expected = isinstance(exc, ModStateError)
            log_event(
                self._logger,
                logging.WARNING if expected else logging.ERROR,
                "discord.interaction.failed",
                command=session.command_name,
                interaction_id=session.interaction_id,
                state=failed_in.value,
                recoverable=getattr(exc, "recoverable", False),
                exc=exc,
            )
            if isinstance(exc, DeliveryFailedError) or not expected:
                message = GENERIC_ERROR_MESSAGE
            elif isinstance(exc, ModStateError) and exc.user_message:
                message = exc.user_message
            else:
                message = handler.error_message(session, exc)
            await self._report_error(session, message)
            return

        log_event(
            self._logger,
            logging.INFO,
            "discord.interaction.completed",
            command=session.command_name,
            interaction_id=session.interaction_id,
            attachment=followup.filename,
        )

    async def handle(
        self, payload: dict[str, Any], send_ack: SendAck
    ) -> Optional[InteractionSession]:
        ack = self.acknowledge(payload)
        if ack is None:
            return None
        try:
            await send_ack(ack.body)
        except DeliveryFailedError as exc:
            if ack.session is not None:
                ack.session.fail(exc)
            log_event(
                self._logger,
                logging.WARNING,
                "discord.ack.dropped",
                interaction_id=extract_interaction_id(payload),
                exc=exc,
            )
            return ack.session
        if ack.session is None:
            return None
        await self.complete(ack.session)
        return ack.session

    async def _deliver(self, session: InteractionSession, followup: Followup) -> None:
        if followup.attachment is not None:
            await self._responder.send_followup_file(
                session.token,
                filename=followup.filename or "attachment.json",
                data=followup.attachment,
                content=followup.content,
            )
            return
        await self._responder.send_followup(session.token, followup.content)

    async def _report_error(self, session: InteractionSession, message: str) -> None:
        try:
            await self._responder.send_followup(session.token, message)
        except Exception as exc:
            log_event(
                self._logger,
                logging.ERROR,
                "discord.followup.dropped",
                command=session.command_name,
                interaction_id=session.interaction_id,
                exc=exc,
            )
            return
        session.followups_sent += 1
