"""Per-interaction state tracked while a slash command is being answered."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Optional

from .errors import InvalidSessionTransition


class SessionState(str, enum.Enum):
    RECEIVED = "received"
    ACKED = "acked"
    FETCHING = "fetching"
    TRANSLATING = "translating"
    DELIVERING_FOLLOWUP = "delivering_followup"
    DONE = "done"
    ERRORED = "errored"


class AckKind(str, enum.Enum):
    DEFERRED = "deferred"
    IMMEDIATE = "immediate"


TERMINAL_STATES = frozenset({SessionState.DONE, SessionState.ERRORED})

_ALLOWED_TRANSITIONS: dict[SessionState, frozenset[SessionState]] = {
    SessionState.RECEIVED: frozenset({SessionState.ACKED}),
    SessionState.ACKED: frozenset(
        {
            SessionState.FETCHING,
            SessionState.DELIVERING_FOLLOWUP,
            SessionState.ERRORED,
        }
    ),
    SessionState.FETCHING: frozenset(
        {
            SessionState.TRANSLATING,
            SessionState.DELIVERING_FOLLOWUP,
            SessionState.ERRORED,
        }
    ),
    SessionState.TRANSLATING: frozenset(
        {SessionState.DELIVERING_FOLLOWUP, SessionState.ERRORED}
    ),
    SessionState.DELIVERING_FOLLOWUP: frozenset(
        {SessionState.DONE, SessionState.ERRORED}
    ),
    SessionState.DONE: frozenset(),
    SessionState.ERRORED: frozenset(),
}


@dataclass
class InteractionSession:
    interaction_id: Optional[str]
    token: str
    command_name: str
    options: dict[str, Any] = field(default_factory=dict)
    user_id: Optional[str] = None
    state: SessionState = SessionState.RECEIVED
    ack: Optional[AckKind] = None
    followups_sent: int = 0
    error: Optional[BaseException] = None
    history: list[SessionState] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.history:
            self.history.append(self.state)

    @property
    def finished(self) -> bool:
        return self.state in TERMINAL_STATES

    def option(self, name: str) -> str:
        value = self.options.get(name)
        return "" if value is None else str(value).strip()

    def transition(self, target: SessionState) -> None:
        if target not in _ALLOWED_TRANSITIONS[self.state]:
            raise InvalidSessionTransition(
                f"interaction {self.interaction_id}: cannot move from "
                f"{self.state.value} to {target.value}"
            )
        self.state = target
        self.history.append(target)

    def mark_acked(self, kind: AckKind) -> None:
        self.transition(SessionState.ACKED)
        self.ack = kind

    def fail(self, exc: BaseException) -> None:
        self.error = exc
        if self.state is not SessionState.ERRORED:
            self.transition(SessionState.ERRORED)
