from __future__ import annotations

import pytest

from modstate_bot.integrations.discord.errors import InvalidSessionTransition
from modstate_bot.integrations.discord.session import (
    AckKind,
    InteractionSession,
    SessionState,
)


def _session(**options: object) -> InteractionSession:
    return InteractionSession(
        interaction_id="inter-1",
        token="tok-1",
        command_name="getstate",
        options=dict(options),
    )


def test_new_session_starts_received() -> None:
    session = _session()
    assert session.state is SessionState.RECEIVED
    assert session.history == [SessionState.RECEIVED]
    assert session.ack is None
    assert session.finished is False


def test_mark_acked_records_kind() -> None:
    session = _session()
    session.mark_acked(AckKind.DEFERRED)
    assert session.state is SessionState.ACKED
    assert session.ack is AckKind.DEFERRED


def test_cannot_fetch_before_ack() -> None:
    session = _session()
    with pytest.raises(InvalidSessionTransition, match="received to fetching"):
        session.transition(SessionState.FETCHING)
    assert session.state is SessionState.RECEIVED


def test_cannot_ack_twice() -> None:
    session = _session()
    session.mark_acked(AckKind.DEFERRED)
    with pytest.raises(InvalidSessionTransition):
        session.mark_acked(AckKind.IMMEDIATE)


def test_terminal_states_are_final() -> None:
    session = _session()
    session.mark_acked(AckKind.DEFERRED)
    session.transition(SessionState.DELIVERING_FOLLOWUP)
    session.transition(SessionState.DONE)

    assert session.finished is True
    with pytest.raises(InvalidSessionTransition):
        session.transition(SessionState.ERRORED)


def test_fail_records_error_once() -> None:
    session = _session()
    session.mark_acked(AckKind.DEFERRED)
    session.transition(SessionState.FETCHING)
    first = RuntimeError("first")
    session.fail(first)
    session.fail(RuntimeError("second"))

    assert session.state is SessionState.ERRORED
    assert str(session.error) == "second"
    assert session.history.count(SessionState.ERRORED) == 1


def test_option_is_stripped_text() -> None:
    session = _session(mod_id=" 2891 ", count=3)
    assert session.option("mod_id") == "2891"
    assert session.option("count") == "3"
    assert session.option("missing") == ""
