from __future__ import annotations

import json
import logging
from typing import Any, Optional

import pytest

from modstate_bot.core.exceptions import TransientError
from modstate_bot.integrations.discord.dispatcher import CommandDispatcher
from modstate_bot.integrations.discord.errors import DeliveryFailedError
from modstate_bot.integrations.discord.handlers import (
    GENERIC_ERROR_MESSAGE,
    NO_RESULTS_MESSAGE,
    SEARCH_FAILED_MESSAGE,
    build_command_handlers,
)
from modstate_bot.integrations.discord.responder import InteractionResponder
from modstate_bot.integrations.discord.session import SessionState
from modstate_bot.integrations.modio.errors import (
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from modstate_bot.integrations.modio.models import (
    decode_mod,
    decode_search_results,
)
from tests.fixtures.modio_payloads import build_mod_payload, build_search_payload


class _FakeRest:
    def __init__(self, *, fail_followups: int = 0) -> None:
        self.followups: list[dict[str, Any]] = []
        self.attachments: list[dict[str, Any]] = []
        self._fail_followups = fail_followups

    def _maybe_fail(self) -> None:
        if self._fail_followups > 0:
            self._fail_followups -= 1
            raise DeliveryFailedError("followup rejected", status_code=404)

    async def create_followup_message(
        self,
        *,
        application_id: str,
        interaction_token: str,
        payload: dict[str, Any],
    ) -> dict[str, Any]:
        self._maybe_fail()
        self.followups.append(
            {
                "application_id": application_id,
                "token": interaction_token,
                "payload": payload,
            }
        )
        return {"id": f"msg-{len(self.followups)}"}

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
        self._maybe_fail()
        self.attachments.append(
            {
                "application_id": application_id,
                "token": interaction_token,
                "data": data,
                "filename": filename,
                "content_type": content_type,
                "content": content,
            }
        )
        return {"id": "msg-file"}

    @property
    def delivered(self) -> int:
        return len(self.followups) + len(self.attachments)


class _FakeModio:
    def __init__(
        self,
        *,
        mod: Optional[dict[str, Any]] = None,
        search: Optional[dict[str, Any]] = None,
        error: Optional[Exception] = None,
    ) -> None:
        self._mod = mod
        self._search = search
        self._error = error
        self.calls: list[tuple[str, str]] = []

    async def get_mod(self, mod_id: str):
        self.calls.append(("get_mod", mod_id))
        if self._error is not None:
            raise self._error
        return decode_mod(self._mod)

    async def search_mods(self, query: str):
        self.calls.append(("search_mods", query))
        if self._error is not None:
            raise self._error
        return decode_search_results(self._search)


def _dispatcher(rest: _FakeRest, modio: _FakeModio) -> CommandDispatcher:
    return CommandDispatcher(
        responder=InteractionResponder(rest, application_id="app-1"),
        handlers=build_command_handlers(modio, timeout_seconds=5.0),
        logger=logging.getLogger("test.modstate.dispatcher"),
    )


def _interaction(name: str, /, **options: str) -> dict[str, Any]:
    return {
        "id": "inter-1",
        "type": 2,
        "token": "tok-1",
        "member": {"user": {"id": "user-1"}},
        "data": {
            "name": name,
            "options": [
                {"type": 3, "name": key, "value": value}
                for key, value in options.items()
            ],
        },
    }


class _AckRecorder:
    def __init__(self, *, error: Optional[Exception] = None) -> None:
        self.bodies: list[dict[str, Any]] = []
        self._error = error

    async def __call__(self, body: dict[str, Any]) -> None:
        self.bodies.append(body)
        if self._error is not None:
            raise self._error


@pytest.mark.anyio
async def test_getstate_delivers_state_json_attachment() -> None:
    rest = _FakeRest()
    modio = _FakeModio(mod=build_mod_payload())
    acks = _AckRecorder()

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id=" 2891 "), acks
    )

    assert acks.bodies == [{"type": 5}]
    assert modio.calls == [("get_mod", "2891")]
    assert rest.followups == []
    assert len(rest.attachments) == 1
    attachment = rest.attachments[0]
    assert attachment["filename"] == "state.json"
    assert attachment["content"] == "Here's the state.json for Farmhouse Extended:"
    assert attachment["token"] == "tok-1"
    assert json.loads(attachment["data"])["iD"] == 2891
    assert session is not None
    assert session.state is SessionState.DONE
    assert session.followups_sent == 1
    assert session.history == [
        SessionState.RECEIVED,
        SessionState.ACKED,
        SessionState.FETCHING,
        SessionState.TRANSLATING,
        SessionState.DELIVERING_FOLLOWUP,
        SessionState.DONE,
    ]


@pytest.mark.anyio
async def test_getstate_not_found_reports_the_id_without_a_file() -> None:
    rest = _FakeRest()
    modio = _FakeModio(error=UpstreamNotFoundError("999999999"))

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="999999999"), _AckRecorder()
    )

    assert rest.attachments == []
    assert len(rest.followups) == 1
    assert "999999999" in rest.followups[0]["payload"]["content"]
    assert session is not None
    assert session.state is SessionState.ERRORED
    assert isinstance(session.error, UpstreamNotFoundError)
    assert session.followups_sent == 1


@pytest.mark.anyio
async def test_getstate_rejects_non_numeric_id_without_fetching() -> None:
    rest = _FakeRest()
    modio = _FakeModio(mod=build_mod_payload())

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="../2891"), _AckRecorder()
    )

    assert modio.calls == []
    assert rest.followups[0]["payload"]["content"] == (
        "Error: Could not find a mod with ID ../2891."
    )
    assert session is not None and session.state is SessionState.ERRORED


@pytest.mark.anyio
async def test_getstate_unavailable_upstream_reports_fetch_error() -> None:
    rest = _FakeRest()
    modio = _FakeModio(error=UpstreamUnavailableError("boom", status_code=503))

    await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="2891"), _AckRecorder()
    )

    assert [item["payload"]["content"] for item in rest.followups] == [
        "Error: Could not fetch mod with ID 2891"
    ]


@pytest.mark.anyio
async def test_getstate_malformed_record_reports_without_attachment() -> None:
    payload = build_mod_payload()
    payload["stats"] = None
    rest = _FakeRest()

    session = await _dispatcher(rest, _FakeModio(mod=payload)).handle(
        _interaction("getstate", mod_id="2891"), _AckRecorder()
    )

    assert rest.attachments == []
    assert rest.followups[0]["payload"]["content"] == (
        "Error: mod.io returned incomplete data for mod ID 2891"
    )
    assert session is not None and session.state is SessionState.ERRORED


@pytest.mark.anyio
async def test_findmod_with_no_results() -> None:
    rest = _FakeRest()
    modio = _FakeModio(search=build_search_payload(0))

    session = await _dispatcher(rest, modio).handle(
        _interaction("findmod", name="nothing"), _AckRecorder()
    )

    assert [item["payload"]["content"] for item in rest.followups] == [
        NO_RESULTS_MESSAGE
    ]
    assert rest.attachments == []
    assert session is not None and session.state is SessionState.DONE
    assert SessionState.TRANSLATING not in session.history


@pytest.mark.anyio
async def test_findmod_lists_first_five_results_in_upstream_order() -> None:
    rest = _FakeRest()
    modio = _FakeModio(search=build_search_payload(7, summary="x" * 150))

    await _dispatcher(rest, modio).handle(
        _interaction("findmod", name="farm"), _AckRecorder()
    )

    assert modio.calls == [("search_mods", "farm")]
    content = rest.followups[0]["payload"]["content"]
    assert content.startswith("Found these mods:\n\n")
    assert content.endswith(
        "\n\nUse /getstate with the mod ID to get the state.json file."
    )
    for index in range(5):
        assert f"Mod {index} (ID: {1000 + index}) - {'x' * 100}..." in content
    assert "Mod 5" not in content
    assert "Mod 6" not in content
    assert content.index("Mod 0") < content.index("Mod 4")


@pytest.mark.anyio
async def test_findmod_upstream_failure_uses_search_error_text() -> None:
    rest = _FakeRest()
    modio = _FakeModio(error=UpstreamUnavailableError("down", status_code=502))

    await _dispatcher(rest, modio).handle(
        _interaction("findmod", name="farm"), _AckRecorder()
    )

    assert [item["payload"]["content"] for item in rest.followups] == [
        SEARCH_FAILED_MESSAGE
    ]


@pytest.mark.anyio
async def test_unexpected_handler_error_uses_generic_message() -> None:
    rest = _FakeRest()
    modio = _FakeModio(error=RuntimeError("surprise"))

    session = await _dispatcher(rest, modio).handle(
        _interaction("findmod", name="farm"), _AckRecorder()
    )

    assert [item["payload"]["content"] for item in rest.followups] == [
        GENERIC_ERROR_MESSAGE
    ]
    assert session is not None and session.state is SessionState.ERRORED


@pytest.mark.anyio
async def test_failed_attachment_delivery_falls_back_to_one_error_followup() -> None:
    rest = _FakeRest(fail_followups=1)
    modio = _FakeModio(mod=build_mod_payload())

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="2891"), _AckRecorder()
    )

    assert rest.attachments == []
    assert [item["payload"]["content"] for item in rest.followups] == [
        GENERIC_ERROR_MESSAGE
    ]
    assert session is not None
    assert session.state is SessionState.ERRORED
    assert session.followups_sent == 1


@pytest.mark.anyio
async def test_failed_error_followup_is_dropped(
    caplog: pytest.LogCaptureFixture,
) -> None:
    rest = _FakeRest(fail_followups=2)
    modio = _FakeModio(error=UpstreamNotFoundError("42"))

    with caplog.at_level(logging.WARNING, logger="test.modstate.dispatcher"):
        session = await _dispatcher(rest, modio).handle(
            _interaction("getstate", mod_id="42"), _AckRecorder()
        )

    assert rest.delivered == 0
    assert session is not None
    assert session.state is SessionState.ERRORED
    assert session.followups_sent == 0
    assert any("discord.followup.dropped" in message for message in caplog.messages)


@pytest.mark.anyio
async def test_failed_ack_skips_the_upstream_call() -> None:
    rest = _FakeRest()
    modio = _FakeModio(mod=build_mod_payload())
    acks = _AckRecorder(error=DeliveryFailedError("ack rejected", status_code=404))

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="2891"), acks
    )

    assert len(acks.bodies) == 1
    assert modio.calls == []
    assert rest.delivered == 0
    assert session is not None and session.state is SessionState.ERRORED


@pytest.mark.anyio
async def test_ping_is_answered_with_pong_and_no_session() -> None:
    rest = _FakeRest()
    acks = _AckRecorder()

    session = await _dispatcher(rest, _FakeModio()).handle({"type": 1}, acks)

    assert session is None
    assert acks.bodies == [{"type": 1}]
    assert rest.delivered == 0


def test_unknown_command_is_not_acknowledged() -> None:
    dispatcher = _dispatcher(_FakeRest(), _FakeModio())

    assert dispatcher.acknowledge(_interaction("frobnicate")) is None
    assert dispatcher.acknowledge({"type": 3, "token": "tok-1"}) is None
    assert dispatcher.command_names == ("getstate", "findmod")


def test_acknowledge_returns_deferred_ack_with_acked_session() -> None:
    ack = _dispatcher(_FakeRest(), _FakeModio()).acknowledge(
        _interaction("findmod", name="farm")
    )

    assert ack is not None
    assert ack.body == {"type": 5}
    assert ack.session is not None
    assert ack.session.state is SessionState.ACKED
    assert ack.session.user_id == "user-1"
    assert ack.session.option("name") == "farm"


class _ClosedRest(_FakeRest):
    async def create_followup_message(self, **kwargs: Any) -> dict[str, Any]:
        raise RuntimeError("Cannot send a request, as the client has been closed.")


@pytest.mark.anyio
async def test_complete_swallows_unexpected_error_followup_failure(
    caplog: pytest.LogCaptureFixture,
) -> None:
    rest = _ClosedRest()
    modio = _FakeModio(error=UpstreamUnavailableError("down", status_code=503))
    dispatcher = _dispatcher(rest, modio)
    ack = dispatcher.acknowledge(_interaction("findmod", name="farm"))
    assert ack is not None and ack.session is not None

    with caplog.at_level(logging.WARNING, logger="test.modstate.dispatcher"):
        await dispatcher.complete(ack.session)

    assert ack.session.state is SessionState.ERRORED
    assert ack.session.followups_sent == 0
    assert any("discord.followup.dropped" in message for message in caplog.messages)


@pytest.mark.anyio
async def test_error_user_message_overrides_handler_wording() -> None:
    rest = _FakeRest()
    modio = _FakeModio(
        error=TransientError("quota", user_message="mod.io is busy, try again.")
    )

    await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="2891"), _AckRecorder()
    )

    assert [item["payload"]["content"] for item in rest.followups] == [
        "mod.io is busy, try again."
    ]


@pytest.mark.anyio
async def test_getstate_rejects_non_ascii_digits_without_fetching() -> None:
    rest = _FakeRest()
    modio = _FakeModio(mod=build_mod_payload())

    session = await _dispatcher(rest, modio).handle(
        _interaction("getstate", mod_id="²³"), _AckRecorder()
    )

    assert modio.calls == []
    assert rest.followups[0]["payload"]["content"] == (
        "Error: Could not find a mod with ID ²³."
    )
    assert session is not None and session.state is SessionState.ERRORED
