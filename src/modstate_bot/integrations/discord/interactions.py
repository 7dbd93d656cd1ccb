from __future__ import annotations

from typing import Any, Optional

from .constants import INTERACTION_TYPE_APPLICATION_COMMAND, INTERACTION_TYPE_PING


def _as_id(value: object) -> str | None:
    if value is None:
        return None
    token = str(value).strip()
    return token or None


def extract_command_name_and_options(
    interaction_payload: dict[str, Any],
) -> tuple[Optional[str], dict[str, Any]]:
    data = interaction_payload.get("data")
    if not isinstance(data, dict):
        return None, {}

    name = data.get("name")
    if not isinstance(name, str) or not name:
        return None, {}

    options = data.get("options")
    parsed_options: dict[str, Any] = {}
    for item in options if isinstance(options, list) else []:
        if not isinstance(item, dict):
            continue
        option_name = item.get("name")
        if not isinstance(option_name, str) or not option_name:
            continue
        parsed_options[option_name] = item.get("value")

    return name, parsed_options


def extract_interaction_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("id"))


def extract_interaction_token(interaction_payload: dict[str, Any]) -> Optional[str]:
    return _as_id(interaction_payload.get("token"))


def extract_user_id(interaction_payload: dict[str, Any]) -> Optional[str]:
    member = interaction_payload.get("member")
    if isinstance(member, dict):
        member_user = member.get("user")
        if isinstance(member_user, dict):
            user_id = _as_id(member_user.get("id"))
            if user_id:
                return user_id
    user = interaction_payload.get("user")
    if isinstance(user, dict):
        return _as_id(user.get("id"))
    return None


def is_ping(interaction_payload: dict[str, Any]) -> bool:
    return interaction_payload.get("type") == INTERACTION_TYPE_PING


def is_application_command(interaction_payload: dict[str, Any]) -> bool:
    return interaction_payload.get("type") == INTERACTION_TYPE_APPLICATION_COMMAND
