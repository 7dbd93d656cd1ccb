from __future__ import annotations

from typing import Any

from .handlers import FINDMOD_COMMAND, GETSTATE_COMMAND

# Discord application command types.
CHAT_INPUT = 1

# Discord application command option types.
STRING = 3


def build_application_commands() -> list[dict[str, Any]]:
    return [
        {
            "type": CHAT_INPUT,
            "name": GETSTATE_COMMAND,
            "description": "Get state.json for a mod",
            "options": [
                {
                    "type": STRING,
                    "name": "mod_id",
                    "description": "The ID of the mod from mod.io",
                    "required": True,
                }
            ],
        },
        {
            "type": CHAT_INPUT,
            "name": FINDMOD_COMMAND,
            "description": "Search for a mod by name",
            "options": [
                {
                    "type": STRING,
                    "name": "name",
                    "description": "Name of the mod to search for",
                    "required": True,
                }
            ],
        },
    ]
