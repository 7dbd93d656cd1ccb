"""The game's ``state.json`` schema and the mod.io → state.json mapping."""

from .models import STATE_FILENAME, ModState
from .translator import render_state_json, translate, translate_payload

__all__ = [
    "STATE_FILENAME",
    "ModState",
    "render_state_json",
    "translate",
    "translate_payload",
]
