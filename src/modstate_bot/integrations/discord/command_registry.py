from __future__ import annotations

import logging
from typing import Any, Optional

from ...core.logging_utils import log_event
from .rest import DiscordRestClient

GLOBAL_SCOPE = "global"
GUILD_SCOPE = "guild"


def _sync_targets(scope: str, guild_ids: tuple[str, ...]) -> list[Optional[str]]:
    if scope == GLOBAL_SCOPE:
        return [None]
    if scope != GUILD_SCOPE:
        raise ValueError(f"scope must be '{GLOBAL_SCOPE}' or '{GUILD_SCOPE}'")
    targets = sorted({guild_id.strip() for guild_id in guild_ids if guild_id.strip()})
    if not targets:
        raise ValueError("guild scope requires at least one guild_id")
    return list(targets)


async def sync_commands(
    rest: DiscordRestClient,
    *,
    application_id: str,
    commands: list[dict[str, Any]],
    scope: str,
    guild_ids: tuple[str, ...],
    logger: logging.Logger,
) -> dict[str, list[str]]:
    """Overwrite the application's slash commands globally or per guild.

    Returns the command names Discord reported back, keyed by guild id
    (``"global"`` for the global scope).
    """
    normalized_scope = scope.strip().lower()
    targets = _sync_targets(normalized_scope, guild_ids)
    expected = {str(command.get("name")) for command in commands}

    registered: dict[str, list[str]] = {}
    for guild_id in targets:
        updated = await rest.bulk_overwrite_application_commands(
            application_id=application_id,
            commands=commands,
            guild_id=guild_id,
        )
        names = [str(item.get("name")) for item in updated if item.get("name")]
        registered[guild_id or GLOBAL_SCOPE] = names
        log_event(
            logger,
            logging.INFO,
            "discord.commands.sync.overwrite",
            scope=normalized_scope,
            guild_id=guild_id,
            application_id=application_id,
            command_count=len(commands),
            registered=names,
        )
        missing = sorted(expected - set(names))
        if updated and missing:
            log_event(
                logger,
                logging.WARNING,
                "discord.commands.sync.incomplete",
                guild_id=guild_id,
                missing=missing,
            )
    return registered
