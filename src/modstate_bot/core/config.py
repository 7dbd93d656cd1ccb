from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

from .exceptions import ConfigError

logger = logging.getLogger(__name__)

DISCORD_TOKEN_ENV = "DISCORD_TOKEN"
DISCORD_APPLICATION_ID_ENV = "DISCORD_APPLICATION_ID"
DISCORD_PUBLIC_KEY_ENV = "DISCORD_PUBLIC_KEY"
MODIO_API_KEY_ENV = "MOD_IO_API_KEY"
UPSTREAM_TIMEOUT_ENV = "MODSTATE_UPSTREAM_TIMEOUT_SECONDS"
COMMAND_SCOPE_ENV = "MODSTATE_COMMAND_SCOPE"
GUILD_IDS_ENV = "MODSTATE_GUILD_IDS"
LOG_PATH_ENV = "MODSTATE_LOG_PATH"

REQUIRED_ENV_VARS = (
    DISCORD_TOKEN_ENV,
    DISCORD_APPLICATION_ID_ENV,
    DISCORD_PUBLIC_KEY_ENV,
    MODIO_API_KEY_ENV,
)

# Insurgency: Sandstorm.
MODIO_GAME_ID = "254"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 10.0
DEFAULT_COMMAND_SCOPE = "global"
COMMAND_SCOPES = frozenset({"global", "guild"})


@dataclass(frozen=True)
class BotConfig:
    bot_token: str
    application_id: str
    public_key: str
    modio_api_key: str
    modio_game_id: str = MODIO_GAME_ID
    upstream_timeout_seconds: float = DEFAULT_UPSTREAM_TIMEOUT_SECONDS
    command_scope: str = DEFAULT_COMMAND_SCOPE
    guild_ids: tuple[str, ...] = ()
    log_path: Optional[Path] = None

    @classmethod
    def from_env(cls, env: Optional[Mapping[str, str]] = None) -> "BotConfig":
        source = env if env is not None else os.environ
        values = {name: _clean(source.get(name)) for name in REQUIRED_ENV_VARS}
        missing = [name for name, value in values.items() if value is None]
        if missing:
            raise ConfigError(
                "missing required environment variables: " + ", ".join(missing)
            )

        timeout = _parse_positive_float(
            source.get(UPSTREAM_TIMEOUT_ENV),
            default=DEFAULT_UPSTREAM_TIMEOUT_SECONDS,
            key=UPSTREAM_TIMEOUT_ENV,
        )

        scope = (_clean(source.get(COMMAND_SCOPE_ENV)) or DEFAULT_COMMAND_SCOPE).lower()
        if scope not in COMMAND_SCOPES:
            raise ConfigError(f"{COMMAND_SCOPE_ENV} must be 'global' or 'guild'")
        guild_ids = tuple(_parse_string_ids(source.get(GUILD_IDS_ENV)))
        if scope == "guild" and not guild_ids:
            raise ConfigError(f"{COMMAND_SCOPE_ENV}=guild requires {GUILD_IDS_ENV}")

        log_path_raw = _clean(source.get(LOG_PATH_ENV))

        return cls(
            bot_token=values[DISCORD_TOKEN_ENV] or "",
            application_id=values[DISCORD_APPLICATION_ID_ENV] or "",
            public_key=values[DISCORD_PUBLIC_KEY_ENV] or "",
            modio_api_key=values[MODIO_API_KEY_ENV] or "",
            upstream_timeout_seconds=timeout,
            command_scope=scope,
            guild_ids=guild_ids,
            log_path=Path(log_path_raw).expanduser() if log_path_raw else None,
        )


def load_env_file(path: Path) -> bool:
    """Load ``path`` without overriding variables that are already set."""
    try:
        if path.is_file():
            return bool(load_dotenv(dotenv_path=path, override=False))
    except OSError as exc:
        logger.debug("Failed to load .env file %s: %s", path, exc)
    return False


def load_dotenv_for_root(root: Path) -> bool:
    return load_env_file(root.resolve() / ".env")


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_string_ids(value: Optional[str]) -> list[str]:
    if not value:
        return []
    return [token.strip() for token in value.split(",") if token.strip()]


def _parse_positive_float(value: Optional[str], *, default: float, key: str) -> float:
    cleaned = _clean(value)
    if cleaned is None:
        return default
    try:
        parsed = float(cleaned)
    except ValueError as exc:
        raise ConfigError(f"{key} must be a number") from exc
    if parsed <= 0:
        raise ConfigError(f"{key} must be > 0")
    return parsed
