from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any, Awaitable, Callable, NoReturn, Optional

import typer

from . import __version__
from .core.config import BotConfig, load_dotenv_for_root, load_env_file
from .core.exceptions import ConfigError
from .core.logging_utils import setup_rotating_logger
from .integrations.discord.command_registry import sync_commands
from .integrations.discord.commands import build_application_commands
from .integrations.discord.errors import DeliveryFailedError
from .integrations.discord.rest import DiscordRestClient

app = typer.Typer(add_completion=False, help="mod.io → state.json Discord bot")

LOGGER_NAME = "modstate_bot"


def _raise_exit(message: str, *, cause: Optional[BaseException] = None) -> NoReturn:
    typer.echo(message, err=True)
    raise typer.Exit(code=1) from cause


def _load_config(env_file: Optional[Path]) -> BotConfig:
    if env_file is not None:
        if not env_file.exists():
            _raise_exit(f"env file not found: {env_file}")
        load_env_file(env_file)
    else:
        load_dotenv_for_root(Path.cwd())
    try:
        return BotConfig.from_env()
    except ConfigError as exc:
        _raise_exit(str(exc), cause=exc)


async def _sync_application_commands(
    config: BotConfig,
    *,
    logger: logging.Logger,
    rest_client_factory: Callable[..., Any] = DiscordRestClient,
    sync_func: Callable[..., Awaitable[Any]] = sync_commands,
) -> None:
    commands = build_application_commands()
    async with rest_client_factory(bot_token=config.bot_token) as rest:
        await sync_func(
            rest,
            application_id=config.application_id,
            commands=commands,
            scope=config.command_scope,
            guild_ids=config.guild_ids,
            logger=logger,
        )


@app.callback(invoke_without_command=True)
def _root(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show version and exit"),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


@app.command("serve")
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind host"),
    port: int = typer.Option(8080, "--port", help="Bind port"),
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help=".env file to load before reading config"
    ),
) -> None:
    """Serve the Discord interactions endpoint."""
    import uvicorn

    from .web.app import create_app

    config = _load_config(env_file)
    logger = setup_rotating_logger(LOGGER_NAME, config.log_path)
    try:
        web_app = create_app(config, logger=logger)
    except ConfigError as exc:
        _raise_exit(str(exc), cause=exc)
    uvicorn.run(web_app, host=host, port=port, log_level="info")


@app.command("register-commands")
def register_commands(
    env_file: Optional[Path] = typer.Option(
        None, "--env-file", help=".env file to load before reading config"
    ),
) -> None:
    """Overwrite the bot's slash commands with /getstate and /findmod."""
    config = _load_config(env_file)
    logger = setup_rotating_logger(LOGGER_NAME, config.log_path)
    try:
        asyncio.run(_sync_application_commands(config, logger=logger))
    except (DeliveryFailedError, ValueError) as exc:
        _raise_exit(str(exc), cause=exc)
    typer.echo("Discord application commands synchronized.")


def main() -> None:
    app()


if __name__ == "__main__":  # pragma: no cover
    main()
