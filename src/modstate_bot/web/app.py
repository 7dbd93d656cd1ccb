from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .. import __version__
from ..core.config import BotConfig
from ..integrations.discord.dispatcher import CommandDispatcher
from ..integrations.discord.handlers import build_command_handlers
from ..integrations.discord.responder import InteractionResponder
from ..integrations.discord.rest import DiscordRestClient
from ..integrations.modio.client import ModioClient
from .routes import build_health_routes, build_interaction_routes
from .signature import SignatureVerifier


def create_app(
    config: BotConfig,
    *,
    logger: Optional[logging.Logger] = None,
    dispatcher: Optional[CommandDispatcher] = None,
    verifier: Optional[SignatureVerifier] = None,
) -> FastAPI:
    """
    Build the interactions app.

    When ``dispatcher`` is omitted the app owns its mod.io and Discord clients
    and opens/closes them with the application lifespan.
    """
    app_logger = logger or logging.getLogger("modstate_bot")

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        if getattr(app.state, "dispatcher", None) is not None:
            yield
            return
        async with ModioClient(
            api_key=config.modio_api_key,
            game_id=config.modio_game_id,
            timeout_seconds=config.upstream_timeout_seconds,
        ) as modio, DiscordRestClient(bot_token=config.bot_token) as rest:
            app.state.dispatcher = CommandDispatcher(
                responder=InteractionResponder(
                    rest, application_id=config.application_id
                ),
                handlers=build_command_handlers(
                    modio, timeout_seconds=config.upstream_timeout_seconds
                ),
                logger=app_logger,
            )
            try:
                yield
            finally:
                app.state.dispatcher = None

    app = FastAPI(title="modstate-bot", version=__version__, lifespan=lifespan)
    app.state.config = config
    app.state.verifier = verifier or SignatureVerifier(config.public_key)
    app.state.dispatcher = dispatcher
    app.include_router(build_health_routes())
    app.include_router(build_interaction_routes())
    return app
