from __future__ import annotations

import logging
from typing import Any, Optional
from urllib.parse import quote

import httpx

from ...core.logging_utils import log_event
from .constants import MODIO_API_BASE_URL, MODIO_DEFAULT_TIMEOUT_SECONDS
from .errors import (
    MalformedUpstreamRecordError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from .models import ModioMod, ModioModSummary, decode_mod, decode_search_results

logger = logging.getLogger(__name__)


class ModioClient:
    """Read-only mod.io client scoped to a single game.

    Every call is a single attempt. Failures surface immediately as
    ``UpstreamUnavailableError`` or ``UpstreamNotFoundError``.
    """

    def __init__(
        self,
        *,
        api_key: str,
        game_id: str,
        base_url: str = MODIO_API_BASE_URL,
        timeout_seconds: float = MODIO_DEFAULT_TIMEOUT_SECONDS,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._api_key = api_key
        self._game_id = game_id
        self._client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout_seconds,
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "ModioClient":
        return self

    async def __aexit__(self, *_exc_info: object) -> None:
        await self.close()

    async def _get(self, path: str, params: dict[str, str]) -> httpx.Response:
        query = {"api_key": self._api_key, **params}
        try:
            return await self._client.get(path, params=query)
        except httpx.HTTPError as exc:
            log_event(
                logger,
                logging.WARNING,
                "modio.request.failed",
                path=path,
                exc=exc,
            )
            raise UpstreamUnavailableError(
                f"mod.io network error for GET {path}: {type(exc).__name__}"
            ) from exc

    def _decode_json(self, response: httpx.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedUpstreamRecordError(
                "$", detail=f"non-JSON response for GET {path}"
            ) from exc

    def _raise_for_status(self, response: httpx.Response, path: str) -> None:
        if 200 <= response.status_code < 300:
            return
        log_event(
            logger,
            logging.WARNING,
            "modio.request.failed",
            path=path,
            status_code=response.status_code,
        )
        raise UpstreamUnavailableError(
            f"mod.io request failed for GET {path}",
            status_code=response.status_code,
            body=response.text,
        )

    async def search_mods(self, query: str) -> list[ModioModSummary]:
        path = f"/games/{self._game_id}/mods"
        response = await self._get(path, {"_q": query})
        self._raise_for_status(response, path)
        return decode_search_results(self._decode_json(response, path))

    async def get_mod(self, mod_id: str) -> ModioMod:
        path = f"/games/{self._game_id}/mods/{quote(mod_id, safe='')}"
        response = await self._get(path, {})
        if response.status_code == 404:
            log_event(
                logger,
                logging.INFO,
                "modio.mod.not_found",
                mod_id=mod_id,
            )
            raise UpstreamNotFoundError(
                mod_id, status_code=response.status_code, body=response.text
            )
        self._raise_for_status(response, path)
        return decode_mod(self._decode_json(response, path))
