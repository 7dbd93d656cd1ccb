from __future__ import annotations

import json

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, Response
from starlette.background import BackgroundTask

from .signature import SIGNATURE_HEADER, TIMESTAMP_HEADER


def _error(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse({"error": detail}, status_code=status_code)


def build_interaction_routes() -> APIRouter:
    router = APIRouter()

    @router.post("/interactions")
    async def receive_interaction(request: Request) -> Response:
        signature = request.headers.get(SIGNATURE_HEADER)
        timestamp = request.headers.get(TIMESTAMP_HEADER)
        if not signature or not timestamp:
            return _error(401, "missing request signature")

        body = await request.body()
        if not request.app.state.verifier.verify(signature, timestamp, body):
            return _error(401, "invalid request signature")

        try:
            payload = json.loads(body)
        except ValueError:
            return _error(400, "invalid JSON body")
        if not isinstance(payload, dict):
            return _error(400, "invalid JSON body")

        dispatcher = request.app.state.dispatcher
        ack = dispatcher.acknowledge(payload)
        if ack is None:
            # Ignored interactions get no ack and no followup.
            return _error(400, "unknown command")

        # Starlette runs the background task after the ack has been sent.
        background = (
            BackgroundTask(dispatcher.complete, ack.session)
            if ack.session is not None
            else None
        )
        return JSONResponse(ack.body, background=background)

    return router


def build_health_routes() -> APIRouter:
    router = APIRouter()

    @router.get("/health")
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return router
