from __future__ import annotations

import contextlib
import json
from typing import TYPE_CHECKING

import structlog
from pydantic import ValidationError
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import JSONResponse
from starlette.routing import Route, WebSocketRoute

from housie.messaging.router import MessageRouter
from housie.server.settings import HousieServerSettings
from housie.server.types import CreateRoomRequest
from housie.server.websocket import websocket_endpoint
from housie.session.broadcast import ConnectionHub
from housie.session.results import Failure
from housie.session.room import PlayerIdentity
from housie.session.service import HousieService
from shared.logging import setup_logging

logger = structlog.get_logger()

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from starlette.requests import Request
    from starlette.websockets import WebSocket


async def health(_request: Request) -> JSONResponse:
    return JSONResponse({"status": "ok"})


async def status(request: Request) -> JSONResponse:
    service: HousieService = request.app.state.service
    settings: HousieServerSettings = request.app.state.settings
    return JSONResponse(
        {
            "status": "ok",
            "rooms": service.room_count,
            "active_callers": service.scheduler.active_count,
            "max_rooms": settings.max_rooms,
        },
    )


_MAX_REQUEST_BODY_SIZE = 4096


async def create_room(request: Request) -> JSONResponse:
    service: HousieService = request.app.state.service
    settings: HousieServerSettings = request.app.state.settings

    try:
        raw_body = await request.body()
        if len(raw_body) > _MAX_REQUEST_BODY_SIZE:
            return JSONResponse({"error": "Request body too large"}, status_code=413)
        room_request = CreateRoomRequest(**json.loads(raw_body))
    except (ValueError, TypeError, json.JSONDecodeError, UnicodeDecodeError, ValidationError):  # fmt: skip
        return JSONResponse({"error": "Invalid request body"}, status_code=400)

    if service.room_count >= settings.max_rooms:
        return JSONResponse({"error": "Server at capacity"}, status_code=503)

    result = service.create_room(
        PlayerIdentity(player_id=room_request.host_id, name=room_request.host_name),
        room_request.settings,
    )
    if isinstance(result, Failure):
        return JSONResponse({"error": result.message, "code": result.code.value}, status_code=400)

    snapshot = service.get_client_snapshot(result.value.room_id)
    if isinstance(snapshot, Failure):  # pragma: no cover
        return JSONResponse({"error": snapshot.message, "code": snapshot.code.value}, status_code=500)
    return JSONResponse(snapshot.value.model_dump(mode="json"), status_code=201)


async def get_room(request: Request) -> JSONResponse:
    service: HousieService = request.app.state.service
    result = service.get_client_snapshot(request.path_params["room_id"])
    if isinstance(result, Failure):
        return JSONResponse({"error": result.message, "code": result.code.value}, status_code=404)
    return JSONResponse(result.value.model_dump(mode="json"))


def create_app(
    settings: HousieServerSettings | None = None,
    service: HousieService | None = None,
    hub: ConnectionHub | None = None,
    message_router: MessageRouter | None = None,
) -> Starlette:
    if settings is None:  # pragma: no cover
        settings = HousieServerSettings()

    if hub is None:
        hub = ConnectionHub()

    if service is None:
        service = HousieService(
            hub,
            call_interval_seconds=settings.call_interval_seconds,
            room_inactivity_seconds=settings.room_inactivity_seconds,
            min_players=settings.min_players,
        )

    if message_router is None:
        message_router = MessageRouter(service, hub)

    async def ws_endpoint(websocket: WebSocket) -> None:
        await websocket_endpoint(websocket, message_router)

    routes = [
        Route("/health", health, methods=["GET"]),
        Route("/status", status, methods=["GET"]),
        Route("/rooms", create_room, methods=["POST"]),
        Route("/rooms/{room_id}", get_room, methods=["GET"]),
        WebSocketRoute("/ws/{room_id}", ws_endpoint),
    ]

    @contextlib.asynccontextmanager
    async def lifespan(_app: Starlette) -> AsyncIterator[None]:
        yield
        await service.shutdown()

    app = Starlette(routes=routes, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )
    app.state.settings = settings
    app.state.service = service
    app.state.hub = hub

    logger.info("housie server ready", environment=settings.environment)
    return app


def get_app() -> Starlette:  # pragma: no cover
    """ASGI application factory for production use (uvicorn --factory)."""
    settings = HousieServerSettings()
    setup_logging(log_dir=settings.log_dir)
    return create_app(settings=settings)
