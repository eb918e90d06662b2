from __future__ import annotations

import contextlib
import re
from typing import TYPE_CHECKING
from uuid import uuid4

import structlog
from starlette.websockets import WebSocket, WebSocketDisconnect

from housie.messaging.encoder import DecodeError
from housie.messaging.protocol import ConnectionProtocol
from housie.messaging.types import ErrorMessage, MessageErrorCode
from housie.server.rate_limit import TokenBucket

logger = structlog.get_logger()

if TYPE_CHECKING:
    from housie.messaging.router import MessageRouter

_ROOM_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,50}$")

# Players send a handful of claims per minute; 10/sec with a burst of 20
# leaves room for button mashing without letting a client flood the loop.
_RATE_LIMIT_RATE = 10.0
_RATE_LIMIT_BURST = 20

# Consecutive undecodable frames tolerated before closing with 4004
_MAX_DECODE_ERRORS = 5


class WebSocketConnection(ConnectionProtocol):
    def __init__(self, websocket: WebSocket, room_id: str, connection_id: str | None = None) -> None:
        self._websocket = websocket
        self._room_id = room_id
        self._connection_id = connection_id or str(uuid4())

    @property
    def connection_id(self) -> str:
        return self._connection_id

    @property
    def room_id(self) -> str:
        return self._room_id

    async def send_bytes(self, data: bytes) -> None:
        try:
            await self._websocket.send_bytes(data)
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def receive_bytes(self) -> bytes:
        try:
            return await self._websocket.receive_bytes()
        except WebSocketDisconnect:
            raise ConnectionError("WebSocket already disconnected") from None

    async def close(self, code: int = 1000, reason: str = "") -> None:
        with contextlib.suppress(WebSocketDisconnect, RuntimeError):
            await self._websocket.close(code=code, reason=reason)


class InboundGuard:
    """Per-connection admission for inbound frames.

    Tracks consecutive undecodable frames and the message rate. A good frame
    resets the strike count; only decoded frames spend rate-limit tokens.
    """

    def __init__(
        self,
        *,
        max_decode_errors: int = _MAX_DECODE_ERRORS,
        rate: float = _RATE_LIMIT_RATE,
        burst: int = _RATE_LIMIT_BURST,
    ) -> None:
        self._max_decode_errors = max_decode_errors
        self._bucket = TokenBucket(rate=rate, burst=burst)
        self.decode_errors = 0

    def record_decode_error(self) -> bool:
        """Count a bad frame. True once the connection should be dropped."""
        self.decode_errors += 1
        return self.decode_errors >= self._max_decode_errors

    def admit(self) -> bool:
        self.decode_errors = 0
        return self._bucket.consume()


async def _reply_error(connection: ConnectionProtocol, code: MessageErrorCode, message: str) -> None:
    await connection.send_message(ErrorMessage(code=code, message=message).model_dump(mode="json"))


async def _serve(connection: WebSocketConnection, router: MessageRouter) -> None:
    guard = InboundGuard()
    while True:
        try:
            data = await connection.receive_message()
        except DecodeError as e:
            drop = guard.record_decode_error()
            logger.warning("undecodable frame", error=str(e), strikes=guard.decode_errors)
            await _reply_error(connection, MessageErrorCode.INVALID_MESSAGE, str(e))
            if drop:
                logger.info("closing connection after repeated undecodable frames")
                await connection.close(code=4004, reason="too_many_decode_errors")
                return
            continue

        if not guard.admit():
            await _reply_error(connection, MessageErrorCode.RATE_LIMITED, "Too many messages")
            continue
        await router.handle_message(connection, data)


async def websocket_endpoint(websocket: WebSocket, router: MessageRouter) -> None:
    room_id = websocket.path_params["room_id"]
    if _ROOM_ID_PATTERN.fullmatch(room_id) is None:
        await websocket.close(code=4000, reason="invalid_room_id")
        return

    await websocket.accept()
    connection = WebSocketConnection(websocket, room_id=room_id)
    structlog.contextvars.bind_contextvars(room_id=room_id, connection_id=connection.connection_id)
    logger.info("websocket connected")
    await router.handle_connect(connection)

    try:
        await _serve(connection, router)
    except (WebSocketDisconnect, RuntimeError, ConnectionError):  # fmt: skip
        pass
    finally:
        logger.info("websocket disconnected")
        await router.handle_disconnect(connection)
        structlog.contextvars.clear_contextvars()
