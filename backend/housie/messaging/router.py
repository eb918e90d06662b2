from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from housie.logic.enums import HousieErrorCode, RoomEventKind
from housie.messaging.types import (
    ClaimPrizeMessage,
    ErrorMessage,
    JoinRoomMessage,
    MessageErrorCode,
    PingMessage,
    PongMessage,
    RequestRoomStateMessage,
    StartGameMessage,
    parse_client_message,
)
from housie.session.broadcast import build_event
from housie.session.results import Failure
from housie.session.room import PlayerIdentity

if TYPE_CHECKING:
    from housie.logic.enums import PrizeType
    from housie.messaging.protocol import ConnectionProtocol
    from housie.session.broadcast import ConnectionHub
    from housie.session.service import HousieService

logger = logging.getLogger(__name__)


class MessageRouter:
    """
    Routes decoded client messages to the room service.

    Rejections go back to the requesting connection only; state changes reach
    every subscriber of the room through the hub.
    """

    def __init__(self, service: HousieService, hub: ConnectionHub) -> None:
        self._service = service
        self._hub = hub

    async def handle_message(self, connection: ConnectionProtocol, raw_message: dict[str, Any]) -> None:
        try:
            message = parse_client_message(raw_message)
        except (ValidationError, KeyError, TypeError, ValueError) as e:
            logger.warning("invalid message from %s: %s", connection.connection_id, e)
            await self._send_error(connection, MessageErrorCode.INVALID_MESSAGE, str(e))
            return

        try:
            if isinstance(message, JoinRoomMessage):
                await self._handle_join_room(connection, message)
            elif isinstance(message, StartGameMessage):
                await self._handle_start_game(connection, message)
            elif isinstance(message, ClaimPrizeMessage):
                await self._handle_claim_prize(connection, message)
            elif isinstance(message, RequestRoomStateMessage):
                await self._handle_request_room_state(connection, message)
            elif isinstance(message, PingMessage):
                await connection.send_message(PongMessage().model_dump(mode="json"))
        except Exception:
            logger.exception("unexpected error handling %s from %s", message.type, connection.connection_id)
            await self._send_error(connection, MessageErrorCode.INTERNAL_ERROR, "Internal server error.")

    async def _handle_join_room(self, connection: ConnectionProtocol, message: JoinRoomMessage) -> None:
        # Subscribe before joining so the sender receives its own state update.
        if self._service.get_room(message.room_id) is not None:
            self._hub.subscribe(message.room_id, connection)
        result = await self._service.join_room(
            message.room_id,
            PlayerIdentity(player_id=message.player_id, name=message.player_name),
            message.tickets,
        )
        if isinstance(result, Failure):
            await self._send_failure(connection, result)

    async def _handle_start_game(self, connection: ConnectionProtocol, message: StartGameMessage) -> None:
        result = await self._service.start_game(message.room_id, message.player_id)
        if isinstance(result, Failure):
            await self._send_failure(connection, result)

    async def _handle_claim_prize(self, connection: ConnectionProtocol, message: ClaimPrizeMessage) -> None:
        result = await self._service.claim_prize(
            message.room_id,
            message.player_id,
            message.prize,
            message.ticket_index,
        )
        if isinstance(result, Failure):
            await self._send_failure(connection, result, prize=message.prize)

    async def _handle_request_room_state(
        self,
        connection: ConnectionProtocol,
        message: RequestRoomStateMessage,
    ) -> None:
        """Subscribe to the room and send its current snapshot to the requester only."""
        result = self._service.get_client_snapshot(message.room_id)
        if isinstance(result, Failure):
            await self._send_failure(connection, result)
            return
        self._hub.subscribe(message.room_id, connection)
        await connection.send_message(
            build_event(RoomEventKind.ROOM_STATE_UPDATED, result.value.model_dump(mode="json")),
        )

    async def _send_failure(
        self,
        connection: ConnectionProtocol,
        failure: Failure,
        *,
        prize: PrizeType | None = None,
    ) -> None:
        await self._send_error(connection, failure.code, failure.message, prize=prize)

    async def _send_error(
        self,
        connection: ConnectionProtocol,
        code: HousieErrorCode | MessageErrorCode,
        message: str,
        *,
        prize: PrizeType | None = None,
    ) -> None:
        await connection.send_message(ErrorMessage(code=code, message=message, prize=prize).model_dump(mode="json"))

    async def handle_connect(self, connection: ConnectionProtocol) -> None:
        logger.info("connection %s opened for room %s", connection.connection_id, connection.room_id)

    async def handle_disconnect(self, connection: ConnectionProtocol) -> None:
        """Drop the connection's subscriptions. Seats and tickets stay in the room."""
        self._hub.unsubscribe_all(connection.connection_id)
        logger.info("connection %s closed", connection.connection_id)
