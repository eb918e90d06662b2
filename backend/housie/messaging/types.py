from enum import StrEnum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, Field, TypeAdapter, field_validator

from housie.logic.enums import HousieErrorCode, PrizeType, RoomEventKind
from housie.logic.settings import MAX_TICKETS_PER_PLAYER

# ASCII control character boundaries for display-name validation
_SPACE_ORD = 0x20
_DEL_ORD = 0x7F

ROOM_ID_PATTERN = r"^[a-zA-Z0-9_-]+$"


class ClientMessageType(StrEnum):
    JOIN_ROOM = "join_room"
    START_GAME = "start_game"
    CLAIM_PRIZE = "claim_prize"
    REQUEST_ROOM_STATE = "request_room_state"
    PING = "ping"


class ServerMessageType(StrEnum):
    PONG = "pong"


class MessageErrorCode(StrEnum):
    INVALID_MESSAGE = "invalid_message"
    INTERNAL_ERROR = "internal_error"
    RATE_LIMITED = "rate_limited"


_ROOM_ID_FIELD = Field(min_length=1, max_length=50, pattern=ROOM_ID_PATTERN)
_PLAYER_ID_FIELD = Field(min_length=1, max_length=100)


class JoinRoomMessage(BaseModel):
    type: Literal[ClientMessageType.JOIN_ROOM] = ClientMessageType.JOIN_ROOM
    room_id: str = _ROOM_ID_FIELD
    player_id: str = _PLAYER_ID_FIELD
    player_name: str = Field(min_length=1, max_length=50)
    tickets: int | None = Field(default=None, ge=1, le=MAX_TICKETS_PER_PLAYER)

    @field_validator("player_name")
    @classmethod
    def _validate_name(cls, v: str) -> str:
        if any(ord(c) < _SPACE_ORD or ord(c) == _DEL_ORD for c in v):
            raise ValueError("player_name must not contain control characters")
        return v


class StartGameMessage(BaseModel):
    type: Literal[ClientMessageType.START_GAME] = ClientMessageType.START_GAME
    room_id: str = _ROOM_ID_FIELD
    player_id: str = _PLAYER_ID_FIELD


class ClaimPrizeMessage(BaseModel):
    type: Literal[ClientMessageType.CLAIM_PRIZE] = ClientMessageType.CLAIM_PRIZE
    room_id: str = _ROOM_ID_FIELD
    player_id: str = _PLAYER_ID_FIELD
    prize: PrizeType
    ticket_index: int = Field(ge=0, lt=MAX_TICKETS_PER_PLAYER)


class RequestRoomStateMessage(BaseModel):
    type: Literal[ClientMessageType.REQUEST_ROOM_STATE] = ClientMessageType.REQUEST_ROOM_STATE
    room_id: str = _ROOM_ID_FIELD


class PingMessage(BaseModel):
    type: Literal[ClientMessageType.PING] = ClientMessageType.PING


ClientMessage = Annotated[
    JoinRoomMessage | StartGameMessage | ClaimPrizeMessage | RequestRoomStateMessage | PingMessage,
    Field(discriminator="type"),
]


class ErrorMessage(BaseModel):
    """Sent only to the connection whose request was rejected."""

    type: Literal[RoomEventKind.ROOM_ERROR] = RoomEventKind.ROOM_ERROR
    code: HousieErrorCode | MessageErrorCode
    message: str
    prize: PrizeType | None = None


class PongMessage(BaseModel):
    type: Literal[ServerMessageType.PONG] = ServerMessageType.PONG


_client_adapter = TypeAdapter(ClientMessage)


def parse_client_message(
    data: dict[str, Any],
) -> JoinRoomMessage | StartGameMessage | ClaimPrizeMessage | RequestRoomStateMessage | PingMessage:
    """Parse a raw dict into a typed client message, discriminated on ``type``."""
    return _client_adapter.validate_python(data)
