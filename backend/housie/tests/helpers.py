"""Shared builders for room tests."""

from datetime import UTC, datetime, timedelta

from housie.logic.pool import NumberPool
from housie.logic.settings import NUMBERS_RANGE_MAX, NUMBERS_RANGE_MIN
from housie.messaging.encoder import decode, encode
from housie.session.room import PlayerIdentity

# Valid ticket: rows hold 5 numbers each, every column is used.
FIXED_TICKET = (
    (4, None, 23, None, 45, None, 67, 78, None),
    (None, 12, None, 34, 46, 58, None, None, 81),
    (7, None, 28, 39, None, 59, None, 79, None),
)
TOP_LINE = [4, 23, 45, 67, 78]
MIDDLE_LINE = [12, 34, 46, 58, 81]
BOTTOM_LINE = [7, 28, 39, 59, 79]
FOUR_CORNERS = [4, 78, 7, 79]
ALL_NUMBERS = TOP_LINE + MIDDLE_LINE + BOTTOM_LINE

HOST = PlayerIdentity(player_id="host-1", name="Hostess")
ALICE = PlayerIdentity(player_id="alice-1", name="Alice")
BOB = PlayerIdentity(player_id="bob-1", name="Bob")

START_TIME = datetime(2025, 6, 1, 12, 0, 0, tzinfo=UTC)


def fixed_ticket_factory():
    return FIXED_TICKET


def rig_pool(room, first_numbers):
    """Replace the room's pool so the given numbers are drawn first, in order."""
    rest = [n for n in range(NUMBERS_RANGE_MIN, NUMBERS_RANGE_MAX + 1) if n not in first_numbers]
    room.number_pool = NumberPool(rest + list(reversed(first_numbers)))


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime = START_TIME) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


def send_ws(ws, data: dict) -> None:
    """Send a MessagePack-encoded message over a test WebSocket."""
    ws.send_bytes(encode(data))


def recv_ws(ws) -> dict:
    """Receive and decode a MessagePack message from a test WebSocket."""
    return decode(ws.receive_bytes())


def recv_until(ws, message_type: str, limit: int = 500) -> dict:
    """Drain messages until one of the given type arrives."""
    for _ in range(limit):
        message = recv_ws(ws)
        if message.get("type") == message_type:
            return message
    raise AssertionError(f"no {message_type} message within {limit} messages")


def join_message(room_id: str, player: PlayerIdentity, tickets: int | None = None) -> dict:
    message = {"type": "join_room", "room_id": room_id, "player_id": player.player_id, "player_name": player.name}
    if tickets is not None:
        message["tickets"] = tickets
    return message
