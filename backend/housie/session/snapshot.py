"""Client-safe projection of a room.

The projection never carries the number pool or the room seed: either one
lets a client predict the remaining draws.
"""

from __future__ import annotations

from datetime import UTC
from typing import TYPE_CHECKING

import structlog
from pydantic import BaseModel, ConfigDict

from housie.logic.enums import PrizeFormat  # noqa: TC001

if TYPE_CHECKING:
    from datetime import datetime

    from housie.logic.ledger import ClaimRecord
    from housie.session.registry import RoomRegistry
    from housie.session.room import Room

logger = structlog.get_logger()


def format_timestamp(value: datetime) -> str:
    """Render a timestamp as ISO-8601 UTC with millisecond precision and a Z suffix."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HostView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class PlayerView(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    is_host: bool
    tickets: list[list[list[int | None]]]


class SettingsView(BaseModel):
    model_config = ConfigDict(frozen=True)

    lobby_size: int
    tickets_per_player: int
    prize_format: PrizeFormat


class PrizeClaimView(BaseModel):
    model_config = ConfigDict(frozen=True)

    claimed_by: list[str]
    timestamp: str | None


class RoomSnapshot(BaseModel):
    """Everything a client may see about a room."""

    model_config = ConfigDict(frozen=True)

    id: str
    host: HostView
    players: list[PlayerView]
    settings: SettingsView
    created_at: str
    is_game_started: bool
    is_game_over: bool
    current_number: int | None
    called_numbers: list[int]
    prize_status: dict[str, PrizeClaimView | None]
    last_number_called_at: str | None


def _claim_view(record: ClaimRecord | None) -> PrizeClaimView | None:
    if record is None:
        return None
    return PrizeClaimView(claimed_by=list(record.claimed_by), timestamp=format_timestamp(record.first_claimed_at))


def project_room(room: Room) -> RoomSnapshot:
    """Build the client view. Prize status covers exactly the room's prize format."""
    prize_status = {prize.value: _claim_view(room.prize_ledger.get(prize)) for prize in room.settings.prizes}
    return RoomSnapshot(
        id=room.room_id,
        host=HostView(id=room.host.player_id, name=room.host.name),
        players=[
            PlayerView(
                id=p.player_id,
                name=p.name,
                is_host=p.is_host,
                tickets=[[list(row) for row in ticket] for ticket in p.tickets],
            )
            for p in room.players
        ],
        settings=SettingsView(
            lobby_size=room.settings.lobby_size,
            tickets_per_player=room.settings.tickets_per_player,
            prize_format=room.settings.prize_format,
        ),
        created_at=format_timestamp(room.created_at),
        is_game_started=room.is_game_started,
        is_game_over=room.is_game_over,
        current_number=room.current_number,
        called_numbers=list(room.called_numbers),
        prize_status=prize_status,
        last_number_called_at=(
            format_timestamp(room.last_number_called_at) if room.last_number_called_at is not None else None
        ),
    )


def get_client_snapshot(registry: RoomRegistry, room_id: str) -> RoomSnapshot | None:
    """Project a room for clients. Returns None instead of raising."""
    room = registry.get(room_id)
    if room is None:
        return None
    try:
        return project_room(room)
    except Exception:
        logger.exception("failed to project room snapshot", room_id=room_id)
        return None
