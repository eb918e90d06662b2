"""Process-wide keyed store of rooms with lazy expiry of abandoned lobbies."""

from __future__ import annotations

import logging
import secrets
import string
from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING, Any

from housie.logic.settings import ROOM_INACTIVITY_SECONDS, build_settings
from housie.session.room import PlayerIdentity, Room, RoomPlayer

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Mapping

    from housie.logic.settings import GameSettings

logger = logging.getLogger(__name__)

ROOM_ID_LENGTH = 6
_ROOM_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_room_id() -> str:
    return "".join(secrets.choice(_ROOM_ID_ALPHABET) for _ in range(ROOM_ID_LENGTH))


def utc_now() -> datetime:
    return datetime.now(tz=UTC)


class RoomRegistry:
    """Own every room of the process, keyed by room id.

    Callers fetch a Room and mutate it in place; the registry keeps no
    derived state. Rooms that never started are deleted on the first lookup
    after the inactivity window; there is no background sweep.
    """

    def __init__(
        self,
        *,
        inactivity_seconds: float = ROOM_INACTIVITY_SECONDS,
        clock: Callable[[], datetime] = utc_now,
        id_factory: Callable[[], str] = generate_room_id,
        on_expire: Callable[[str], None] | None = None,
    ) -> None:
        self._rooms: dict[str, Room] = {}
        self._inactivity = timedelta(seconds=inactivity_seconds)
        self._clock = clock
        self._id_factory = id_factory
        self._on_expire = on_expire

    @property
    def room_count(self) -> int:
        return len(self._rooms)

    def __contains__(self, room_id: object) -> bool:
        return room_id in self._rooms

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._rooms))

    def now(self) -> datetime:
        return self._clock()

    def create(
        self,
        host: PlayerIdentity,
        settings_override: Mapping[str, Any] | GameSettings | None = None,
    ) -> Room:
        """Create a room with the host seated first and holding no tickets.

        Raises InvalidSettingsError if the override is rejected.
        """
        settings = build_settings(settings_override)
        room_id = self._id_factory()
        while room_id in self._rooms:
            logger.warning("room id collision detected, regenerating: %s", room_id)
            room_id = self._id_factory()

        room = Room(
            room_id=room_id,
            host=host,
            settings=settings,
            created_at=self._clock(),
            players=[RoomPlayer(player_id=host.player_id, name=host.name, is_host=True)],
        )
        self._rooms[room_id] = room
        logger.info(
            "room %s created by host %s, lobby_size=%d prize_format=%s",
            room_id,
            host.player_id,
            settings.lobby_size,
            settings.prize_format.value,
        )
        return room

    def get(self, room_id: str) -> Room | None:
        room = self._rooms.get(room_id)
        if room is None:
            return None
        if not room.is_game_started and self._clock() - room.created_at > self._inactivity:
            self.delete(room_id)
            logger.info("room %s expired before start and was deleted", room_id)
            if self._on_expire is not None:
                self._on_expire(room_id)
            return None
        return room

    def delete(self, room_id: str) -> bool:
        return self._rooms.pop(room_id, None) is not None
