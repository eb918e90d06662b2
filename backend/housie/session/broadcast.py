"""Room event fan-out to subscribed client connections."""

from __future__ import annotations

import contextlib
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from housie.logic.enums import RoomEventKind
    from housie.messaging.protocol import ConnectionProtocol


class RoomNotifier(ABC):
    """
    Abstract "broadcast to room" collaborator.

    publish() is fire-and-forget: delivery failures never reach the caller.
    """

    @abstractmethod
    async def publish(self, room_id: str, kind: RoomEventKind, payload: dict[str, Any]) -> None: ...


def build_event(kind: RoomEventKind, payload: dict[str, Any]) -> dict[str, Any]:
    return {"type": kind.value, **payload}


async def broadcast_to_connections(
    connections: dict[str, ConnectionProtocol],
    message: dict[str, Any],
) -> None:
    """Send a message to every connection, skipping ones that fail.

    Snapshot the dict values via list() so an unsubscribe during a send
    does not break iteration.
    """
    for connection in list(connections.values()):
        with contextlib.suppress(RuntimeError, OSError, ConnectionError):
            await connection.send_message(message)


class ConnectionHub(RoomNotifier):
    """Track which connections follow which room and publish to them."""

    def __init__(self) -> None:
        self._subscribers: dict[str, dict[str, ConnectionProtocol]] = {}

    def subscribe(self, room_id: str, connection: ConnectionProtocol) -> None:
        self._subscribers.setdefault(room_id, {})[connection.connection_id] = connection

    def unsubscribe(self, room_id: str, connection_id: str) -> None:
        subscribers = self._subscribers.get(room_id)
        if subscribers is None:
            return
        subscribers.pop(connection_id, None)
        if not subscribers:
            del self._subscribers[room_id]

    def unsubscribe_all(self, connection_id: str) -> None:
        for room_id in list(self._subscribers):
            self.unsubscribe(room_id, connection_id)

    def subscriber_count(self, room_id: str) -> int:
        return len(self._subscribers.get(room_id, {}))

    async def publish(self, room_id: str, kind: RoomEventKind, payload: dict[str, Any]) -> None:
        subscribers = self._subscribers.get(room_id)
        if subscribers:
            await broadcast_to_connections(subscribers, build_event(kind, payload))
