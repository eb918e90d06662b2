"""Transport-neutral view of one client connection."""

from abc import ABC, abstractmethod
from typing import Any

from housie.messaging.encoder import decode, encode


class ConnectionProtocol(ABC):
    """
    A client connection bound to the room named in its URL.

    Router and broadcast code only talk to this interface, so tests can drive
    them with in-memory connections.
    """

    @property
    @abstractmethod
    def connection_id(self) -> str: ...

    @property
    @abstractmethod
    def room_id(self) -> str:
        """Room ID from the WebSocket URL path (/ws/{room_id})."""
        ...

    @abstractmethod
    async def send_bytes(self, data: bytes) -> None: ...

    @abstractmethod
    async def receive_bytes(self) -> bytes: ...

    @abstractmethod
    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    async def send_message(self, data: dict[str, Any]) -> None:
        await self.send_bytes(encode(data))

    async def receive_message(self) -> dict[str, Any]:
        """Receive one frame. Raises DecodeError for malformed payloads."""
        return decode(await self.receive_bytes())
