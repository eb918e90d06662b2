"""Room aggregate: players, settings and the state of the current round."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from housie.logic.enums import RoundPhase
from housie.logic.ledger import PrizeLedger
from housie.logic.pool import NumberPool

if TYPE_CHECKING:
    from datetime import datetime

    from housie.logic.settings import GameSettings
    from housie.logic.tickets import Ticket


@dataclass(frozen=True)
class PlayerIdentity:
    player_id: str
    name: str


@dataclass
class RoomPlayer:
    """Represent a player seated in a room.

    Tickets stay empty until the player buys them in the lobby; once issued
    they are index-addressed and stable for the round.
    """

    player_id: str
    name: str
    is_host: bool = False
    tickets: list[Ticket] = field(default_factory=list)

    @property
    def has_tickets(self) -> bool:
        return bool(self.tickets)


@dataclass
class Room:
    """One isolated game room, the single mutable unit of state.

    The round state machine is LOBBY -> STARTED -> OVER, derived from the
    is_game_started / is_game_over flags. A restart re-enters STARTED.
    """

    room_id: str
    host: PlayerIdentity
    settings: GameSettings
    created_at: datetime
    players: list[RoomPlayer] = field(default_factory=list)
    number_pool: NumberPool = field(default_factory=NumberPool)
    called_numbers: list[int] = field(default_factory=list)
    current_number: int | None = None
    prize_ledger: PrizeLedger = field(init=False)
    is_game_started: bool = False
    is_game_over: bool = False
    last_number_called_at: datetime | None = None
    seed: str | None = None
    round_number: int = 0

    def __post_init__(self) -> None:
        self.prize_ledger = PrizeLedger(self.settings.prizes)

    @property
    def phase(self) -> RoundPhase:
        if not self.is_game_started:
            return RoundPhase.LOBBY
        return RoundPhase.OVER if self.is_game_over else RoundPhase.STARTED

    @property
    def player_count(self) -> int:
        return len(self.players)

    @property
    def is_full(self) -> bool:
        return self.player_count >= self.settings.lobby_size

    @property
    def eligible_players(self) -> list[RoomPlayer]:
        """Players holding at least one ticket."""
        return [p for p in self.players if p.has_tickets]

    @property
    def host_player(self) -> RoomPlayer | None:
        return self.get_player(self.host.player_id)

    def get_player(self, player_id: str) -> RoomPlayer | None:
        return next((p for p in self.players if p.player_id == player_id), None)
