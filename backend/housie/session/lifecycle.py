"""Room lifecycle: creation, joining with tickets, round start and number draws."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from housie.logic.enums import PrizeType
from housie.logic.exceptions import (
    AlreadyStartedError,
    GameAlreadyStartedError,
    GameNotStartedError,
    GameOverError,
    HostHasNoTicketsError,
    NotEnoughPlayersError,
    NotHostError,
    PoolExhaustedError,
    RoomFullError,
    RoomNotFoundError,
)
from housie.logic.ledger import PrizeLedger
from housie.logic.pool import NumberPool
from housie.logic.rng import generate_seed
from housie.logic.settings import MIN_LOBBY_SIZE
from housie.logic.tickets import generate_ticket
from housie.session.room import RoomPlayer

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

    from housie.logic.settings import GameSettings
    from housie.logic.tickets import Ticket
    from housie.session.call_scheduler import NumberCallScheduler
    from housie.session.registry import RoomRegistry
    from housie.session.room import PlayerIdentity, Room

logger = logging.getLogger(__name__)


class GameLifecycle:
    """Drive rooms through LOBBY -> STARTED -> OVER.

    Every method is synchronous and mutates one room in place, so under the
    asyncio event loop a join, a start, a claim and a scheduled draw never
    interleave inside a room. Rule violations raise HousieError subclasses.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        scheduler: NumberCallScheduler,
        *,
        ticket_factory: Callable[[], Ticket] = generate_ticket,
        min_players: int = MIN_LOBBY_SIZE,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._ticket_factory = ticket_factory
        self._min_players = min_players

    @property
    def min_players(self) -> int:
        return self._min_players

    def create_room(
        self,
        host: PlayerIdentity,
        settings_override: Mapping[str, Any] | GameSettings | None = None,
    ) -> Room:
        return self._registry.create(host, settings_override)

    def _require_room(self, room_id: str) -> Room:
        room = self._registry.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        return room

    def _issue_tickets(self, count: int) -> list[Ticket]:
        return [self._ticket_factory() for _ in range(count)]

    def join(self, room_id: str, player: PlayerIdentity, ticket_count: int | None = None) -> Room:
        """Seat a player and issue their tickets.

        Joining again after tickets were issued is a no-op.
        """
        room = self._require_room(room_id)
        requested = room.settings.tickets_per_player if ticket_count is None else ticket_count
        count = max(1, requested)

        existing = room.get_player(player.player_id)
        if existing is not None:
            if existing.has_tickets:
                logger.info("player %s already has tickets in room %s", player.player_id, room_id)
                return room
            if room.is_game_started:
                raise GameAlreadyStartedError("Game has already started. Cannot add tickets now.")
            existing.tickets = self._issue_tickets(count)
            logger.info("player %s bought %d tickets in room %s", player.player_id, count, room_id)
            return room

        if room.is_game_started:
            raise GameAlreadyStartedError("Game has already started. New players cannot join.")
        if room.is_full:
            raise RoomFullError("Room is full.")

        room.players.append(
            RoomPlayer(
                player_id=player.player_id,
                name=player.name,
                is_host=player.player_id == room.host.player_id,
                tickets=self._issue_tickets(count),
            ),
        )
        logger.info("player %s joined room %s with %d tickets", player.player_id, room_id, count)
        return room

    def start(self, room_id: str, requester_id: str) -> Room:
        """Start (or restart) a round and begin calling numbers."""
        room = self._require_room(room_id)
        if requester_id != room.host.player_id:
            raise NotHostError("Only the host can start the game.")
        if room.is_game_started and not room.is_game_over:
            raise AlreadyStartedError("Game has already started.")

        host_player = room.host_player
        if host_player is None or not host_player.has_tickets:
            raise HostHasNoTicketsError("Host must have tickets before starting the game.")

        eligible = len(room.eligible_players)
        if eligible < self._min_players:
            raise NotEnoughPlayersError(
                f"Need at least {self._min_players} player(s) with tickets to start. Currently: {eligible}",
            )

        # The timer needs the running loop; start it before touching the room
        # so a failure leaves the previous round intact.
        self._scheduler.start(room_id)

        is_restart = room.is_game_started
        if is_restart:
            for player in room.eligible_players:
                player.tickets = self._issue_tickets(len(player.tickets))

        # One seed per room; each round derives its own draw order from it.
        if room.seed is None:
            room.seed = generate_seed()
        room.round_number += 1
        room.is_game_started = True
        room.is_game_over = False
        room.number_pool = NumberPool.initialize(room.seed, room.round_number)
        room.called_numbers = []
        room.current_number = None
        room.prize_ledger = PrizeLedger(room.settings.prizes)
        room.last_number_called_at = None

        logger.info(
            "round %d %s in room %s with %d eligible players",
            room.round_number,
            "restarted" if is_restart else "started",
            room_id,
            eligible,
        )
        return room

    def call_next_number(self, room_id: str) -> Room:
        """Draw exactly one number. Pool exhaustion ends the round."""
        room = self._require_room(room_id)
        if not room.is_game_started:
            raise GameNotStartedError("Game not started.")
        if room.is_game_over:
            self._scheduler.stop(room_id, reason="draw attempted after game over")
            raise GameOverError("Game is over.", number=room.current_number)

        try:
            number = room.number_pool.draw()
        except PoolExhaustedError:
            room.is_game_over = True
            room.last_number_called_at = self._registry.now()
            self._scheduler.stop(room_id, reason="all numbers have been called")
            if not room.prize_ledger.is_claimed(PrizeType.FULL_HOUSE):
                logger.info("all numbers called in room %s with no full house winner", room_id)
            return room

        room.current_number = number
        room.called_numbers.append(number)
        room.last_number_called_at = self._registry.now()
        return room
