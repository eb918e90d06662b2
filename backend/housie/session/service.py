"""Request surface of the room server.

HousieService wires the registry, scheduler, lifecycle controller and prize
adjudicator together, converts domain errors into Failure results and pushes
room events through the notifier.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from housie.logic.enums import HousieErrorCode, RoomEventKind
from housie.logic.exceptions import HousieError
from housie.logic.patterns import is_winning_claim
from housie.logic.settings import CALL_INTERVAL_SECONDS, MIN_LOBBY_SIZE, ROOM_INACTIVITY_SECONDS
from housie.logic.tickets import generate_ticket
from housie.session.adjudicator import PrizeAdjudicator
from housie.session.call_scheduler import NumberCallScheduler
from housie.session.lifecycle import GameLifecycle
from housie.session.registry import RoomRegistry, utc_now
from housie.session.results import Failure, Success
from housie.session.snapshot import get_client_snapshot

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping
    from datetime import datetime

    from housie.logic.enums import PrizeType
    from housie.logic.patterns import PatternValidator
    from housie.logic.settings import GameSettings
    from housie.logic.tickets import Ticket
    from housie.session.broadcast import RoomNotifier
    from housie.session.results import Result
    from housie.session.room import PlayerIdentity, Room
    from housie.session.snapshot import RoomSnapshot

logger = structlog.get_logger()


class HousieService:
    """Process-wide room service, constructed once and injected into callers."""

    def __init__(
        self,
        notifier: RoomNotifier,
        *,
        call_interval_seconds: float = CALL_INTERVAL_SECONDS,
        room_inactivity_seconds: float = ROOM_INACTIVITY_SECONDS,
        min_players: int = MIN_LOBBY_SIZE,
        ticket_factory: Callable[[], Ticket] = generate_ticket,
        validator: PatternValidator = is_winning_claim,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._notifier = notifier
        self._scheduler = NumberCallScheduler(self._on_tick, interval_seconds=call_interval_seconds)
        self._registry = RoomRegistry(
            inactivity_seconds=room_inactivity_seconds,
            clock=clock,
            on_expire=self._on_room_expired,
        )
        self._lifecycle = GameLifecycle(
            self._registry,
            self._scheduler,
            ticket_factory=ticket_factory,
            min_players=min_players,
        )
        self._adjudicator = PrizeAdjudicator(self._registry, self._scheduler, validator=validator)

    @property
    def registry(self) -> RoomRegistry:
        return self._registry

    @property
    def scheduler(self) -> NumberCallScheduler:
        return self._scheduler

    @property
    def room_count(self) -> int:
        return self._registry.room_count

    # --- Exposed operations ---

    def create_room(
        self,
        host: PlayerIdentity,
        settings_override: Mapping[str, Any] | GameSettings | None = None,
    ) -> Result[Room]:
        try:
            return Success(self._lifecycle.create_room(host, settings_override))
        except HousieError as e:
            return self._failure("create_room", e)

    def get_room(self, room_id: str) -> Room | None:
        return self._registry.get(room_id)

    async def join_room(self, room_id: str, player: PlayerIdentity, ticket_count: int | None = None) -> Result[Room]:
        try:
            room = self._lifecycle.join(room_id, player, ticket_count)
        except HousieError as e:
            return self._failure("join_room", e, room_id=room_id, player_id=player.player_id)
        await self._publish_state(room_id)
        return Success(room)

    async def start_game(self, room_id: str, requester_id: str) -> Result[Room]:
        try:
            room = self._lifecycle.start(room_id, requester_id)
        except HousieError as e:
            return self._failure("start_game", e, room_id=room_id, player_id=requester_id)
        snapshot = get_client_snapshot(self._registry, room_id)
        if snapshot is not None:
            payload = snapshot.model_dump(mode="json")
            await self._notifier.publish(room_id, RoomEventKind.GAME_STARTED, payload)
            await self._notifier.publish(room_id, RoomEventKind.ROOM_STATE_UPDATED, payload)
        return Success(room)

    def call_next_number(self, room_id: str) -> Result[Room]:
        try:
            return Success(self._lifecycle.call_next_number(room_id))
        except HousieError as e:
            return self._failure("call_next_number", e, room_id=room_id)

    async def claim_prize(
        self,
        room_id: str,
        player_id: str,
        prize: PrizeType,
        ticket_index: int,
    ) -> Result[Room]:
        try:
            room = self._adjudicator.claim(room_id, player_id, prize, ticket_index)
        except HousieError as e:
            return self._failure("claim_prize", e, room_id=room_id, player_id=player_id, prize=prize)
        await self._publish_state(room_id)
        return Success(room)

    def get_client_snapshot(self, room_id: str) -> Result[RoomSnapshot]:
        snapshot = get_client_snapshot(self._registry, room_id)
        if snapshot is None:
            return Failure(
                code=HousieErrorCode.SNAPSHOT_UNAVAILABLE,
                message=f"Could not retrieve state for room {room_id}.",
            )
        return Success(snapshot)

    async def shutdown(self) -> None:
        await self._scheduler.stop_all()

    # --- Internal helpers ---

    @staticmethod
    def _failure(operation: str, error: HousieError, **context: Any) -> Failure:  # noqa: ANN401
        logger.info("operation rejected", operation=operation, code=error.code, reason=error.message, **context)
        return Failure.from_error(error)

    async def _publish_state(self, room_id: str) -> None:
        """Push the room snapshot, plus game_over when the round has ended."""
        snapshot = get_client_snapshot(self._registry, room_id)
        if snapshot is None:
            return
        payload = snapshot.model_dump(mode="json")
        await self._notifier.publish(room_id, RoomEventKind.ROOM_STATE_UPDATED, payload)
        if snapshot.is_game_over:
            await self._notifier.publish(room_id, RoomEventKind.GAME_OVER, payload)

    def _on_room_expired(self, room_id: str) -> None:
        self._scheduler.stop(room_id, reason="room expired before start")

    async def _on_tick(self, room_id: str) -> None:
        """Draw one number for a room and publish the result.

        The timer is only ever stopped before the first await: once publishing
        starts, the host may already have restarted the room with a new timer,
        and a restarted room gets no game_over for the round it left.
        """
        room = self._registry.get(room_id)
        if room is None:
            self._scheduler.stop(room_id, reason="room no longer exists")
            return
        if not room.is_game_started or room.is_game_over:
            self._scheduler.stop(room_id, reason="game not running")
            return

        round_number = room.round_number
        try:
            self._lifecycle.call_next_number(room_id)
        except HousieError as e:
            logger.warning("scheduled draw rejected", room_id=room_id, code=e.code, reason=e.message)
            self._scheduler.stop(room_id, reason="scheduled draw rejected")
            return

        snapshot = get_client_snapshot(self._registry, room_id)
        if snapshot is None:
            logger.error("room snapshot unavailable after draw", room_id=room_id)
            self._scheduler.stop(room_id, reason="snapshot unavailable")
            return

        payload = snapshot.model_dump(mode="json")
        await self._notifier.publish(room_id, RoomEventKind.ROOM_STATE_UPDATED, payload)
        if snapshot.is_game_over and room.round_number == round_number:
            await self._notifier.publish(room_id, RoomEventKind.GAME_OVER, payload)
