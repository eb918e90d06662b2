"""Prize claim validation, recording and the full-house cascade."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from housie.logic.enums import LINE_PRIZES, PrizeType
from housie.logic.exceptions import (
    AlreadyClaimedBySelfError,
    BogeyClaimError,
    FullHouseAlreadyWonError,
    FullHouseTakenBlocksOthersError,
    GameNotStartedError,
    InvalidTicketIndexError,
    PlayerNotInRoomError,
    PrizeNotInFormatError,
    RoomNotFoundError,
    RoundOverNonFullHouseError,
)
from housie.logic.patterns import is_winning_claim

if TYPE_CHECKING:
    from housie.logic.patterns import PatternValidator
    from housie.logic.tickets import Ticket
    from housie.session.call_scheduler import NumberCallScheduler
    from housie.session.registry import RoomRegistry
    from housie.session.room import Room

logger = structlog.get_logger()


def _prize_label(prize: PrizeType) -> str:
    return prize.value.replace("_", " ").title()


class PrizeAdjudicator:
    """
    Validate and record prize claims.

    Guards run in a fixed order and the first failing one rejects the claim
    with no state change. A full-house win ends the round, stops the room's
    timer and auto-awards the line prizes the same ticket also completes.
    Only one player can hold full house.
    """

    def __init__(
        self,
        registry: RoomRegistry,
        scheduler: NumberCallScheduler,
        *,
        validator: PatternValidator = is_winning_claim,
    ) -> None:
        self._registry = registry
        self._scheduler = scheduler
        self._validator = validator

    def claim(self, room_id: str, player_id: str, prize: PrizeType, ticket_index: int) -> Room:
        room = self._registry.get(room_id)
        if room is None:
            raise RoomNotFoundError(room_id)
        if not room.is_game_started:
            raise GameNotStartedError("Game not started.")

        player = room.get_player(player_id)
        if player is None:
            raise PlayerNotInRoomError("Player not found in this room.")
        if not 0 <= ticket_index < len(player.tickets):
            raise InvalidTicketIndexError("Invalid ticket index.")
        ticket = player.tickets[ticket_index]

        ledger = room.prize_ledger
        label = _prize_label(prize)
        if prize not in ledger:
            raise PrizeNotInFormatError(f"{label} is not a prize in this room.")
        if room.is_game_over and prize != PrizeType.FULL_HOUSE:
            raise RoundOverNonFullHouseError("Game is over. No more claims except Full House.")
        if ledger.has_claimed(prize, player_id):
            raise AlreadyClaimedBySelfError(f"You have already claimed {label}.")
        full_house_taken = ledger.is_claimed(PrizeType.FULL_HOUSE)
        if full_house_taken and prize != PrizeType.FULL_HOUSE:
            raise FullHouseTakenBlocksOthersError("Full House already claimed, no more claims for other prizes.")
        if full_house_taken:
            raise FullHouseAlreadyWonError("Full House has already been won in this round.")

        if not self._validator(ticket, room.called_numbers, prize):
            raise BogeyClaimError(
                f"Claim for {label} on ticket {ticket_index + 1} is not valid (Bogey!). "
                "Ensure all numbers for the claim have been called.",
            )

        ledger.award(prize, player_id, self._registry.now())
        logger.info("prize claimed", room_id=room_id, player_id=player_id, prize=prize)

        if prize == PrizeType.FULL_HOUSE:
            room.is_game_over = True
            self._scheduler.stop(room_id, reason="full house claimed")
            self._award_completed_lines(room, player_id, ticket)
        return room

    def _award_completed_lines(self, room: Room, player_id: str, ticket: Ticket) -> None:
        ledger = room.prize_ledger
        now = self._registry.now()
        for line_prize in LINE_PRIZES:
            if line_prize not in ledger or ledger.has_claimed(line_prize, player_id):
                continue
            if self._validator(ticket, room.called_numbers, line_prize) and ledger.award(line_prize, player_id, now):
                logger.info(
                    "line prize auto-awarded with full house",
                    room_id=room.room_id,
                    player_id=player_id,
                    prize=line_prize,
                )
