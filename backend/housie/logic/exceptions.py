"""Typed domain exceptions for rejected room operations.

Every rule violation raised by the lifecycle controller or the prize
adjudicator is a subclass of HousieError carrying a HousieErrorCode.
HousieService catches them at its boundary and converts them into
Failure results, so no domain error escapes to the transport layer.
"""

from typing import ClassVar

from housie.logic.enums import HousieErrorCode


class HousieError(Exception):
    """Base exception for rejected room operations."""

    code: ClassVar[HousieErrorCode]

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class RoomNotFoundError(HousieError):
    code = HousieErrorCode.ROOM_NOT_FOUND

    def __init__(self, room_id: str) -> None:
        self.room_id = room_id
        super().__init__(f"Room {room_id} not found.")


class RoomFullError(HousieError):
    code = HousieErrorCode.ROOM_FULL


class GameAlreadyStartedError(HousieError):
    """Joining or buying tickets after the round has started."""

    code = HousieErrorCode.GAME_ALREADY_STARTED


class AlreadyStartedError(HousieError):
    """Starting a round that is currently running."""

    code = HousieErrorCode.ALREADY_STARTED


class GameNotStartedError(HousieError):
    code = HousieErrorCode.GAME_NOT_STARTED


class GameOverError(HousieError):
    """Drawing from a round that already ended.

    Attributes:
        number: The last called number, for display.

    """

    code = HousieErrorCode.GAME_OVER

    def __init__(self, message: str, number: int | None = None) -> None:
        self.number = number
        super().__init__(message)


class HostHasNoTicketsError(HousieError):
    code = HousieErrorCode.HOST_HAS_NO_TICKETS


class NotEnoughPlayersError(HousieError):
    code = HousieErrorCode.NOT_ENOUGH_PLAYERS


class NotHostError(HousieError):
    code = HousieErrorCode.NOT_HOST


class PlayerNotInRoomError(HousieError):
    code = HousieErrorCode.PLAYER_NOT_IN_ROOM


class InvalidTicketIndexError(HousieError):
    code = HousieErrorCode.INVALID_TICKET_INDEX


class PrizeNotInFormatError(HousieError):
    code = HousieErrorCode.PRIZE_NOT_IN_FORMAT


class RoundOverNonFullHouseError(HousieError):
    code = HousieErrorCode.ROUND_OVER_NON_FULL_HOUSE


class AlreadyClaimedBySelfError(HousieError):
    code = HousieErrorCode.ALREADY_CLAIMED_BY_SELF


class FullHouseTakenBlocksOthersError(HousieError):
    code = HousieErrorCode.FULL_HOUSE_TAKEN_BLOCKS_OTHERS


class FullHouseAlreadyWonError(HousieError):
    code = HousieErrorCode.FULL_HOUSE_ALREADY_WON


class BogeyClaimError(HousieError):
    """Claimed pattern is not satisfied by the called numbers."""

    code = HousieErrorCode.BOGEY_CLAIM


class InvalidSettingsError(HousieError):
    code = HousieErrorCode.INVALID_SETTINGS


class PoolExhaustedError(Exception):
    """Raised by NumberPool.draw() when every number has been called.

    Not a HousieError: exhaustion ends the round normally and is never
    reported to a caller as a failure.
    """
