"""
String enum definitions for Housie game concepts.
"""

from enum import StrEnum


class PrizeType(StrEnum):
    """Winning patterns a player can claim on a ticket."""

    EARLY_FIVE = "early_five"
    TOP_LINE = "top_line"
    MIDDLE_LINE = "middle_line"
    BOTTOM_LINE = "bottom_line"
    FOUR_CORNERS = "four_corners"
    FULL_HOUSE = "full_house"


# Line prizes are auto-evaluated when the same ticket wins full house.
LINE_PRIZES: tuple[PrizeType, ...] = (PrizeType.TOP_LINE, PrizeType.MIDDLE_LINE, PrizeType.BOTTOM_LINE)


class PrizeFormat(StrEnum):
    """Named selection of the prizes that are active for a round."""

    STANDARD = "standard"
    EXTENDED = "extended"
    FULL_HOUSE_ONLY = "full_house_only"


class RoundPhase(StrEnum):
    """Derived state of a room's current round."""

    LOBBY = "lobby"
    STARTED = "started"
    OVER = "over"


class RoomEventKind(StrEnum):
    """Event kinds pushed to the subscribers of a room."""

    ROOM_STATE_UPDATED = "room_state_updated"
    GAME_STARTED = "game_started"
    GAME_OVER = "game_over"
    ROOM_ERROR = "room_error"


class HousieErrorCode(StrEnum):
    """Error codes returned to callers for rejected operations."""

    ROOM_NOT_FOUND = "room_not_found"
    ROOM_FULL = "room_full"
    GAME_ALREADY_STARTED = "game_already_started"
    ALREADY_STARTED = "already_started"
    GAME_NOT_STARTED = "game_not_started"
    GAME_OVER = "game_over"
    HOST_HAS_NO_TICKETS = "host_has_no_tickets"
    NOT_ENOUGH_PLAYERS = "not_enough_players"
    NOT_HOST = "not_host"
    PLAYER_NOT_IN_ROOM = "player_not_in_room"
    INVALID_TICKET_INDEX = "invalid_ticket_index"
    PRIZE_NOT_IN_FORMAT = "prize_not_in_format"
    ROUND_OVER_NON_FULL_HOUSE = "round_over_non_full_house"
    ALREADY_CLAIMED_BY_SELF = "already_claimed_by_self"
    FULL_HOUSE_TAKEN_BLOCKS_OTHERS = "full_house_taken_blocks_others"
    FULL_HOUSE_ALREADY_WON = "full_house_already_won"
    BOGEY_CLAIM = "bogey_claim"
    INVALID_SETTINGS = "invalid_settings"
    SNAPSHOT_UNAVAILABLE = "snapshot_unavailable"
