"""Per-room game settings and fixed game constants."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from housie.logic.enums import PrizeFormat, PrizeType
from housie.logic.exceptions import InvalidSettingsError

if TYPE_CHECKING:
    from collections.abc import Mapping

NUMBERS_RANGE_MIN = 1
NUMBERS_RANGE_MAX = 90
TOTAL_NUMBERS = NUMBERS_RANGE_MAX - NUMBERS_RANGE_MIN + 1

MIN_LOBBY_SIZE = 2
MAX_LOBBY_SIZE = 100
DEFAULT_LOBBY_SIZE = 10
DEFAULT_TICKETS_PER_PLAYER = 1
MAX_TICKETS_PER_PLAYER = 6

CALL_INTERVAL_SECONDS = 5.0
ROOM_INACTIVITY_SECONDS = 24 * 60 * 60

PRIZE_DEFINITIONS: dict[PrizeFormat, tuple[PrizeType, ...]] = {
    PrizeFormat.STANDARD: (
        PrizeType.EARLY_FIVE,
        PrizeType.TOP_LINE,
        PrizeType.MIDDLE_LINE,
        PrizeType.BOTTOM_LINE,
        PrizeType.FULL_HOUSE,
    ),
    PrizeFormat.EXTENDED: (
        PrizeType.EARLY_FIVE,
        PrizeType.TOP_LINE,
        PrizeType.MIDDLE_LINE,
        PrizeType.BOTTOM_LINE,
        PrizeType.FOUR_CORNERS,
        PrizeType.FULL_HOUSE,
    ),
    PrizeFormat.FULL_HOUSE_ONLY: (PrizeType.FULL_HOUSE,),
}


class GameSettings(BaseModel):
    """
    Configuration snapshot taken when a room is created.

    Frozen for the lifetime of the room; a restart reuses the same settings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    lobby_size: int = Field(default=DEFAULT_LOBBY_SIZE, ge=1, le=MAX_LOBBY_SIZE)
    tickets_per_player: int = Field(default=DEFAULT_TICKETS_PER_PLAYER, ge=1, le=MAX_TICKETS_PER_PLAYER)
    prize_format: PrizeFormat = PrizeFormat.STANDARD

    @property
    def prizes(self) -> tuple[PrizeType, ...]:
        """Prize types active under this room's prize format."""
        return PRIZE_DEFINITIONS[self.prize_format]


def build_settings(overrides: Mapping[str, Any] | GameSettings | None = None) -> GameSettings:
    """Merge client-supplied overrides onto the defaults.

    Raises InvalidSettingsError if an override is unknown or out of range.
    """
    if overrides is None:
        return GameSettings()
    if isinstance(overrides, GameSettings):
        return overrides
    try:
        return GameSettings.model_validate(dict(overrides))
    except ValidationError as e:
        fields = ", ".join(str(err["loc"][0]) for err in e.errors() if err["loc"])
        raise InvalidSettingsError(f"Invalid room settings: {fields or 'malformed'}") from e
