"""Per-round record of which prizes have been claimed and by whom."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from housie.logic.enums import PrizeType

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator
    from datetime import datetime


@dataclass
class ClaimRecord:
    """Players who validly claimed a prize, in claim order."""

    first_claimed_at: datetime
    claimed_by: list[str] = field(default_factory=list)


class PrizeLedger:
    """
    Claim status for the prize set of one round.

    Only prizes passed at construction can be awarded. A prize with no
    record is unclaimed.
    """

    def __init__(self, prizes: Iterable[PrizeType]) -> None:
        self._records: dict[PrizeType, ClaimRecord | None] = dict.fromkeys(prizes)

    @property
    def prizes(self) -> tuple[PrizeType, ...]:
        return tuple(self._records)

    def __contains__(self, prize: object) -> bool:
        return prize in self._records

    def items(self) -> Iterator[tuple[PrizeType, ClaimRecord | None]]:
        return iter(self._records.items())

    def get(self, prize: PrizeType) -> ClaimRecord | None:
        return self._records.get(prize)

    def claimants(self, prize: PrizeType) -> tuple[str, ...]:
        record = self._records.get(prize)
        return tuple(record.claimed_by) if record else ()

    def is_claimed(self, prize: PrizeType) -> bool:
        return bool(self.claimants(prize))

    def has_claimed(self, prize: PrizeType, player_id: str) -> bool:
        return player_id in self.claimants(prize)

    def award(self, prize: PrizeType, player_id: str, now: datetime) -> bool:
        """Add a claimant. Returns False if the player already holds the prize."""
        if prize not in self._records:
            raise ValueError(f"{prize.value} is not part of this round's prizes")
        record = self._records[prize]
        if record is None:
            record = ClaimRecord(first_claimed_at=now)
            self._records[prize] = record
        if player_id in record.claimed_by:
            return False
        record.claimed_by.append(player_id)
        return True
