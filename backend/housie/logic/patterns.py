"""
Prize pattern validation.

is_winning_claim() is pure: the verdict depends only on the ticket, the
numbers called so far and the prize type.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from housie.logic.enums import PrizeType
from housie.logic.tickets import row_numbers, ticket_numbers

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from housie.logic.tickets import Ticket

EARLY_FIVE_COUNT = 5

# (ticket, called_numbers, prize) -> bool
type PatternValidator = Callable[[Ticket, Iterable[int], PrizeType], bool]

_LINE_ROWS = {
    PrizeType.TOP_LINE: 0,
    PrizeType.MIDDLE_LINE: 1,
    PrizeType.BOTTOM_LINE: 2,
}


def prize_numbers(ticket: Ticket, prize: PrizeType) -> list[int]:
    """Numbers that must all be called for a pattern prize.

    Early five has no fixed set and is handled separately.
    """
    if prize in _LINE_ROWS:
        return row_numbers(ticket, _LINE_ROWS[prize])
    if prize == PrizeType.FOUR_CORNERS:
        top = row_numbers(ticket, 0)
        bottom = row_numbers(ticket, len(ticket) - 1)
        return [top[0], top[-1], bottom[0], bottom[-1]]
    if prize == PrizeType.FULL_HOUSE:
        return ticket_numbers(ticket)
    raise ValueError(f"{prize.value} has no fixed number set")


def is_winning_claim(ticket: Ticket, called_numbers: Iterable[int], prize: PrizeType) -> bool:
    """Check whether the called numbers complete the prize pattern on a ticket."""
    called = set(called_numbers)
    if prize == PrizeType.EARLY_FIVE:
        return sum(1 for number in ticket_numbers(ticket) if number in called) >= EARLY_FIVE_COUNT
    required = prize_numbers(ticket, prize)
    return bool(required) and all(number in called for number in required)
