"""
Housie ticket generation.

A ticket is a 3x9 grid. Each row holds exactly 5 numbers and 4 blanks,
column c draws its numbers from its own decade (column 0: 1-9, columns 1-7:
10c..10c+9, column 8: 80-90), every column holds at least one number, and
numbers ascend from top to bottom within a column.
"""

from __future__ import annotations

import random

from housie.logic.settings import NUMBERS_RANGE_MAX, NUMBERS_RANGE_MIN

TICKET_ROWS = 3
TICKET_COLUMNS = 9
NUMBERS_PER_ROW = 5
NUMBERS_PER_TICKET = TICKET_ROWS * NUMBERS_PER_ROW

type TicketRow = tuple[int | None, ...]
type Ticket = tuple[TicketRow, ...]

_system_rng = random.SystemRandom()


def column_range(column: int) -> tuple[int, int]:
    """Inclusive (low, high) number range for a ticket column."""
    if not 0 <= column < TICKET_COLUMNS:
        raise ValueError(f"column must be 0-{TICKET_COLUMNS - 1}, got {column}")
    low = NUMBERS_RANGE_MIN if column == 0 else column * 10
    high = NUMBERS_RANGE_MAX if column == TICKET_COLUMNS - 1 else column * 10 + 9
    return low, high


def _pick_row_columns(rng: random.Random) -> list[list[int]]:
    """Choose 5 columns per row so that every column is used at least once."""
    while True:
        layout = [sorted(rng.sample(range(TICKET_COLUMNS), NUMBERS_PER_ROW)) for _ in range(TICKET_ROWS)]
        used = {column for row in layout for column in row}
        if len(used) == TICKET_COLUMNS:
            return layout


def generate_ticket(rng: random.Random | None = None) -> Ticket:
    """Generate a fresh ticket grid. Pure apart from the RNG it consumes."""
    rng = rng or _system_rng
    grid: list[list[int | None]] = [[None] * TICKET_COLUMNS for _ in range(TICKET_ROWS)]
    layout = _pick_row_columns(rng)

    for column in range(TICKET_COLUMNS):
        rows = [row for row in range(TICKET_ROWS) if column in layout[row]]
        low, high = column_range(column)
        numbers = sorted(rng.sample(range(low, high + 1), len(rows)))
        for row, number in zip(rows, numbers, strict=True):
            grid[row][column] = number

    return tuple(tuple(row) for row in grid)


def row_numbers(ticket: Ticket, row: int) -> list[int]:
    """Numbers of one row, left to right, blanks skipped."""
    return [number for number in ticket[row] if number is not None]


def ticket_numbers(ticket: Ticket) -> list[int]:
    return [number for row in range(len(ticket)) for number in row_numbers(ticket, row)]
