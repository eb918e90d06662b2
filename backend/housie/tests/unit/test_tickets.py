import random

import pytest

from housie.logic.tickets import (
    NUMBERS_PER_ROW,
    NUMBERS_PER_TICKET,
    TICKET_COLUMNS,
    TICKET_ROWS,
    column_range,
    generate_ticket,
    row_numbers,
    ticket_numbers,
)
from housie.tests.helpers import FIXED_TICKET, MIDDLE_LINE, TOP_LINE


def _column(ticket, column):
    return [ticket[row][column] for row in range(TICKET_ROWS) if ticket[row][column] is not None]


class TestColumnRange:
    @pytest.mark.parametrize(
        ("column", "expected"),
        [(0, (1, 9)), (1, (10, 19)), (4, (40, 49)), (7, (70, 79)), (8, (80, 90))],
    )
    def test_ranges(self, column, expected):
        assert column_range(column) == expected

    def test_rejects_out_of_grid_column(self):
        with pytest.raises(ValueError, match="column"):
            column_range(9)


class TestGenerateTicket:
    @pytest.fixture(params=range(20))
    def ticket(self, request):
        return generate_ticket(random.Random(request.param))  # noqa: S311

    def test_shape(self, ticket):
        assert len(ticket) == TICKET_ROWS
        assert all(len(row) == TICKET_COLUMNS for row in ticket)

    def test_each_row_has_five_numbers(self, ticket):
        for row in range(TICKET_ROWS):
            assert len(row_numbers(ticket, row)) == NUMBERS_PER_ROW

    def test_every_column_used(self, ticket):
        for column in range(TICKET_COLUMNS):
            assert _column(ticket, column)

    def test_numbers_in_column_range_and_ascending(self, ticket):
        for column in range(TICKET_COLUMNS):
            numbers = _column(ticket, column)
            low, high = column_range(column)
            assert all(low <= n <= high for n in numbers)
            assert numbers == sorted(numbers)
            assert len(set(numbers)) == len(numbers)

    def test_fifteen_unique_numbers(self, ticket):
        numbers = ticket_numbers(ticket)
        assert len(numbers) == NUMBERS_PER_TICKET
        assert len(set(numbers)) == NUMBERS_PER_TICKET

    def test_default_rng(self):
        ticket = generate_ticket()
        assert len(ticket_numbers(ticket)) == NUMBERS_PER_TICKET

    def test_same_seed_same_ticket(self):
        assert generate_ticket(random.Random(7)) == generate_ticket(random.Random(7))  # noqa: S311


class TestTicketHelpers:
    def test_row_numbers_skip_blanks(self):
        assert row_numbers(FIXED_TICKET, 0) == TOP_LINE
        assert row_numbers(FIXED_TICKET, 1) == MIDDLE_LINE

    def test_ticket_numbers_row_major(self):
        assert ticket_numbers(FIXED_TICKET)[:5] == TOP_LINE
