import pytest

from housie.logic.enums import PrizeType
from housie.logic.patterns import is_winning_claim, prize_numbers
from housie.tests.helpers import (
    ALL_NUMBERS,
    BOTTOM_LINE,
    FIXED_TICKET,
    FOUR_CORNERS,
    MIDDLE_LINE,
    TOP_LINE,
)


class TestPrizeNumbers:
    @pytest.mark.parametrize(
        ("prize", "expected"),
        [
            (PrizeType.TOP_LINE, TOP_LINE),
            (PrizeType.MIDDLE_LINE, MIDDLE_LINE),
            (PrizeType.BOTTOM_LINE, BOTTOM_LINE),
            (PrizeType.FOUR_CORNERS, FOUR_CORNERS),
        ],
    )
    def test_pattern_numbers(self, prize, expected):
        assert prize_numbers(FIXED_TICKET, prize) == expected

    def test_full_house_is_every_number(self):
        assert sorted(prize_numbers(FIXED_TICKET, PrizeType.FULL_HOUSE)) == sorted(ALL_NUMBERS)

    def test_early_five_has_no_fixed_set(self):
        with pytest.raises(ValueError, match="early_five"):
            prize_numbers(FIXED_TICKET, PrizeType.EARLY_FIVE)


class TestIsWinningClaim:
    @pytest.mark.parametrize(
        ("prize", "numbers"),
        [
            (PrizeType.TOP_LINE, TOP_LINE),
            (PrizeType.MIDDLE_LINE, MIDDLE_LINE),
            (PrizeType.BOTTOM_LINE, BOTTOM_LINE),
            (PrizeType.FOUR_CORNERS, FOUR_CORNERS),
            (PrizeType.FULL_HOUSE, ALL_NUMBERS),
        ],
    )
    def test_complete_pattern_wins(self, prize, numbers):
        assert is_winning_claim(FIXED_TICKET, numbers, prize)

    @pytest.mark.parametrize(
        ("prize", "numbers"),
        [
            (PrizeType.TOP_LINE, TOP_LINE[:-1]),
            (PrizeType.FOUR_CORNERS, FOUR_CORNERS[:3]),
            (PrizeType.FULL_HOUSE, ALL_NUMBERS[:-1]),
        ],
    )
    def test_one_number_short_is_bogey(self, prize, numbers):
        assert not is_winning_claim(FIXED_TICKET, numbers, prize)

    def test_early_five_counts_numbers_anywhere_on_ticket(self):
        called = [TOP_LINE[0], MIDDLE_LINE[1], BOTTOM_LINE[2], TOP_LINE[3], MIDDLE_LINE[4]]
        assert is_winning_claim(FIXED_TICKET, called, PrizeType.EARLY_FIVE)

    def test_early_five_needs_five(self):
        assert not is_winning_claim(FIXED_TICKET, TOP_LINE[:4], PrizeType.EARLY_FIVE)

    def test_numbers_not_on_ticket_do_not_count(self):
        assert not is_winning_claim(FIXED_TICKET, [1, 2, 3, 5, 6, 8, 9], PrizeType.EARLY_FIVE)

    def test_extra_called_numbers_are_ignored(self):
        assert is_winning_claim(FIXED_TICKET, [*TOP_LINE, 1, 2, 90], PrizeType.TOP_LINE)

    def test_accepts_any_iterable(self):
        assert is_winning_claim(FIXED_TICKET, iter(TOP_LINE), PrizeType.TOP_LINE)
