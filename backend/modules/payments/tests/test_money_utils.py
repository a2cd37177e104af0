import pytest
from decimal import Decimal

from modules.payments.utils.money import allocate_cents, from_cents, round_money, to_cents


class TestRounding:

    @pytest.mark.parametrize(
        "amount,expected",
        [("36.665", "36.67"), ("36.664", "36.66"), ("0.005", "0.01"), ("10", "10.00")],
    )
    def test_round_half_up(self, amount, expected):
        assert round_money(Decimal(amount)) == Decimal(expected)

    def test_cents_conversion(self):
        assert to_cents(Decimal("110.00")) == 11000
        assert from_cents(3667) == Decimal("36.67")


class TestAllocateCents:

    def test_equal_weights_favour_first_parts(self):
        assert allocate_cents(11000, [Decimal(1)] * 3) == [3667, 3667, 3666]

    def test_parts_always_sum_to_total(self):
        weights = [Decimal("3.33"), Decimal("1"), Decimal("7.1"), Decimal("0.5")]
        for total in (1, 99, 1000, 12345):
            assert sum(allocate_cents(total, weights)) == total

    def test_largest_remainder_gets_the_cent(self):
        # 1.25 and 3.75 cents: the .75 remainder wins the leftover cent
        assert allocate_cents(5, [Decimal(1), Decimal(3)]) == [1, 4]

    def test_ties_go_to_the_earlier_part(self):
        assert allocate_cents(10, [Decimal(1), Decimal(3)]) == [3, 7]

    def test_zero_total_over_zero_weights(self):
        assert allocate_cents(0, [Decimal(0), Decimal(0)]) == [0, 0]

    def test_no_weights(self):
        assert allocate_cents(100, []) == []
