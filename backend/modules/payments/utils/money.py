"""Cent-exact money helpers."""

from decimal import Decimal, ROUND_FLOOR, ROUND_HALF_UP
from typing import List, Sequence

CENT = Decimal("0.01")


def round_money(amount: Decimal) -> Decimal:
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def to_cents(amount: Decimal) -> int:
    return int(round_money(amount) * 100)


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def allocate_cents(total_cents: int, weights: Sequence[Decimal]) -> List[int]:
    """
    Split ``total_cents`` proportionally to ``weights`` so the parts sum
    exactly to the total.

    Largest remainder method: every part gets the floor of its exact share,
    leftover cents go to the largest fractional remainders, earlier parts
    first on ties.
    """
    if not weights:
        return []

    weight_sum = sum((Decimal(w) for w in weights), Decimal("0"))
    if weight_sum <= 0:
        if total_cents:
            raise ValueError("Cannot allocate a non-zero amount over zero weights")
        return [0] * len(weights)

    exact = [Decimal(total_cents) * Decimal(w) / weight_sum for w in weights]
    parts = [int(share.to_integral_value(rounding=ROUND_FLOOR)) for share in exact]
    leftover = total_cents - sum(parts)

    by_remainder = sorted(
        range(len(weights)), key=lambda i: (-(exact[i] - parts[i]), i)
    )
    for index in by_remainder[:leftover]:
        parts[index] += 1
    return parts
