"""Combinatorics and fair-odds payout math for parlays and round robins."""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Sequence


def american_to_decimal(odds: float) -> float:
    return 1 + (odds / 100) if odds > 0 else 1 + (100 / abs(odds))


def combine_odds(prices: Iterable[float]) -> float:
    decimal = 1.0
    for price in prices:
        decimal *= american_to_decimal(price)
    return decimal


def combinations_count(n: int, r: int) -> int:
    """C(n, r) with the multiplicative formula."""
    if r < 0 or r > n:
        return 0
    r = min(r, n - r)
    result = 1
    for i in range(r):
        result = result * (n - i) // (i + 1)
    return result


def round_robin_sizes(parlay_size: int, is_at_most: bool) -> range:
    return range(2, parlay_size + 1) if is_at_most else range(parlay_size, parlay_size + 1)


def total_parlay_count(total_legs: int, parlay_size: int, is_at_most: bool) -> int:
    return sum(
        combinations_count(total_legs, size) for size in round_robin_sizes(parlay_size, is_at_most)
    )


def parlay_fair_to_win(prices: Sequence[float], risk: float) -> float:
    return round(risk * (combine_odds(prices) - 1), 2)


def round_robin_fair_to_win(
    prices: Sequence[float],
    risk: float,
    *,
    parlay_size: int,
    is_at_most: bool,
) -> float:
    """Sum the fair payout of every parlay in the round robin.

    The stake is split evenly across all parlays, whether it was given
    per selection or as a total.
    """
    count = total_parlay_count(len(prices), parlay_size, is_at_most)
    if count == 0:
        return 0.0
    per_parlay = risk / count
    total = 0.0
    for size in round_robin_sizes(parlay_size, is_at_most):
        for subset in itertools.combinations(prices, size):
            total += per_parlay * (combine_odds(subset) - 1)
    return round(total, 2)
