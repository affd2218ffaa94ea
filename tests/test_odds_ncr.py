"""Tests for nCr notation and parlay payout math."""

from __future__ import annotations

import pytest

from chat_bet_parse.exceptions import ChatBetParseError
from chat_bet_parse.parsers import (
    NcrNotation,
    parlay_fair_to_win,
    parse_ncr_notation,
    round_robin_fair_to_win,
)
from chat_bet_parse.parsers.odds import (
    american_to_decimal,
    combinations_count,
    combine_odds,
    total_parlay_count,
)


@pytest.mark.parametrize(
    ("notation", "expected"),
    [
        ("4c2", NcrNotation(total_legs=4, parlay_size=2)),
        ("5C3", NcrNotation(total_legs=5, parlay_size=3)),
        ("5c3-", NcrNotation(total_legs=5, parlay_size=3, is_at_most=True)),
    ],
)
def test_parse_ncr_notation(notation: str, expected: NcrNotation) -> None:
    assert parse_ncr_notation(notation, "raw") == expected


@pytest.mark.parametrize(
    ("notation", "reason"),
    [
        ("4x2", "Invalid nCr notation format"),
        ("5c2,3", "Comma-separated parlay sizes not supported"),
        ("2c2", "Total legs must be at least 3"),
        ("4c4", "Parlay size must be less than total legs"),
        ("4c1", "Parlay size must be at least 2"),
        ("4.5c2", "Total legs must be an integer"),
        ("4c2.5", "Parlay size must be an integer"),
        ("xc2", "Total legs must be a number"),
        ("-4c2", "Total legs must be positive"),
        ("4c2--", "Invalid at-most modifier"),
    ],
)
def test_parse_ncr_notation_errors(notation: str, reason: str) -> None:
    with pytest.raises(ChatBetParseError) as exc_info:
        parse_ncr_notation(notation, "raw")
    assert exc_info.value.reason == reason
    assert exc_info.value.kind == "InvalidNcrNotation"


def test_american_to_decimal() -> None:
    assert american_to_decimal(120) == pytest.approx(2.2)
    assert american_to_decimal(-110) == pytest.approx(1.909090909)
    assert american_to_decimal(100) == pytest.approx(2.0)


def test_combinations() -> None:
    assert combinations_count(5, 3) == 10
    assert combinations_count(4, 0) == 1
    assert combinations_count(3, 4) == 0
    assert total_parlay_count(4, 3, False) == 4
    assert total_parlay_count(4, 3, True) == 10


def test_parlay_fair_to_win() -> None:
    assert combine_odds([120, -110]) == pytest.approx(4.2)
    assert parlay_fair_to_win([120, -110], 100) == pytest.approx(320.0)


def test_round_robin_fair_to_win_splits_stake_across_parlays() -> None:
    assert round_robin_fair_to_win(
        [120, -110, 105], 100, parlay_size=2, is_at_most=False
    ) == pytest.approx(320.79)
    assert round_robin_fair_to_win(
        [100, 100, 100, 100], 100, parlay_size=3, is_at_most=True
    ) == pytest.approx(460.0)
