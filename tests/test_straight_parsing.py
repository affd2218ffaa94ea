"""Tests for straight IW/YG message parsing and batch summaries."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from chat_bet_parse import ChatBetParseError, ChatBetParser, StraightResult, parse
from chat_bet_parse.parsers import summarize_parse_results

EXECUTED_AT = datetime(2025, 5, 14, 18, 30, tzinfo=UTC)


def _straight(message: str, **kwargs) -> StraightResult:
    result = ChatBetParser().parse(message, execution_time=EXECUTED_AT, **kwargs)
    assert isinstance(result, StraightResult)
    return result


def test_fill_first_inning_under() -> None:
    result = _straight("YG Padres/Pirates 1st inning u0.5 @ +100 = 0.094")
    contract = result.contract
    assert result.chat_type == "fill"
    assert result.contract_type == "TotalPoints"
    assert contract.match.team1 == "Padres"
    assert contract.match.team2 == "Pirates"
    assert contract.period.type_code == "I"
    assert contract.period.number == 1
    assert contract.line == 0.5
    assert contract.is_over is False
    assert contract.sport == "Baseball"
    assert result.bet.price == 100.0
    assert result.bet.size == pytest.approx(94.0)
    assert result.bet.execution_timestamp == EXECUTED_AT


def test_order_with_rotation_number() -> None:
    result = parse("IW 872 Athletics @ +145")
    assert result.chat_type == "order"
    assert result.contract_type == "HandicapContestantML"
    assert result.rotation_number == 872
    assert result.contract.contestant == "Athletics"
    assert result.contract.sport == "Baseball"
    assert result.bet.price == 145.0
    assert result.bet.size is None
    assert result.bet.execution_timestamp is None


def test_fill_without_size_is_rejected() -> None:
    with pytest.raises(ChatBetParseError, match="require a size") as exc_info:
        parse("YG LAA TT o3.5 @ -115.5")
    assert exc_info.value.kind == "MissingSizeForFill"


def test_leading_period_spread() -> None:
    result = _straight("YG 2h Vanderbilt +2.5 @ +100 = 1k")
    assert result.contract_type == "HandicapContestantLine"
    assert result.contract.contestant == "Vanderbilt"
    assert result.contract.period.type_code == "H"
    assert result.contract.period.number == 2
    assert result.contract.line == 2.5
    assert result.bet.size == 1000.0


def test_league_token_sets_sport_and_league() -> None:
    result = _straight("YG CFB 1Q Baylor/Auburn u13 @ -115 = 2k")
    contract = result.contract
    assert result.contract_type == "TotalPoints"
    assert contract.period.type_code == "Q"
    assert contract.period.number == 1
    assert contract.sport == "Football"
    assert contract.league == "CFB"
    assert contract.line == 13.0
    assert result.bet.size == 2000.0


def test_game_number_runs_total_defaults_price() -> None:
    result = _straight("YG GM1 CLE/WAS 1st inning o0.5 runs = 1.0")
    contract = result.contract
    assert contract.match.day_sequence == 1
    assert contract.match.team1 == "CLE"
    assert contract.match.team2 == "WAS"
    assert contract.is_over is True
    assert contract.sport == "Baseball"
    assert result.bet.price == -110.0
    assert result.bet.size == 1000.0


def test_leading_date_and_league_tokens() -> None:
    result = _straight("IW 5/20 MLB Athletics @ +145", reference_date=date(2025, 5, 1))
    contract = result.contract
    assert contract.match.date == date(2025, 5, 20)
    assert contract.league == "MLB"
    assert contract.sport == "Baseball"
    assert contract.contestant == "Athletics"


def test_rotation_number_does_not_use_a_positional_slot() -> None:
    result = _straight("IW 872 5/20 MLB Athletics @ +145", reference_date=date(2025, 5, 1))
    assert result.rotation_number == 872
    assert result.contract.match.date == date(2025, 5, 20)
    assert result.contract.league == "MLB"
    assert result.contract.contestant == "Athletics"


def test_at_most_two_positional_tokens_are_consumed() -> None:
    result = _straight("IW 2025-05-20 MLB Baseball Athletics @ +145")
    contract = result.contract
    assert contract.match.date == date(2025, 5, 20)
    assert contract.league == "MLB"
    assert contract.sport == "Baseball"
    assert contract.contestant == "Baseball Athletics"


def test_default_price_is_configurable() -> None:
    result = ChatBetParser(default_price=-105.0).parse("IW Lakers")
    assert result.bet.price == -105.0


@pytest.mark.parametrize(
    ("message", "team", "length"),
    [
        ("YG 856 Red Sox series out of 4 -120 = 2.0", "Red Sox", 4),
        ("YG Lakers 7-Game Series @ +120 = 1.0", "Lakers", 7),
        ("IW Guardians series @ -130", "Guardians", 3),
    ],
)
def test_series_contracts(message: str, team: str, length: int) -> None:
    result = _straight(message)
    assert result.contract_type == "Series"
    assert result.contract.contestant == team
    assert result.contract.series_length == length
    assert not hasattr(result.contract, "period")


def test_series_rotation_sets_sport_and_price() -> None:
    result = _straight("YG 856 Red Sox series out of 4 -120 = 2.0")
    assert result.contract.sport == "Baseball"
    assert result.bet.price == -120.0
    assert result.bet.size == 2000.0


def test_individual_prop_over_under() -> None:
    result = _straight("YG B. Falter Ks o1.5 @ +120 = 1.0")
    contract = result.contract
    assert result.contract_type == "PropOU"
    assert contract.contestant == "B. Falter"
    assert contract.contestant_type == "Individual"
    assert contract.prop == "Ks"
    assert contract.match.team1 is None
    assert contract.line == 1.5


def test_yes_no_prop_with_game_number() -> None:
    result = _straight("YG DET #1 first team to score @ -170 = 0.15")
    contract = result.contract
    assert result.contract_type == "PropYN"
    assert contract.contestant == "DET"
    assert contract.prop == "FirstToScore"
    assert contract.is_yes is True
    assert contract.match.day_sequence == 1
    assert result.bet.size == pytest.approx(150.0)


@pytest.mark.parametrize(
    ("message", "period_number", "is_over", "price", "size"),
    [
        ("YG TOR F5 TT u2.5-125 = $500", 1, False, -125.0, 500.0),
        ("YG CLE F5 TT o1.5 +115=$250", 1, True, 115.0, 250.0),
    ],
)
def test_team_total_with_attached_or_trailing_price(
    message: str, period_number: int, is_over: bool, price: float, size: float
) -> None:
    result = _straight(message)
    assert result.contract_type == "TotalPointsContestant"
    assert result.contract.period.type_code == "H"
    assert result.contract.period.number == period_number
    assert result.contract.is_over is is_over
    assert result.bet.price == price
    assert result.bet.size == size


def test_lowercase_prefix_and_trailing_price() -> None:
    result = _straight("yg col +135 = $1000")
    assert result.chat_type == "fill"
    assert result.contract_type == "HandicapContestantML"
    assert result.contract.contestant == "col"
    assert result.bet.price == 135.0
    assert result.bet.size == 1000.0


def test_at_sign_carrying_size_uses_default_price() -> None:
    result = _straight("IW Lakers @ 2k")
    assert result.bet.price == -110.0
    assert result.bet.size == 2000.0


def test_keywords_set_date_and_free_bet() -> None:
    result = _straight("IW date:5/14 Lakers freebet:true @ +120", reference_date=date(2025, 5, 1))
    assert result.contract.match.date == date(2025, 5, 14)
    assert result.bet.free_bet is True


def test_fill_execution_time_defaults_to_now() -> None:
    before = datetime.now(UTC)
    result = ChatBetParser().parse("YG Lakers @ +120 = 1.0")
    assert result.bet.execution_timestamp is not None
    assert result.bet.execution_timestamp >= before


@pytest.mark.parametrize(
    ("message", "kind", "text"),
    [
        ("", "InvalidChatFormat", "Message too short"),
        ("YG", "InvalidChatFormat", "Message too short"),
        ("XX Lakers @ +120", "UnrecognizedChatPrefix", 'Unrecognized chat prefix: "XX"'),
        ("IW Lakers @ +120 @ +130", "InvalidChatFormat", "Expected format for orders"),
        ("IW Lakers @ 150", "InvalidPriceFormat", "Invalid USA price format"),
        ("IW Cubs/Cubs o8.5", "InvalidTeamFormat", "cannot be the same"),
        ("IW abc Lakers @ +120", "InvalidRotationNumber", 'Invalid rotation number: "abc"'),
    ],
)
def test_straight_errors(message: str, kind: str, text: str) -> None:
    with pytest.raises(ChatBetParseError, match=text) as exc_info:
        parse(message)
    assert exc_info.value.kind == kind
    assert exc_info.value.raw_input == message


def test_parse_many_records_failures_and_summarizes() -> None:
    parser = ChatBetParser()
    outcomes = parser.parse_many(
        [
            "IW Lakers @ +120",
            "YG LAA TT o3.5 @ -115.5",
            "IWP Lakers @ +120 & Celtics -2.5 @ -110 = 100",
            "XX nothing",
        ],
        execution_time=EXECUTED_AT,
    )
    assert [outcome.ok for outcome in outcomes] == [True, False, True, False]
    assert outcomes[1].error_kind == "MissingSizeForFill"

    summary = summarize_parse_results(outcomes)
    assert summary.total_messages == 4
    assert summary.parsed == 2
    assert summary.failed == 2
    assert summary.by_result_type == {"Straight": 1, "Parlay": 1}
    assert summary.by_contract_type == {
        "HandicapContestantML": 2,
        "HandicapContestantLine": 1,
    }
    assert summary.top_error_kinds == {"MissingSizeForFill": 1, "UnrecognizedChatPrefix": 1}
