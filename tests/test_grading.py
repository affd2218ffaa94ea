"""Tests for grading parameter mapping and the client interface."""

from __future__ import annotations

from datetime import date

import pytest

from chat_bet_parse import ChatBetParser
from chat_bet_parse.exceptions import GradingConnectionError, GradingDataError
from chat_bet_parse.grading import (
    GradeResult,
    GradingClient,
    GradingSqlParameters,
    map_parse_result_to_sql_parameters,
    validate_grading_parameters,
)
from chat_bet_parse.models import ParseResult

GAME_DAY = date(2025, 5, 14)


class _FakeGradingClient(GradingClient):
    def __init__(self, grades: dict[str, GradeResult]) -> None:
        self.grades = grades
        self.connected = True
        self.calls: list[GradingSqlParameters] = []

    def grade(self, result: ParseResult, *, match_scheduled_date: date | None = None) -> GradeResult:
        params = map_parse_result_to_sql_parameters(result, match_scheduled_date)
        validate_grading_parameters(params)
        self.calls.append(params)
        return self.grades.get(params.contract_type, "?")

    def test_connection(self) -> None:
        if not self.connected:
            raise GradingConnectionError("Grading database is not reachable")

    def is_connected(self) -> bool:
        return self.connected

    def close(self) -> None:
        self.connected = False


def _parse(message: str):
    return ChatBetParser().parse(message)


def test_total_points_parameters() -> None:
    params = map_parse_result_to_sql_parameters(
        _parse("IW Padres/Pirates 1st inning u0.5 @ +100"), GAME_DAY
    )
    assert params.match_scheduled_date == GAME_DAY
    assert params.contestant1 == "Padres"
    assert params.contestant2 == "Pirates"
    assert params.period_type_code == "I"
    assert params.period_number == 1
    assert params.line == 0.5
    assert params.is_over is False
    validate_grading_parameters(params)


def test_series_parameters_use_full_match_period() -> None:
    params = map_parse_result_to_sql_parameters(_parse("IW Guardians series @ -130"), GAME_DAY)
    assert params.period_type_code == "M"
    assert params.period_number == 0
    assert params.selected_contestant == "Guardians"
    assert params.series_length == 3


def test_writein_parameters() -> None:
    params = map_parse_result_to_sql_parameters(
        _parse("IWW 2025-05-14 Cardinals win in extra innings @ +150"), GAME_DAY
    )
    assert params.period_type_code == "FG"
    assert params.period_number == 1
    assert params.event_date == GAME_DAY
    assert params.write_in_description == "Cardinals win in extra innings"
    assert params.contestant1 is None
    validate_grading_parameters(params)


def test_individual_prop_does_not_need_contestant1() -> None:
    params = map_parse_result_to_sql_parameters(_parse("IW B. Falter Ks o1.5 @ +120"), GAME_DAY)
    assert params.contestant1 is None
    assert params.prop_contestant_type == "Individual"
    validate_grading_parameters(params)


def test_mapping_requires_scheduled_date() -> None:
    with pytest.raises(GradingDataError, match="MatchScheduledDate must be provided"):
        map_parse_result_to_sql_parameters(_parse("IW Lakers @ +120"))


def test_mapping_rejects_multileg_results() -> None:
    parlay = _parse("IWP Lakers @ +120 & Celtics @ -110")
    with pytest.raises(GradingDataError, match="straight bets only, got Parlay"):
        map_parse_result_to_sql_parameters(parlay, GAME_DAY)


@pytest.mark.parametrize(
    ("overrides", "message"),
    [
        ({"contract_type": "HandicapContestantML"}, "Contestant1 is required"),
        (
            {"contract_type": "TotalPoints", "contestant1": "Padres"},
            "TotalPoints requires Line and IsOver",
        ),
        (
            {"contract_type": "HandicapContestantLine", "contestant1": "Lakers", "selected_contestant": "Lakers"},
            "HandicapContestantLine requires SelectedContestant and Line",
        ),
        ({"contract_type": "Writein"}, "Writein contracts require EventDate and WriteInDescription"),
        ({"contract_type": "Moneyball", "contestant1": "A"}, "Unknown contract type: Moneyball"),
    ],
)
def test_validate_grading_parameters_errors(overrides: dict, message: str) -> None:
    params = GradingSqlParameters(
        match_scheduled_date=GAME_DAY, period_type_code="M", period_number=0, **overrides
    )
    with pytest.raises(GradingDataError, match=message):
        validate_grading_parameters(params)


def test_grading_client_contract() -> None:
    client = _FakeGradingClient({"HandicapContestantML": "W"})
    assert client.grade(_parse("IW Lakers @ +120"), match_scheduled_date=GAME_DAY) == "W"
    assert client.grade(_parse("IW Lakers +3.5 @ -110"), match_scheduled_date=GAME_DAY) == "?"
    assert len(client.calls) == 2

    client.test_connection()
    client.close()
    assert client.is_connected() is False
    with pytest.raises(GradingConnectionError):
        client.test_connection()


def test_grading_client_is_abstract() -> None:
    with pytest.raises(TypeError):
        GradingClient()  # type: ignore[abstract]
