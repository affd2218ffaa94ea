"""Tests for mapping parse results to ticket-tracking leg specs."""

from __future__ import annotations

from datetime import UTC, date, datetime

import pytest

from chat_bet_parse import ChatBetParser
from chat_bet_parse.exceptions import ContractMappingError
from chat_bet_parse.tracking import (
    ContractLegSpec,
    ContractMappingOptions,
    map_parse_result_to_contract_leg_spec,
    map_parse_result_to_contract_leg_specs,
    validate_contract_leg_spec,
)

# 10pm Eastern on May 14th.
LATE_EVENING = datetime(2025, 5, 15, 2, 0, tzinfo=UTC)


def _parse(message: str):
    return ChatBetParser().parse(message, execution_time=LATE_EVENING)


def test_team_total_maps_with_eastern_execution_date() -> None:
    spec = map_parse_result_to_contract_leg_spec(_parse("YG TOR F5 TT u2.5-125 = $500"))
    assert spec.leg_sequence == 1
    assert spec.contract_type == "TotalPointsContestant"
    assert spec.event_date == date(2025, 5, 14)
    assert spec.contestant1_raw_name == "TOR"
    assert spec.selected_contestant_raw_name == "TOR"
    assert spec.contestant_type == "TeamLeague"
    assert spec.period_type_code == "H"
    assert spec.period_number == 1
    assert spec.line == 2.5
    assert spec.is_over is False
    assert spec.price is None
    validate_contract_leg_spec(spec)


def test_options_override_event_date_and_league() -> None:
    options = ContractMappingOptions(event_date=date(2025, 6, 1), league="NBA")
    spec = map_parse_result_to_contract_leg_spec(_parse("YG Lakers +3.5 @ -110 = 1.0"), options)
    assert spec.event_date == date(2025, 6, 1)
    assert spec.league == "NBA"
    assert spec.selected_contestant_raw_name == "Lakers"
    assert spec.line == 3.5


def test_match_date_beats_execution_time() -> None:
    result = _parse("YG 2025-05-20 Padres/Pirates o8.5 runs = 1.0")
    spec = map_parse_result_to_contract_leg_spec(result)
    assert spec.event_date == date(2025, 5, 20)
    assert spec.contestant2_raw_name == "Pirates"
    assert spec.sport == "Baseball"


def test_series_has_no_period() -> None:
    spec = map_parse_result_to_contract_leg_spec(_parse("YG 856 Red Sox series out of 4 -120 = 2.0"))
    assert spec.contract_type == "Series"
    assert spec.period_type_code is None
    assert spec.period_number is None
    assert spec.series_length == 4
    validate_contract_leg_spec(spec)


def test_writein_maps_description_and_own_date() -> None:
    spec = map_parse_result_to_contract_leg_spec(
        _parse("YGW MLB 2025-05-20 Cardinals win in extra innings @ +150 = 1.0")
    )
    assert spec.event_date == date(2025, 5, 20)
    assert spec.write_in_description == "Cardinals win in extra innings"
    assert spec.league == "MLB"
    assert spec.contestant1_raw_name is None
    validate_contract_leg_spec(spec)


def test_parlay_maps_one_spec_per_leg() -> None:
    result = _parse("YGP Lakers @ +120 & Celtics -2.5 @ -110 = 1.0")
    specs = map_parse_result_to_contract_leg_specs(result)
    assert [spec.leg_sequence for spec in specs] == [1, 2]
    assert [spec.contract_type for spec in specs] == [
        "HandicapContestantML",
        "HandicapContestantLine",
    ]
    assert all(spec.event_date == date(2025, 5, 14) for spec in specs)


def test_straight_maps_to_single_spec_list() -> None:
    specs = map_parse_result_to_contract_leg_specs(_parse("YG DET #1 first team to score @ -170 = 0.15"))
    assert len(specs) == 1
    assert specs[0].prop == "FirstToScore"
    assert specs[0].is_yes is True
    assert specs[0].day_sequence == 1


@pytest.mark.parametrize(
    ("spec", "message"),
    [
        (
            ContractLegSpec(
                leg_sequence=0, contract_type="HandicapContestantML", event_date=date(2025, 5, 14)
            ),
            "LegSequence must be positive",
        ),
        (
            ContractLegSpec(
                leg_sequence=1,
                contract_type="TotalPointsContestant",
                event_date=date(2025, 5, 14),
                line=2.5,
                is_over=True,
            ),
            "TotalPointsContestant requires SelectedContestant_RawName",
        ),
        (
            ContractLegSpec(leg_sequence=1, contract_type="TotalPoints", event_date=date(2025, 5, 14)),
            "TotalPoints requires Line and IsOver",
        ),
        (
            ContractLegSpec(leg_sequence=1, contract_type="Writein", event_date=date(2025, 5, 14)),
            "Writein contracts require WriteInDescription",
        ),
    ],
)
def test_validate_contract_leg_spec_errors(spec: ContractLegSpec, message: str) -> None:
    with pytest.raises(ContractMappingError, match=message) as exc_info:
        validate_contract_leg_spec(spec)
    if spec.leg_sequence > 0:
        assert exc_info.value.contract_type == spec.contract_type
