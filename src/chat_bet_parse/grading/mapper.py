"""Map parse results to grading function parameters."""

from __future__ import annotations

from datetime import date
from typing import Any

from ..exceptions import GradingDataError
from ..models import (
    HandicapContestantLine,
    HandicapContestantML,
    ParseResult,
    PropOU,
    PropYN,
    Series,
    StraightResult,
    TotalPoints,
    TotalPointsContestant,
    Writein,
)
from .models import GradingSqlParameters


def map_parse_result_to_sql_parameters(
    result: ParseResult,
    match_scheduled_date: date | None = None,
) -> GradingSqlParameters:
    """Build grading parameters for a straight result on an explicit schedule date."""
    if match_scheduled_date is None:
        raise GradingDataError("MatchScheduledDate must be provided in options when grading")
    if not isinstance(result, StraightResult):
        raise GradingDataError(f"Grading supports straight bets only, got {result.result_type}")

    contract = result.contract
    params: dict[str, Any] = {
        "match_scheduled_date": match_scheduled_date,
        "contract_type": result.contract_type,
    }

    if isinstance(contract, Writein):
        params.update(
            period_type_code="FG",
            period_number=1,
            event_date=contract.event_date,
            write_in_description=contract.description,
        )
        return GradingSqlParameters(**params)

    params.update(
        contestant1=contract.match.team1,
        contestant2=contract.match.team2,
        day_sequence=contract.match.day_sequence,
    )
    if isinstance(contract, Series):
        params.update(
            period_type_code="M",
            period_number=0,
            selected_contestant=contract.contestant,
            series_length=contract.series_length,
        )
        return GradingSqlParameters(**params)

    params.update(
        period_type_code=contract.period.type_code,
        period_number=contract.period.number,
    )
    if isinstance(contract, TotalPoints):
        params.update(line=contract.line, is_over=contract.is_over)
    elif isinstance(contract, TotalPointsContestant):
        params.update(
            line=contract.line, is_over=contract.is_over, selected_contestant=contract.contestant
        )
    elif isinstance(contract, HandicapContestantML):
        params.update(selected_contestant=contract.contestant, ties_lose=contract.ties_lose)
    elif isinstance(contract, HandicapContestantLine):
        params.update(selected_contestant=contract.contestant, line=contract.line)
    elif isinstance(contract, PropOU):
        params.update(
            selected_contestant=contract.contestant,
            line=contract.line,
            is_over=contract.is_over,
            prop=contract.prop,
            prop_contestant_type=contract.contestant_type,
        )
    elif isinstance(contract, PropYN):
        params.update(
            selected_contestant=contract.contestant,
            is_yes=contract.is_yes,
            prop=contract.prop,
            prop_contestant_type=contract.contestant_type,
        )
    else:
        raise GradingDataError(f"Unsupported contract type: {result.contract_type}")
    return GradingSqlParameters(**params)


def validate_grading_parameters(params: GradingSqlParameters) -> None:
    """Raise GradingDataError when parameters are insufficient for grading."""
    contract_type = params.contract_type
    if contract_type == "Writein":
        if params.event_date is None or not params.write_in_description:
            raise GradingDataError("Writein contracts require EventDate and WriteInDescription")
        return

    individual_prop = contract_type in {"PropOU", "PropYN"} and (
        params.prop_contestant_type == "Individual"
    )
    if not params.contestant1 and not individual_prop:
        raise GradingDataError("Contestant1 is required")

    if contract_type in {"TotalPoints", "TotalPointsContestant"}:
        if params.line is None or params.is_over is None:
            raise GradingDataError(f"{contract_type} requires Line and IsOver")
        if contract_type == "TotalPointsContestant" and not params.selected_contestant:
            raise GradingDataError("TotalPointsContestant requires SelectedContestant")
    elif contract_type == "HandicapContestantML":
        if not params.selected_contestant:
            raise GradingDataError("HandicapContestantML requires SelectedContestant")
    elif contract_type == "HandicapContestantLine":
        if not params.selected_contestant or params.line is None:
            raise GradingDataError("HandicapContestantLine requires SelectedContestant and Line")
    elif contract_type == "PropOU":
        if (
            not params.selected_contestant
            or params.line is None
            or params.is_over is None
            or not params.prop
        ):
            raise GradingDataError("PropOU requires SelectedContestant, Line, IsOver, and Prop")
    elif contract_type == "PropYN":
        if not params.selected_contestant or params.is_yes is None or not params.prop:
            raise GradingDataError("PropYN requires SelectedContestant, IsYes, and Prop")
    elif contract_type == "Series":
        if not params.selected_contestant or not params.series_length:
            raise GradingDataError("Series requires SelectedContestant and SeriesLength")
    else:
        raise GradingDataError(f"Unknown contract type: {contract_type}")
