"""Map parse results to ticket-tracking contract leg specs."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from zoneinfo import ZoneInfo

from ..exceptions import ContractMappingError
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
from .models import ContractLegSpec, ContractMappingOptions


def map_parse_result_to_contract_leg_specs(
    result: ParseResult,
    options: ContractMappingOptions | None = None,
) -> list[ContractLegSpec]:
    """Return one leg spec per leg; a straight bet is a single leg."""
    if isinstance(result, StraightResult):
        return [map_parse_result_to_contract_leg_spec(result, options)]
    return [
        map_parse_result_to_contract_leg_spec(
            leg,
            options,
            leg_sequence=index,
            execution_timestamp=result.bet.execution_timestamp,
        )
        for index, leg in enumerate(result.legs, start=1)
    ]


def map_parse_result_to_contract_leg_spec(
    result: StraightResult,
    options: ContractMappingOptions | None = None,
    *,
    leg_sequence: int = 1,
    execution_timestamp: datetime | None = None,
) -> ContractLegSpec:
    opts = options or ContractMappingOptions()
    contract = result.contract
    fields: dict[str, Any] = {
        "leg_sequence": leg_sequence,
        "contract_type": result.contract_type,
        "event_date": _event_date(
            result, opts, execution_timestamp or result.bet.execution_timestamp
        ),
        "league": opts.league or contract.league,
        "sport": contract.sport,
    }

    if isinstance(contract, Writein):
        fields["league"] = contract.league
        fields["write_in_description"] = contract.description
        return ContractLegSpec(**fields)

    fields.update(
        contestant1_raw_name=contract.match.team1,
        contestant2_raw_name=contract.match.team2,
        day_sequence=contract.match.day_sequence,
    )
    if not isinstance(contract, Series):
        fields.update(
            period_type_code=contract.period.type_code,
            period_number=contract.period.number,
        )

    if isinstance(contract, TotalPoints):
        fields.update(line=contract.line, is_over=contract.is_over)
    elif isinstance(contract, TotalPointsContestant):
        fields.update(
            line=contract.line,
            is_over=contract.is_over,
            selected_contestant_raw_name=contract.contestant,
            contestant_type="TeamLeague",
        )
    elif isinstance(contract, HandicapContestantML):
        fields.update(
            selected_contestant_raw_name=contract.contestant, ties_lose=contract.ties_lose
        )
    elif isinstance(contract, HandicapContestantLine):
        fields.update(selected_contestant_raw_name=contract.contestant, line=contract.line)
    elif isinstance(contract, PropOU):
        fields.update(
            selected_contestant_raw_name=contract.contestant,
            line=contract.line,
            is_over=contract.is_over,
            prop=contract.prop,
            prop_contestant_type=contract.contestant_type,
        )
    elif isinstance(contract, PropYN):
        fields.update(
            selected_contestant_raw_name=contract.contestant,
            is_yes=contract.is_yes,
            prop=contract.prop,
            prop_contestant_type=contract.contestant_type,
        )
    elif isinstance(contract, Series):
        fields.update(
            selected_contestant_raw_name=contract.contestant,
            series_length=contract.series_length,
        )
    else:
        raise ContractMappingError(
            f"Unsupported contract type: {result.contract_type}",
            contract_type=result.contract_type,
        )
    return ContractLegSpec(**fields)


def _event_date(
    result: StraightResult,
    options: ContractMappingOptions,
    execution_timestamp: datetime | None,
) -> date:
    contract = result.contract
    if isinstance(contract, Writein):
        return contract.event_date
    if options.event_date is not None:
        return options.event_date
    if contract.match.date is not None:
        return contract.match.date
    if execution_timestamp is not None:
        return execution_timestamp.astimezone(ZoneInfo(options.timezone)).date()
    return date.today()


_REQUIRED_FIELDS: dict[str, tuple[tuple[str, ...], str]] = {
    "TotalPoints": (("line", "is_over"), "TotalPoints requires Line and IsOver"),
    "HandicapContestantML": (
        ("selected_contestant_raw_name",),
        "HandicapContestantML requires SelectedContestant_RawName",
    ),
    "HandicapContestantLine": (
        ("selected_contestant_raw_name", "line"),
        "HandicapContestantLine requires SelectedContestant_RawName and Line",
    ),
    "PropOU": (
        ("selected_contestant_raw_name", "line", "is_over", "prop"),
        "PropOU requires SelectedContestant_RawName, Line, IsOver, and Prop",
    ),
    "PropYN": (
        ("selected_contestant_raw_name", "is_yes", "prop"),
        "PropYN requires SelectedContestant_RawName, IsYes, and Prop",
    ),
    "Series": (
        ("selected_contestant_raw_name", "series_length"),
        "Series requires SelectedContestant_RawName and SeriesLength",
    ),
    "Writein": (("write_in_description",), "Writein contracts require WriteInDescription"),
}


def validate_contract_leg_spec(spec: ContractLegSpec) -> None:
    """Raise ContractMappingError when a leg spec misses fields its contract type needs."""
    if spec.leg_sequence < 1:
        raise ContractMappingError("LegSequence must be positive")

    if spec.contract_type == "TotalPointsContestant":
        if spec.line is None or spec.is_over is None:
            raise ContractMappingError(
                "TotalPointsContestant requires Line and IsOver",
                contract_type=spec.contract_type,
            )
        if not spec.selected_contestant_raw_name:
            raise ContractMappingError(
                "TotalPointsContestant requires SelectedContestant_RawName",
                contract_type=spec.contract_type,
            )
        return

    required, message = _REQUIRED_FIELDS[spec.contract_type]
    for name in required:
        value = getattr(spec, name)
        if value is None or value == "":
            raise ContractMappingError(message, contract_type=spec.contract_type)
