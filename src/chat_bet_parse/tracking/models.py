"""Typed models for ticket-tracking contract leg specs."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel

from ..models import ContractType, PeriodTypeCode


class ContractLegSpec(BaseModel):
    """One contract leg shaped for the ticket ledger's leg table."""

    leg_sequence: int
    contract_type: ContractType
    event_date: date
    contestant1_raw_name: str | None = None
    contestant2_raw_name: str | None = None
    league: str | None = None
    sport: str | None = None
    day_sequence: int | None = None
    contestant_type: str | None = None
    period_type_code: PeriodTypeCode | None = None
    period_number: int | None = None
    line: float | None = None
    is_over: bool | None = None
    selected_contestant_raw_name: str | None = None
    ties_lose: bool = False
    prop: str | None = None
    prop_contestant_type: str | None = None
    is_yes: bool | None = None
    series_length: int | None = None
    write_in_description: str | None = None
    price: float | None = None


class ContractMappingOptions(BaseModel):
    """Overrides applied while mapping parse results to leg specs."""

    event_date: date | None = None
    league: str | None = None
    timezone: str = "America/New_York"
