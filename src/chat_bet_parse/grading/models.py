"""Typed models for the grading boundary."""

from __future__ import annotations

from datetime import date
from typing import Literal

from pydantic import BaseModel

GradeResult = Literal["W", "L", "P", "?"]


class GradingSqlParameters(BaseModel):
    """Arguments for the universal grading function, one per contract."""

    match_scheduled_date: date
    contestant1: str | None = None
    contestant2: str | None = None
    day_sequence: int | None = None
    match_contestant_type: str | None = None
    period_type_code: str
    period_number: int
    contract_type: str
    line: float | None = None
    is_over: bool | None = None
    selected_contestant: str | None = None
    ties_lose: bool = False
    prop: str | None = None
    prop_contestant_type: str | None = None
    is_yes: bool | None = None
    series_length: int | None = None
    event_date: date | None = None
    write_in_description: str | None = None
