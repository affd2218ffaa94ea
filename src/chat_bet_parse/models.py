"""Typed models for parsed chat bets, contracts and multi-leg results."""

from __future__ import annotations

from datetime import date, datetime
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

ChatType = Literal["order", "fill"]
Sport = Literal[
    "Baseball",
    "Basketball",
    "Boxing",
    "Football",
    "Golf",
    "Hockey",
    "MMA",
    "Motor",
    "Politics",
    "Soccer",
    "Tennis",
]
League = Literal[
    "MLB",
    "NBA",
    "WNBA",
    "CBK",
    "CBB",
    "NFL",
    "CFB",
    "CFL",
    "UFL",
    "FCS",
    "NHL",
    "PGA",
    "LPGA",
    "UFC",
    "ATP",
    "WTA",
]
PeriodTypeCode = Literal["M", "H", "Q", "I", "P"]
ContestantType = Literal["Individual", "TeamAdHoc", "TeamLeague"]
ContractType = Literal[
    "TotalPoints",
    "TotalPointsContestant",
    "HandicapContestantML",
    "HandicapContestantLine",
    "PropOU",
    "PropYN",
    "Series",
    "Writein",
]
RiskType = Literal["perSelection", "total"]
EventDate = date


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


class Period(_Frozen):
    """Game segment a contract settles on."""

    type_code: PeriodTypeCode = "M"
    number: int = Field(default=0, ge=0)


FULL_GAME = Period(type_code="M", number=0)


class Match(_Frozen):
    """Contestants and scheduling hints for a single game."""

    team1: str | None = None
    team2: str | None = None
    date: EventDate | None = None
    day_sequence: int | None = Field(default=None, ge=1, le=10)

    @model_validator(mode="after")
    def validate_distinct_teams(self) -> Match:
        if self.team1 is not None and self.team2 is not None and self.team1 == self.team2:
            raise ValueError("team1 and team2 cannot be the same.")
        return self


def _validate_half_point(value: float) -> float:
    if (value * 2) % 1 != 0:
        raise ValueError("line must be divisible by 0.5.")
    return value


class _ContractBase(_Frozen):
    sport: Sport | None = None
    league: League | None = None


class _MatchContract(_ContractBase):
    match: Match
    period: Period = FULL_GAME

    @field_validator("line", check_fields=False)
    @classmethod
    def validate_line(cls, value: float) -> float:
        return _validate_half_point(value)


class TotalPoints(_MatchContract):
    """Game total over/under."""

    contract_type: Literal["TotalPoints"] = "TotalPoints"
    line: float
    is_over: bool


class TotalPointsContestant(_MatchContract):
    """Team total over/under for a single contestant."""

    contract_type: Literal["TotalPointsContestant"] = "TotalPointsContestant"
    contestant: str
    line: float
    is_over: bool


class HandicapContestantML(_MatchContract):
    """Moneyline on a contestant."""

    contract_type: Literal["HandicapContestantML"] = "HandicapContestantML"
    contestant: str
    ties_lose: bool = False


class HandicapContestantLine(_MatchContract):
    """Point spread on a contestant."""

    contract_type: Literal["HandicapContestantLine"] = "HandicapContestantLine"
    contestant: str
    line: float


class PropOU(_MatchContract):
    """Over/under proposition on a player or team statistic."""

    contract_type: Literal["PropOU"] = "PropOU"
    contestant: str
    contestant_type: ContestantType | None = None
    prop: str
    line: float
    is_over: bool


class PropYN(_MatchContract):
    """Yes/no proposition such as first team to score."""

    contract_type: Literal["PropYN"] = "PropYN"
    contestant: str
    contestant_type: ContestantType | None = None
    prop: str
    is_yes: bool = True


class Series(_ContractBase):
    """Series winner wager; series carry no period."""

    contract_type: Literal["Series"] = "Series"
    match: Match
    contestant: str
    series_length: int = Field(default=3, ge=1)


class Writein(_ContractBase):
    """Free-form custom event wager."""

    contract_type: Literal["Writein"] = "Writein"
    event_date: date
    description: str = Field(min_length=10, max_length=255)

    @field_validator("description")
    @classmethod
    def validate_single_line(cls, value: str) -> str:
        if "\n" in value or "\r" in value:
            raise ValueError("description cannot contain newlines.")
        return value


Contract = Annotated[
    TotalPoints
    | TotalPointsContestant
    | HandicapContestantML
    | HandicapContestantLine
    | PropOU
    | PropYN
    | Series
    | Writein,
    Field(discriminator="contract_type"),
]


class Bet(_Frozen):
    """Price and stake for a straight bet."""

    price: float
    size: float | None = Field(default=None, ge=0)
    execution_timestamp: datetime | None = None
    free_bet: bool = False


class ParlayBet(_Frozen):
    """Stake and payout for a parlay or round robin."""

    risk: float | None = Field(default=None, ge=0)
    to_win: float | None = None
    execution_timestamp: datetime | None = None
    free_bet: bool = False


class StraightResult(_Frozen):
    """Parsed single-contract order or fill."""

    result_type: Literal["Straight"] = "Straight"
    chat_type: ChatType
    contract_type: ContractType
    contract: Contract
    rotation_number: int | None = Field(default=None, ge=1, le=9999)
    bet: Bet

    @property
    def is_fill(self) -> bool:
        return self.chat_type == "fill"


class ParlayResult(_Frozen):
    """Parsed parlay: every leg must win."""

    result_type: Literal["Parlay"] = "Parlay"
    chat_type: ChatType
    legs: tuple[StraightResult, ...] = Field(min_length=2)
    bet: ParlayBet
    use_fair: bool = True
    pushes_lose: bool | None = None


class RoundRobinResult(_Frozen):
    """Parsed round robin: every R-leg parlay drawn from N legs."""

    result_type: Literal["RoundRobin"] = "RoundRobin"
    chat_type: ChatType
    legs: tuple[StraightResult, ...] = Field(min_length=3)
    bet: ParlayBet
    use_fair: bool = True
    pushes_lose: bool | None = None
    parlay_size: int = Field(ge=2)
    total_legs: int = Field(ge=3)
    is_at_most: bool = False
    risk_type: RiskType = "perSelection"

    @model_validator(mode="after")
    def validate_leg_counts(self) -> RoundRobinResult:
        if self.parlay_size >= self.total_legs:
            raise ValueError("parlay_size must be less than total_legs.")
        if len(self.legs) != self.total_legs:
            raise ValueError("legs must match total_legs.")
        return self


ParseResult = Annotated[
    StraightResult | ParlayResult | RoundRobinResult,
    Field(discriminator="result_type"),
]


class ParseOutcome(BaseModel):
    """One message from a batch run with either its result or its failure."""

    message: str
    result: ParseResult | None = None
    error_kind: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.result is not None


class ParseRunSummary(BaseModel):
    """Aggregate summary for a batch parse run."""

    total_messages: int
    parsed: int
    failed: int
    by_result_type: dict[str, int] = Field(default_factory=dict)
    by_contract_type: dict[str, int] = Field(default_factory=dict)
    top_error_kinds: dict[str, int] = Field(default_factory=dict)
