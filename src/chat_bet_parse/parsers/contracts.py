"""Per-type contract parsers and the shared match-info routine."""

from __future__ import annotations

import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date

from ..exceptions import ChatBetParseError
from ..models import (
    HandicapContestantLine,
    HandicapContestantML,
    League,
    Match,
    Period,
    PropOU,
    PropYN,
    Series,
    Sport,
    TotalPoints,
    TotalPointsContestant,
    Writein,
)
from .primitives import (
    LEAGUE_SPORT,
    detect_contestant_type,
    detect_prop_type,
    infer_sport_and_league,
    normalize_league,
    parse_game_number,
    parse_line,
    parse_over_under,
    parse_period,
    parse_teams,
)

_OU_RE = re.compile(r"([ou])(\d*\.?\d+)(\s+runs)?", re.IGNORECASE)
_GAME_TOTAL_STRIP_RE = re.compile(
    r"\s*[ou]\d*\.?\d+(?:[+-]\d+(?:\.\d+)?)?(\s+runs)?", re.IGNORECASE
)
_OU_STRIP_RE = re.compile(r"\s*[ou]\d+(?:\.\d+)?(?:[+-]\d+(?:\.\d+)?)?(\s+runs)?", re.IGNORECASE)
_TT_STRIP_RE = re.compile(r"\s*tt\s*", re.IGNORECASE)
_ZERO_LINE_STRIP_RE = re.compile(r"\s*[+-]0(?:\s|$)")
_ML_TRAILING_RE = re.compile(r"\s+ml\s*$", re.IGNORECASE)
_ML_INNER_RE = re.compile(r"\s+ml\s+", re.IGNORECASE)
_TRAILING_LINE_RE = re.compile(r"^(.*?)\s*([+-]\d+(?:\.\d+)?)$")
_INDIVIDUAL_PROP_RE = re.compile(r"^([A-Z]\.\s+[A-Za-z]+)\s+(.+)$")
_PROP_YN_SUFFIXES = (
    re.compile(
        r"\s+(1st team to score|first team to score|to score first|first to score)$",
        re.IGNORECASE,
    ),
    re.compile(r"\s+(last team to score|to score last|last to score)$", re.IGNORECASE),
)
_SERIES_LENGTH_PATTERNS = (
    re.compile(r"series\/(\d+)", re.IGNORECASE),
    re.compile(r"series\s+out\s+of\s+(\d+)", re.IGNORECASE),
    re.compile(r"(\d+)\s*game\s*series", re.IGNORECASE),
    re.compile(r"(\d+)-game\s*series", re.IGNORECASE),
)
_SERIES_TEAM_PATTERNS = (
    re.compile(r"([a-zA-Z\s&.]+?)\s*\d+-game\s*series", re.IGNORECASE),
    re.compile(r"([a-zA-Z\s&.]+?)\s*series\/\d+", re.IGNORECASE),
    re.compile(r"([a-zA-Z\s&.]+?)\s*(?:(?:\d+\s*game\s*)?series|series)", re.IGNORECASE),
)
_GAME_NUMBER_SEARCH_RE = re.compile(r"\s+((?:game|gm|g)\s*\d+|#\s*\d+)\s*", re.IGNORECASE)
_PERIOD_SEARCH_PATTERNS = (
    re.compile(r"\b(\d+(?:st|nd|rd|th)?\s*(?:inning|i))\b", re.IGNORECASE),
    re.compile(r"\b(f5|f3|f7|h1|1h|h2|2h|q1|q2|q3|q4|p1|p2|p3)\b", re.IGNORECASE),
    re.compile(r"\b(\d+(?:st|nd|rd|th)?\s*(?:quarter|q))\b", re.IGNORECASE),
    re.compile(r"\b(\d+(?:st|nd|rd|th)?\s*(?:period|p))\b", re.IGNORECASE),
    re.compile(r"\b(first\s*(?:half|five|5|inning|i))\b", re.IGNORECASE),
    re.compile(r"\b(second\s*(?:half|h))\b", re.IGNORECASE),
)


@dataclass(frozen=True)
class ContractContext:
    """Message-level facts every contract parser needs."""

    raw_input: str
    rotation_number: int | None = None
    game_number: int | None = None
    explicit_league: str | None = None
    explicit_sport: str | None = None
    event_date: date | None = None

    def sport_and_league(
        self, implied_sport: Sport | None = None
    ) -> tuple[Sport | None, League | None]:
        return infer_sport_and_league(
            self.raw_input,
            rotation_number=self.rotation_number,
            explicit_league=self.explicit_league,
            explicit_sport=self.explicit_sport,
            implied_sport=implied_sport,
        )


@dataclass(frozen=True)
class MatchInfo:
    team1: str
    team2: str | None
    period: Period
    match: Match


def _missing_pattern(reason: str, ctx: ContractContext) -> ChatBetParseError:
    return ChatBetParseError(reason, kind="InvalidContractType", raw_input=ctx.raw_input)


def parse_match_info(text: str, ctx: ContractContext) -> MatchInfo:
    """Strip game number and period tokens, then split the teams."""
    working = text.strip()
    day_sequence = ctx.game_number
    if day_sequence is None:
        game = _GAME_NUMBER_SEARCH_RE.search(working)
        if game:
            day_sequence = parse_game_number(game.group(1), ctx.raw_input)
            working = working.replace(game.group(0), " ", 1).strip()

    period = Period(type_code="M", number=0)
    for pattern in _PERIOD_SEARCH_PATTERNS:
        found = pattern.search(working)
        if found:
            period = parse_period(found.group(1), ctx.raw_input)
            working = working.replace(found.group(0), " ", 1).strip()
            break

    team1, team2 = parse_teams(working, ctx.raw_input)
    match = Match(team1=team1, team2=team2, date=ctx.event_date, day_sequence=day_sequence)
    return MatchInfo(team1=team1, team2=team2, period=period, match=match)


def parse_game_total(text: str, ctx: ContractContext) -> TotalPoints:
    """Padres/Pirates 1st inning u0.5, Pirates F5 u4.5, CLE/WAS o8.5 runs."""
    found = _OU_RE.search(text)
    if not found:
        raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)
    ou = parse_over_under(found.group(1) + found.group(2), ctx.raw_input)
    remainder = _GAME_TOTAL_STRIP_RE.sub("", text, count=1).strip()
    info = parse_match_info(remainder, ctx)
    implied: Sport | None = "Baseball" if found.group(3) or info.period.type_code == "I" else None
    sport, league = ctx.sport_and_league(implied)
    return TotalPoints(
        sport=sport,
        league=league,
        match=info.match,
        period=info.period,
        line=ou.line,
        is_over=ou.is_over,
    )


def parse_team_total(text: str, ctx: ContractContext) -> TotalPointsContestant:
    """LAA TT o3.5, MIA F5 TT u1.5."""
    found = _OU_RE.search(text)
    if not found:
        raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)
    ou = parse_over_under(found.group(1) + found.group(2), ctx.raw_input)
    remainder = _OU_STRIP_RE.sub("", text, count=1)
    remainder = _TT_STRIP_RE.sub(" ", remainder, count=1).strip()
    info = parse_match_info(remainder, ctx)
    implied: Sport | None = "Baseball" if found.group(3) or info.period.type_code == "I" else None
    sport, league = ctx.sport_and_league(implied)
    return TotalPointsContestant(
        sport=sport,
        league=league,
        match=info.match,
        period=info.period,
        contestant=info.team1,
        line=ou.line,
        is_over=ou.is_over,
    )


def parse_moneyline(text: str, ctx: ContractContext) -> HandicapContestantML:
    """Athletics, COL +0, Magic ML, COL F5."""
    cleaned = _ZERO_LINE_STRIP_RE.sub(" ", text, count=1)
    cleaned = _ML_TRAILING_RE.sub("", cleaned, count=1)
    cleaned = _ML_INNER_RE.sub(" ", cleaned, count=1).strip()
    info = parse_match_info(cleaned, ctx)
    implied: Sport | None = "Baseball" if info.period.type_code == "I" else None
    sport, league = ctx.sport_and_league(implied)
    return HandicapContestantML(
        sport=sport,
        league=league,
        match=info.match,
        period=info.period,
        contestant=info.team1,
    )


def parse_spread(text: str, ctx: ContractContext) -> HandicapContestantLine:
    """Mariners -1.5, SD F5 +0.5."""
    found = _TRAILING_LINE_RE.match(text.strip())
    if not found:
        raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)
    line = parse_line(found.group(2), ctx.raw_input)
    info = parse_match_info(found.group(1).strip(), ctx)
    implied: Sport | None = "Baseball" if info.period.type_code == "I" else None
    sport, league = ctx.sport_and_league(implied)
    return HandicapContestantLine(
        sport=sport,
        league=league,
        match=info.match,
        period=info.period,
        contestant=info.team1,
        line=line,
    )


def parse_prop_ou(text: str, ctx: ContractContext) -> PropOU:
    """Player123 passing yards o250.5, B. Falter Ks o1.5."""
    found = _OU_RE.search(text)
    if not found:
        raise _missing_pattern("PropOU requires an over/under line", ctx)
    ou = parse_over_under(found.group(1) + found.group(2), ctx.raw_input)
    remainder = _OU_STRIP_RE.sub("", text, count=1).strip()

    individual = _INDIVIDUAL_PROP_RE.match(remainder)
    if individual:
        contestant = individual.group(1)
        prop_text = individual.group(2).lower()
        match = Match(date=ctx.event_date, day_sequence=ctx.game_number)
    else:
        words = remainder.split()
        if len(words) < 2:
            raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)
        contestant = words[0]
        prop_text = " ".join(words[1:]).lower()
        match = Match(team1=contestant, date=ctx.event_date, day_sequence=ctx.game_number)

    prop = detect_prop_type(prop_text)
    if prop is None or prop.category != "PropOU":
        raise _missing_pattern(f"Invalid PropOU type: {prop_text}", ctx)

    sport, league = ctx.sport_and_league("Baseball" if found.group(3) else None)
    return PropOU(
        sport=sport,
        league=league,
        match=match,
        contestant=contestant,
        contestant_type=detect_contestant_type(contestant),
        prop=prop.standard_name,
        line=ou.line,
        is_over=ou.is_over,
    )


def parse_prop_yn(text: str, ctx: ContractContext) -> PropYN:
    """CIN 1st team to score, DET #1 first team to score."""
    prop = detect_prop_type(text.lower())
    if prop is None or prop.category != "PropYN":
        raise _missing_pattern(f"Invalid PropYN type: {text}", ctx)

    team_text = text
    for pattern in _PROP_YN_SUFFIXES:
        if pattern.search(text):
            team_text = pattern.sub("", text, count=1).strip()
            break
    if not team_text:
        raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)

    info = parse_match_info(team_text, ctx)
    sport, league = ctx.sport_and_league()
    return PropYN(
        sport=sport,
        league=league,
        match=info.match,
        contestant=info.team1,
        contestant_type=detect_contestant_type(info.team1),
        prop=prop.standard_name,
        is_yes=True,
    )


def parse_series(text: str, ctx: ContractContext) -> Series:
    """Guardians series, Yankees 4 game series, Lakers 7-Game Series, Cardinals series/5."""
    length = 3
    for pattern in _SERIES_LENGTH_PATTERNS:
        found = pattern.search(text)
        if found:
            length = int(found.group(1))
            break

    team: str | None = None
    for pattern in _SERIES_TEAM_PATTERNS:
        found = pattern.search(text)
        if found:
            team = found.group(1).strip()
            break
    if not team:
        raise _missing_pattern(f'Unable to determine contract type from: "{text}"', ctx)

    sport, league = ctx.sport_and_league()
    return Series(
        sport=sport,
        league=league,
        match=Match(team1=team, date=ctx.event_date, day_sequence=ctx.game_number),
        contestant=team,
        series_length=length,
    )


def validate_writein_description(description: str, raw_input: str) -> str:
    """Trim and bound a write-in description to a single 10-255 character line."""
    trimmed = description.strip()
    if not trimmed:
        reason = "Description cannot be empty"
    elif len(trimmed) < 10:
        reason = f"Description must be at least 10 characters long (currently {len(trimmed)})"
    elif len(trimmed) > 255:
        reason = f"Description cannot exceed 255 characters (currently {len(trimmed)})"
    elif "\n" in trimmed or "\r" in trimmed:
        reason = "Description cannot contain newlines"
    else:
        return trimmed
    raise ChatBetParseError(
        f"Invalid writein description: {reason}",
        kind="InvalidWriteinDescription",
        raw_input=raw_input,
        detail=description,
    )


def parse_writein(
    event_date: date,
    description: str,
    raw_input: str,
    *,
    league: str | None = None,
) -> Writein:
    return Writein(
        event_date=event_date,
        description=validate_writein_description(description, raw_input),
        sport=LEAGUE_SPORT[league.upper()] if league else None,
        league=normalize_league(league),
    )


CONTRACT_PARSERS: dict[str, Callable[[str, ContractContext], object]] = {
    "TotalPoints": parse_game_total,
    "TotalPointsContestant": parse_team_total,
    "HandicapContestantML": parse_moneyline,
    "HandicapContestantLine": parse_spread,
    "PropOU": parse_prop_ou,
    "PropYN": parse_prop_yn,
    "Series": parse_series,
}
