"""Shared numeric and text primitives used by every contract parser."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Literal

from ..exceptions import ChatBetParseError
from ..models import ContestantType, League, Period, Sport

SizeInterpretation = Literal["unit", "decimal_thousands"]
PropCategory = Literal["PropOU", "PropYN"]

KNOWN_LEAGUES: frozenset[str] = frozenset(
    {
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
    }
)
KNOWN_SPORTS: frozenset[str] = frozenset(
    {
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
    }
)
LEAGUE_SPORT: dict[str, Sport] = {
    "MLB": "Baseball",
    "NBA": "Basketball",
    "WNBA": "Basketball",
    "CBK": "Basketball",
    "CBB": "Basketball",
    "NFL": "Football",
    "CFB": "Football",
    "CFL": "Football",
    "UFL": "Football",
    "FCS": "Football",
    "PGA": "Golf",
    "LPGA": "Golf",
    "NHL": "Hockey",
    "UFC": "MMA",
    "ATP": "Tennis",
    "WTA": "Tennis",
}
LEAGUE_ALIASES: dict[str, League] = {"FCS": "CFB", "CBB": "CBK"}

_PRICE_RE = re.compile(r"^([+-])(\d+(?:\.\d+)?)$")
_NUMBER_RE = re.compile(r"^\d+(?:\.\d+)?$|^\.\d+$")
_SIGNED_NUMBER_RE = re.compile(r"^[+-]?(?:\d+(?:\.\d+)?|\.\d+)$")
_GROUPED_RE = re.compile(r"^\$?\d{1,3}(?:,\d{3})+(?:\.\d+)?k?$", re.IGNORECASE)
_GAME_NUMBER_RE = re.compile(r"^(?:(?:game|gm|g)\s*(\d+)|#\s*(\d+))$")
_QUARTER_RE = re.compile(r"^(?:(\d+)(?:st|nd|rd|th)?\s*quarter?|q(\d+)|(\d+)q)$")
_INNING_RE = re.compile(r"^(?:(\d+)(?:st|nd|rd|th)?\s*inning?|i(\d+)|(\d+)i)$")
_HOCKEY_PERIOD_RE = re.compile(r"^(?:(\d+)(?:st|nd|rd|th)?\s*period?|p(\d+)|(\d+)p)$")
_TEAM_CHARS_RE = re.compile(r"^[a-zA-Z0-9\s&\-.']+$")
_INDIVIDUAL_RE = re.compile(r"^[A-Z]\.\s+[A-Za-z]+")
_OVER_UNDER_RE = re.compile(r"^([ou])(.+)$")
_ATTACHED_PRICE_RE = re.compile(r"^(\d+(?:\.\d+)?)([+-]\d+(?:\.\d+)?)$")

_FIRST_HALF = {
    "f5",
    "h1",
    "1h",
    "first half",
    "1st half",
    "first h",
    "1st h",
    "first five",
    "1st five",
    "first 5",
    "1st 5",
}
_SECOND_HALF = {"h2", "2h", "second half", "2nd half", "second h", "2nd h"}

_SIZE_HINTS = {
    "dollar": "positive dollar amount like $100 or $2.50",
    "k_notation": "positive number with k like 4k or 2.5k",
    "decimal_thousands": "positive number like 100 (=$100) or 2.5 (=$2500)",
    "unit": "positive decimal number like 2.0 or 0.50",
}


@dataclass(frozen=True, slots=True)
class PropTypeInfo:
    """Canonical prop name and whether it takes a line."""

    standard_name: str
    category: PropCategory


PROP_TYPES: dict[str, PropTypeInfo] = {
    "passing yards": PropTypeInfo("PassingYards", "PropOU"),
    "passingyards": PropTypeInfo("PassingYards", "PropOU"),
    "rbi": PropTypeInfo("RBI", "PropOU"),
    "rbis": PropTypeInfo("RBI", "PropOU"),
    "rebounds": PropTypeInfo("Rebounds", "PropOU"),
    "rebs": PropTypeInfo("Rebounds", "PropOU"),
    "receiving yards": PropTypeInfo("ReceivingYards", "PropOU"),
    "receivingyards": PropTypeInfo("ReceivingYards", "PropOU"),
    "ks": PropTypeInfo("Ks", "PropOU"),
    "strikeouts": PropTypeInfo("Ks", "PropOU"),
    "first team to score": PropTypeInfo("FirstToScore", "PropYN"),
    "1st team to score": PropTypeInfo("FirstToScore", "PropYN"),
    "first to score": PropTypeInfo("FirstToScore", "PropYN"),
    "to score first": PropTypeInfo("FirstToScore", "PropYN"),
    "last team to score": PropTypeInfo("LastToScore", "PropYN"),
    "last to score": PropTypeInfo("LastToScore", "PropYN"),
    "to score last": PropTypeInfo("LastToScore", "PropYN"),
}

# Longest phrase first so "first team to score" wins over "first to score".
_PROP_PATTERNS: tuple[tuple[re.Pattern[str], PropTypeInfo], ...] = tuple(
    (re.compile(r"\b" + r"\s+".join(map(re.escape, phrase.split())) + r"\b"), info)
    for phrase, info in sorted(PROP_TYPES.items(), key=lambda item: -len(item[0]))
)


def parse_price(price_str: str, raw_input: str) -> float:
    """Parse American odds: +150, -110, -115.5, ev, even."""
    cleaned = price_str.strip()
    if cleaned.lower() in {"ev", "even"}:
        return 100.0
    match = _PRICE_RE.match(cleaned)
    if not match:
        raise ChatBetParseError(
            f'Invalid USA price format: "{price_str}". '
            "Expected format: +150, -110, -115.5, ev, or even",
            kind="InvalidPriceFormat",
            raw_input=raw_input,
            detail=price_str,
        )
    value = float(match.group(2))
    return value if match.group(1) == "+" else -value


def _size_error(size_str: str, raw_input: str, hint_key: str) -> ChatBetParseError:
    return ChatBetParseError(
        f'Invalid size format: "{size_str}". Expected: {_SIZE_HINTS[hint_key]}',
        kind="InvalidSizeFormat",
        raw_input=raw_input,
        detail=size_str,
    )


def _thousands(value: float) -> float:
    return round(value * 1000, 6)


def parse_size(size_str: str, raw_input: str, interpretation: SizeInterpretation) -> float:
    """Parse a stake in dollar, k-notation, grouped or plain form."""
    cleaned = size_str.strip()
    if "," in cleaned:
        if not _GROUPED_RE.match(cleaned):
            hint = "dollar" if cleaned.startswith("$") else interpretation
            raise _size_error(size_str, raw_input, hint)
        cleaned = cleaned.replace(",", "")

    if cleaned.startswith("$"):
        body = cleaned[1:]
        multiplier = False
        if body.lower().endswith("k"):
            body = body[:-1]
            multiplier = True
        if not _NUMBER_RE.match(body):
            raise _size_error(size_str, raw_input, "dollar")
        value = float(body)
        return _thousands(value) if multiplier else value

    if cleaned.lower().endswith("k"):
        body = cleaned[:-1]
        if not _NUMBER_RE.match(body):
            raise _size_error(size_str, raw_input, "k_notation")
        return _thousands(float(body))

    if not _NUMBER_RE.match(cleaned):
        raise _size_error(size_str, raw_input, interpretation)
    value = float(cleaned)
    if interpretation == "decimal_thousands" and "." in cleaned:
        return _thousands(value)
    return value


def parse_order_size(size_str: str, raw_input: str) -> float:
    """Orders take sizes literally: 2.5 means 2.5 units."""
    return parse_size(size_str, raw_input, "unit")


def parse_fill_size(size_str: str, raw_input: str) -> float:
    """Fills read decimals as thousands: 2.5 means $2500."""
    return parse_size(size_str, raw_input, "decimal_thousands")


def _format_number(value: float) -> str:
    return f"{value:g}"


def parse_line(line_str: str, raw_input: str) -> float:
    """Parse a betting line, which must be a multiple of 0.5."""
    cleaned = line_str.strip()
    value = float(cleaned) if _SIGNED_NUMBER_RE.match(cleaned) else None
    if value is None or (value * 2) % 1 != 0:
        raise ChatBetParseError(
            f"Invalid line value: {_format_number(value) if value is not None else line_str}. "
            "Line must be divisible by 0.5",
            kind="InvalidLineValue",
            raw_input=raw_input,
            detail=line_str,
        )
    return value


def _ranged_number(match: re.Match[str] | None) -> int | None:
    if not match:
        return None
    return int(next(group for group in match.groups() if group))


def parse_period(period_str: str, raw_input: str) -> Period:
    """Parse a period token into its type code and number."""
    cleaned = period_str.strip().lower()
    if not cleaned or cleaned in {"fg", "full game"}:
        return Period(type_code="M", number=0)
    if cleaned in _FIRST_HALF:
        return Period(type_code="H", number=1)
    if cleaned == "f3":
        return Period(type_code="H", number=13)
    if cleaned == "f7":
        return Period(type_code="H", number=17)
    if cleaned in _SECOND_HALF:
        return Period(type_code="H", number=2)

    quarter = _ranged_number(_QUARTER_RE.match(cleaned))
    if quarter is not None and 1 <= quarter <= 4:
        return Period(type_code="Q", number=quarter)
    inning = _ranged_number(_INNING_RE.match(cleaned))
    if inning is not None and 1 <= inning <= 15:
        return Period(type_code="I", number=inning)
    hockey = _ranged_number(_HOCKEY_PERIOD_RE.match(cleaned))
    if hockey is not None and 1 <= hockey <= 4:
        return Period(type_code="P", number=hockey)

    raise ChatBetParseError(
        f'Invalid period format: "{period_str}". '
        "Expected formats: 1st inning, F5, 1H, Q1, etc",
        kind="InvalidPeriodFormat",
        raw_input=raw_input,
        detail=period_str,
    )


def parse_game_number(game_str: str, raw_input: str) -> int:
    """Parse G2, GM1, game 3 or #2 into a day sequence between 1 and 10."""
    match = _GAME_NUMBER_RE.match(game_str.strip().lower())
    number = _ranged_number(match)
    if number is None or not 1 <= number <= 10:
        raise ChatBetParseError(
            f'Invalid game number format: "{game_str}". Expected formats: G2, GM1, #2, etc',
            kind="InvalidGameNumber",
            raw_input=raw_input,
            detail=game_str,
        )
    return number


def parse_rotation_number(rotation_str: str, raw_input: str) -> int:
    cleaned = rotation_str.strip()
    if not cleaned.isdigit() or not 1 <= int(cleaned) <= 9999:
        raise ChatBetParseError(
            f'Invalid rotation number: "{rotation_str}". Must be a positive integer',
            kind="InvalidRotationNumber",
            raw_input=raw_input,
            detail=rotation_str,
        )
    return int(cleaned)


def _team_error(team_str: str, reason: str, raw_input: str) -> ChatBetParseError:
    return ChatBetParseError(
        f'Invalid team format: "{team_str}". {reason}',
        kind="InvalidTeamFormat",
        raw_input=raw_input,
        detail=reason,
    )


def parse_team(team_str: str, raw_input: str) -> str:
    """Trim and validate a single team or contestant name."""
    cleaned = team_str.strip()
    if not cleaned:
        raise _team_error(team_str, "Team name cannot be empty", raw_input)
    if not _TEAM_CHARS_RE.match(cleaned):
        raise _team_error(team_str, "Team name contains invalid characters", raw_input)
    if len(cleaned) > 50:
        raise _team_error(team_str, "Team name too long (max 50 characters)", raw_input)
    return cleaned


def parse_teams(teams_str: str, raw_input: str) -> tuple[str, str | None]:
    """Split "Team1/Team2" into validated names; Team2 is optional."""
    parts = teams_str.split("/")
    if len(parts) == 1:
        return parse_team(parts[0], raw_input), None
    if len(parts) == 2:
        team1 = parse_team(parts[0], raw_input)
        team2 = parse_team(parts[1], raw_input)
        if team1 == team2:
            raise _team_error(
                teams_str, f'Team1 and Team2 cannot be the same: "{team1}"', raw_input
            )
        return team1, team2
    raise _team_error(teams_str, 'Too many "/" separators', raw_input)


def detect_contestant_type(contestant: str) -> ContestantType | None:
    """Names like "B. Falter" are individuals; everything else is left unset."""
    if _INDIVIDUAL_RE.match(contestant):
        return "Individual"
    return None


@dataclass(frozen=True, slots=True)
class OverUnder:
    is_over: bool
    line: float
    attached_price: float | None = None


def parse_over_under(ou_str: str, raw_input: str) -> OverUnder:
    """Parse "o4.5" or "u2.5-125" (line with an attached price)."""
    match = _OVER_UNDER_RE.match(ou_str.strip().lower())
    if not match:
        raise ChatBetParseError(
            f"Invalid line value: {ou_str}. Line must be divisible by 0.5",
            kind="InvalidLineValue",
            raw_input=raw_input,
            detail=ou_str,
        )
    is_over = match.group(1) == "o"
    remainder = match.group(2)
    attached = _ATTACHED_PRICE_RE.match(remainder)
    if attached:
        return OverUnder(
            is_over=is_over,
            line=parse_line(attached.group(1), raw_input),
            attached_price=parse_price(attached.group(2), raw_input),
        )
    return OverUnder(is_over=is_over, line=parse_line(remainder, raw_input))


def normalize_league(league: str | None) -> League | None:
    if league is None:
        return None
    upper = league.upper()
    return LEAGUE_ALIASES.get(upper, upper)  # type: ignore[return-value]


def infer_sport_and_league(
    raw_input: str,
    *,
    rotation_number: int | None = None,
    explicit_league: str | None = None,
    explicit_sport: str | None = None,
    implied_sport: Sport | None = None,
) -> tuple[Sport | None, League | None]:
    """Resolve sport and league from explicit tokens, text hints and rotation ranges."""
    league = explicit_league.upper() if explicit_league else None
    sport = explicit_sport
    if league and sport and LEAGUE_SPORT[league] != sport:
        raise ChatBetParseError(
            f"Conflicting sport and league: league {league} is {LEAGUE_SPORT[league]}, not {sport}",
            kind="ConflictingSportLeague",
            raw_input=raw_input,
        )
    if league and not sport:
        sport = LEAGUE_SPORT[league]
    if not sport and implied_sport:
        sport = implied_sport
    if not sport and rotation_number is not None:
        sport = sport_for_rotation(rotation_number)
    return sport, normalize_league(league)  # type: ignore[return-value]


def sport_for_rotation(rotation_number: int) -> Sport | None:
    if 100 <= rotation_number < 499:
        return "Football"
    if 500 <= rotation_number < 800:
        return "Basketball"
    if 800 <= rotation_number < 900 or 9900 <= rotation_number < 10000:
        return "Baseball"
    return None


def detect_prop_type(prop_text: str) -> PropTypeInfo | None:
    cleaned = prop_text.strip().lower()
    for pattern, info in _PROP_PATTERNS:
        if pattern.search(cleaned):
            return info
    return None


def validate_prop_format(prop_text: str, has_line: bool, raw_input: str) -> PropTypeInfo:
    """Check that over/under props carry a line and yes/no props do not."""
    info = detect_prop_type(prop_text)
    if info is None:
        reason = f"Unsupported prop type: {prop_text}"
    elif info.category == "PropOU" and not has_line:
        reason = f'{info.standard_name} props require an over/under line (e.g., "o12.5")'
    elif info.category == "PropYN" and has_line:
        reason = f"{info.standard_name} props cannot have a line - they are yes/no bets only"
    else:
        return info
    raise ChatBetParseError(reason, kind="InvalidContractType", raw_input=raw_input)
