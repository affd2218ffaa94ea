"""Message preprocessing and token extraction for straight bets and write-ins."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import date

from ..exceptions import ChatBetParseError
from ..models import ChatType
from .dates import DATE_LIKE_RE, UNPARSEABLE_DATE_REASON, parse_event_date
from .keywords import STRAIGHT_KEYWORDS, extract_keywords
from .primitives import (
    KNOWN_LEAGUES,
    KNOWN_SPORTS,
    parse_fill_size,
    parse_game_number,
    parse_order_size,
    parse_price,
    parse_rotation_number,
)

DEFAULT_PRICE = -110.0
MISSING_SIZE_REASON = "Fill (YG/YGP/YGRR) messages require a size"
FILL_FORMAT_REASON = (
    'Expected format for fills is: "YG" [rotation_number] contract ["@" usa_price] "=" fill_size'
)
ORDER_FORMAT_REASON = (
    'Expected format for orders is: "IW" [rotation_number] contract '
    '["@" usa_price] ["=" unit_size]'
)

_EQUALS_PATTERNS = (
    re.compile(r"([^=\s])=([^=\s])"),
    re.compile(r"([^=\s])=(\s)"),
    re.compile(r"(\s)=([^=\s])"),
)
_WRITEIN_SHORTHAND_RE = re.compile(r"^(IW|YG)W\s", re.IGNORECASE)
_SIGNED_NUMBER_TOKEN_RE = re.compile(r"^[+-]\d+(?:\.\d+)?$")
_LEADING_GAME_RE = re.compile(r"^(g(?:m)?\s*\d+|#\s*\d+)\s+(.+)$", re.IGNORECASE)
_ATTACHED_PRICE_RE = re.compile(r"([ou])(\d+(?:\.\d+)?)([+-]\d+(?:\.\d+)?)", re.IGNORECASE)
_LEADING_PERIOD_RE = re.compile(
    r"^(f5|f3|f7|h1|1h|h2|2h|q1|q2|q3|q4|p1|p2|p3)\s+(.+)$", re.IGNORECASE
)
_SPREAD_SHAPE_RE = re.compile(r"^([a-zA-Z\s&.-]+)\s*([+-]\d+(?:\.\d+)?)")
# Date, league and sport tokens recognized ahead of the contract text.
_MAX_POSITIONAL_TOKENS = 2
_SPORTS_BY_LOWER = {sport.lower(): sport for sport in KNOWN_SPORTS}

_CHAT_TYPES: dict[str, ChatType] = {"IW": "order", "YG": "fill"}


@dataclass(frozen=True)
class StraightTokens:
    """Pieces of a straight bet message ready for contract parsing."""

    chat_type: ChatType
    contract_text: str
    price: float
    raw_input: str
    size: float | None = None
    rotation_number: int | None = None
    game_number: int | None = None
    explicit_league: str | None = None
    explicit_sport: str | None = None
    event_date: date | None = None
    free_bet: bool = False


@dataclass(frozen=True)
class WriteinTokens:
    """Pieces of a write-in message."""

    chat_type: ChatType
    date_string: str | None
    description: str
    event_date: date
    price: float
    raw_input: str
    size: float | None = None
    league: str | None = None
    free_bet: bool = False


@dataclass
class _Markers:
    contract_end: int
    price_token: str | None = None
    size_token: str | None = None


def normalize_spacing(message: str) -> str:
    """Put single spaces around every standalone `=`."""
    processed = message
    for pattern in _EQUALS_PATTERNS:
        processed = pattern.sub(r"\1 = \2", processed)
    return processed


def preprocess(message: str) -> list[str]:
    processed = message.strip()
    shorthand = _WRITEIN_SHORTHAND_RE.match(processed)
    if shorthand:
        processed = f"{shorthand.group(1)} writein {processed[shorthand.end():]}"
    return normalize_spacing(processed).split()


def chat_type_for_prefix(prefix: str, raw_input: str) -> ChatType:
    chat_type = _CHAT_TYPES.get(prefix.upper())
    if chat_type is None:
        raise ChatBetParseError(
            f'Unrecognized chat prefix: "{prefix.upper()}". '
            'Expected "IW" (order) or "YG" (fill)',
            kind="UnrecognizedChatPrefix",
            raw_input=raw_input,
            detail=prefix,
        )
    return chat_type


def _chat_format_error(reason: str, raw_input: str) -> ChatBetParseError:
    return ChatBetParseError(
        f"Invalid chat format: {reason}", kind="InvalidChatFormat", raw_input=raw_input
    )


def _scan_markers(parts: list[str], start: int, chat_type: ChatType, raw_input: str) -> _Markers:
    at_positions = [index for index in range(start, len(parts)) if parts[index] == "@"]
    if len(at_positions) > 1:
        reason = FILL_FORMAT_REASON if chat_type == "fill" else ORDER_FORMAT_REASON
        raise _chat_format_error(reason, raw_input)
    if at_positions and at_positions[0] + 1 >= len(parts):
        raise _chat_format_error("No contract details found", raw_input)

    markers = _Markers(contract_end=len(parts))
    for index in range(start, len(parts)):
        if parts[index] in {"@", "="}:
            markers.contract_end = index
            break
    for index in range(start, len(parts) - 1):
        if parts[index] == "@":
            markers.price_token = parts[index + 1]
        elif parts[index] == "=":
            markers.size_token = parts[index + 1]
    return markers


def _resolve_price_and_size(
    markers: _Markers,
    chat_type: ChatType,
    raw_input: str,
    *,
    price: float | None,
    default_price: float,
) -> tuple[float, float | None]:
    size_token = markers.size_token
    if price is None and markers.price_token is not None:
        token = markers.price_token
        # "@ 2k" or "@ $500" carries a size, not a price.
        if token.lower().endswith("k") or token.startswith("$"):
            price = default_price
            if size_token is None:
                size_token = token
        else:
            price = parse_price(token, raw_input)

    size: float | None = None
    if size_token is not None:
        if chat_type == "order":
            size = parse_order_size(size_token, raw_input)
        else:
            size = parse_fill_size(size_token, raw_input)
    if chat_type == "fill" and size is None:
        raise ChatBetParseError(MISSING_SIZE_REASON, kind="MissingSizeForFill", raw_input=raw_input)
    return (default_price if price is None else price), size


def tokenize(
    message: str,
    *,
    reference_date: date | None = None,
    default_price: float = DEFAULT_PRICE,
) -> StraightTokens | WriteinTokens:
    """Split a straight IW/YG message into contract text, price and size."""
    raw_input = message
    parts = preprocess(message)
    if len(parts) < 2:
        raise _chat_format_error("Message too short", raw_input)

    chat_type = chat_type_for_prefix(parts[0], raw_input)
    if parts[1].lower() == "writein":
        return _tokenize_writein(
            parts,
            chat_type,
            raw_input,
            reference_date=reference_date,
            default_price=default_price,
        )

    markers = _scan_markers(parts, 1, chat_type, raw_input)
    keywords = extract_keywords(parts[1 : markers.contract_end], raw_input, STRAIGHT_KEYWORDS)
    event_date = (
        parse_event_date(keywords.date, raw_input, reference_date=reference_date)
        if keywords.date
        else None
    )
    league = keywords.league.upper() if keywords.league else None

    tokens = keywords.remaining
    rotation_number: int | None = None
    sport: str | None = None
    positional = 0
    index = 0
    while index < len(tokens) and positional < _MAX_POSITIONAL_TOKENS:
        token = tokens[index]
        # "abc" in the rotation slot is reported as a bad rotation number.
        if index == 0 and token == "abc":
            parse_rotation_number(token, raw_input)
        if event_date is None and DATE_LIKE_RE.match(token):
            event_date = parse_event_date(token, raw_input, reference_date=reference_date)
            positional += 1
        elif rotation_number is None and token.isdigit():
            if len(token) in {6, 8}:
                raise ChatBetParseError(
                    UNPARSEABLE_DATE_REASON, kind="InvalidDate", raw_input=raw_input, detail=token
                )
            rotation_number = parse_rotation_number(token, raw_input)
        elif league is None and token.isupper() and token in KNOWN_LEAGUES:
            league = token
            positional += 1
        elif sport is None and token.lower() in _SPORTS_BY_LOWER:
            sport = _SPORTS_BY_LOWER[token.lower()]
            positional += 1
        else:
            break
        index += 1
    tokens = tokens[index:]

    price: float | None = None
    for position, token in enumerate(tokens):
        if not _SIGNED_NUMBER_TOKEN_RE.match(token):
            continue
        magnitude = abs(float(token))
        if magnitude == 0:
            # +0/-0 marks a moneyline; the classifier needs to see it.
            break
        if magnitude >= 100:
            price = parse_price(token, raw_input)
            tokens = tokens[:position]
            break

    if not tokens:
        raise _chat_format_error("No contract details found", raw_input)
    contract_text = " ".join(tokens)

    game_number: int | None = None
    leading_game = _LEADING_GAME_RE.match(contract_text)
    if leading_game:
        try:
            game_number = parse_game_number(leading_game.group(1), raw_input)
        except ChatBetParseError:
            game_number = None
        else:
            contract_text = leading_game.group(2)

    if price is None:
        attached = _ATTACHED_PRICE_RE.search(contract_text)
        if attached:
            price = parse_price(attached.group(3), raw_input)
            contract_text = contract_text.replace(
                attached.group(0), attached.group(1) + attached.group(2), 1
            )

    price, size = _resolve_price_and_size(
        markers, chat_type, raw_input, price=price, default_price=default_price
    )

    leading_period = _LEADING_PERIOD_RE.match(contract_text)
    if leading_period:
        period, rest = leading_period.group(1), leading_period.group(2)
        spread = _SPREAD_SHAPE_RE.match(rest)
        if spread:
            contract_text = f"{spread.group(1).strip()} {period} {spread.group(2)}"
        else:
            contract_text = f"{rest} {period}"

    return StraightTokens(
        chat_type=chat_type,
        contract_text=contract_text,
        price=price,
        raw_input=raw_input,
        size=size,
        rotation_number=rotation_number,
        game_number=game_number,
        explicit_league=league,
        explicit_sport=sport,
        event_date=event_date,
        free_bet=keywords.flag("freebet"),
    )


def _tokenize_writein(
    parts: list[str],
    chat_type: ChatType,
    raw_input: str,
    *,
    reference_date: date | None,
    default_price: float,
) -> WriteinTokens:
    if len(parts) < 4:
        raise ChatBetParseError(
            "Invalid writein format: Writein contracts require at least a date and description",
            kind="InvalidWriteinFormat",
            raw_input=raw_input,
        )

    markers = _scan_markers(parts, 2, chat_type, raw_input)
    keywords = extract_keywords(parts[2 : markers.contract_end], raw_input, STRAIGHT_KEYWORDS)
    league = keywords.league.upper() if keywords.league else None
    rest = keywords.remaining
    index = 0

    if league is None and index < len(rest) and rest[index].upper() in KNOWN_LEAGUES:
        league = rest[index].upper()
        index += 1

    date_string = keywords.date
    if date_string is None and index < len(rest):
        date_string = rest[index]
        index += 1
    if date_string is None:
        raise ChatBetParseError(
            "Invalid writein format: Writein contracts must include a description",
            kind="InvalidWriteinFormat",
            raw_input=raw_input,
        )
    event_date = parse_event_date(
        date_string, raw_input, writein=True, reference_date=reference_date
    )

    if league is None and index < len(rest) - 1 and rest[index].upper() in KNOWN_LEAGUES:
        league = rest[index].upper()
        index += 1

    description = " ".join(rest[index:])
    if not description:
        raise ChatBetParseError(
            "Invalid writein format: Writein contracts must include a description",
            kind="InvalidWriteinFormat",
            raw_input=raw_input,
        )

    price, size = _resolve_price_and_size(
        markers, chat_type, raw_input, price=None, default_price=default_price
    )
    return WriteinTokens(
        chat_type=chat_type,
        date_string=date_string,
        description=description,
        price=price,
        raw_input=raw_input,
        size=size,
        event_date=event_date,
        league=league,
        free_bet=keywords.flag("freebet"),
    )
