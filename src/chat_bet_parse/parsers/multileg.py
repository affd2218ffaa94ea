"""Parlay (IWP/YGP) and round robin (IWRR/YGRR) message parsing."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from ..exceptions import ChatBetParseError, ErrorKind
from ..models import ChatType, ParlayBet, ParlayResult, RiskType, RoundRobinResult, StraightResult
from .keywords import MULTILEG_FLAGS, KeywordSet, apply_keyword, split_keyword
from .ncr import NcrNotation, parse_ncr_notation
from .odds import parlay_fair_to_win, round_robin_fair_to_win
from .primitives import parse_fill_size
from .tokenizer import MISSING_SIZE_REASON, normalize_spacing

logger = logging.getLogger("chat_bet_parse.parsers")

MultilegKind = Literal["parlay", "round_robin"]
LegParser = Callable[[str], StraightResult]

_AMOUNT = r"[$\d.,]+k?"
_AMOUNT_RE = re.compile(rf"^{_AMOUNT}$", re.IGNORECASE)
_TW_RE = re.compile(r"\btw\b", re.IGNORECASE)
_PARLAY_TW_FORM_RE = re.compile(rf"^({_AMOUNT})\s+tw\s+({_AMOUNT})$", re.IGNORECASE)
_RR_LEADING_RISK_RE = re.compile(r"^(per|total)\s+\$?[\d.]+", re.IGNORECASE)
_RR_TW_FORM_RE = re.compile(rf"^({_AMOUNT})\s+(per|total)\s+tw\s+({_AMOUNT})$", re.IGNORECASE)
_RR_RISK_FORM_RE = re.compile(rf"^({_AMOUNT})\s+(per|total)$", re.IGNORECASE)
_RR_TW_MISSING_RE = re.compile(rf"^({_AMOUNT})\s+(per|total)\s+({_AMOUNT})$", re.IGNORECASE)
_NCR_CANDIDATE_RE = re.compile(r"^-?[\d.]+[A-Za-z]")
_LATE_NCR_RE = re.compile(r"^\d+[cC]\d+-?$")
_LEG_COMMA_RE = re.compile(r"@\s*\S+,")
_EMBEDDED_PRICE_RE = re.compile(r"^[+-](\d+(?:\.\d+)?)$")

_RISK_TYPES: dict[str, RiskType] = {"per": "perSelection", "total": "total"}
_TOWIN_KEYWORD_REASON = 'Invalid to-win format: use "tw $500" not "towin:500"'
_TW_REPEATED_REASON = "To-win amount specified multiple times"
_TW_MISSING_REASON = 'Invalid to-win syntax: must use "tw" keyword'


@dataclass
class _Layout:
    """A multi-leg message split into header tokens, leg texts and size text."""

    header: list[str]
    legs: list[str] = field(default_factory=list)
    size_text: str | None = None


@dataclass(frozen=True)
class _Stake:
    risk: float | None
    to_win: float | None = None
    risk_type: RiskType = "perSelection"


def _error(
    reason: str,
    kind: ErrorKind,
    raw_input: str,
    *,
    detail: str | None = None,
    leg_index: int | None = None,
) -> ChatBetParseError:
    return ChatBetParseError(
        reason, kind=kind, raw_input=raw_input, detail=detail, leg_index=leg_index
    )


def _split_single_line(tokens: list[str]) -> _Layout:
    if "=" in tokens:
        cut = tokens.index("=")
        return _Layout(header=tokens[:cut], size_text=" ".join(tokens[cut + 1 :]))
    return _Layout(header=tokens)


def _split_multiline(lines: list[str]) -> _Layout:
    layout = _Layout(header=lines[0].split()[1:])
    for line in lines[1:]:
        tokens = line.split()
        if "=" in tokens:
            cut = tokens.index("=")
            if cut:
                layout.legs.append(" ".join(tokens[:cut]))
            layout.size_text = " ".join(tokens[cut + 1 :])
        else:
            layout.legs.append(line)
    return layout


def _layout(message: str) -> _Layout:
    normalized = normalize_spacing(message.strip())
    lines = [line.strip() for line in normalized.splitlines() if line.strip()]
    if len(lines) > 1:
        return _split_multiline(lines)
    return _split_single_line(normalized.split()[1:])


def _split_legs(tokens: list[str]) -> list[str]:
    if not tokens:
        return []
    legs: list[list[str]] = [[]]
    for token in tokens:
        if token == "&":
            legs.append([])
        else:
            legs[-1].append(token)
    return [" ".join(leg) for leg in legs]


def _consume_flags(
    tokens: list[str], raw_input: str, *, stop_at_leg_keywords: bool
) -> tuple[KeywordSet, list[str]]:
    """Read leading `flag:true` tokens; leg keywords like date: end a parlay header."""
    keywords = KeywordSet()
    index = 0
    while index < len(tokens):
        token = tokens[index]
        if ":" in token:
            key, value = split_keyword(token, raw_input)
            if stop_at_leg_keywords and key in {"date", "league"}:
                break
            apply_keyword(key, value, keywords, allowed=MULTILEG_FLAGS, raw_input=raw_input)
        elif token.lower() in MULTILEG_FLAGS:
            raise _error(
                f"Invalid keyword syntax: {token.lower()} requires a value "
                f"(e.g. {token.lower()}:true)",
                "InvalidKeywordSyntax",
                raw_input,
                detail=token,
            )
        else:
            break
        index += 1
    return keywords, tokens[index:]


def _take_ncr(tokens: list[str], raw_input: str) -> tuple[NcrNotation, list[str]]:
    if tokens and _NCR_CANDIDATE_RE.match(tokens[0]):
        return parse_ncr_notation(tokens[0], raw_input), tokens[1:]
    if any(_LATE_NCR_RE.match(token) for token in tokens):
        raise _error("nCr notation must appear before legs", "MissingNcrNotation", raw_input)
    raise _error("Round robin requires nCr notation", "MissingNcrNotation", raw_input)


def _leg_label(kind: MultilegKind) -> str:
    return "parlay" if kind == "parlay" else "round robin"


def _leg_kind(kind: MultilegKind) -> ErrorKind:
    return "InvalidParlayLeg" if kind == "parlay" else "InvalidRoundRobinLeg"


def _has_embedded_price(leg: str) -> bool:
    for token in leg.split():
        match = _EMBEDDED_PRICE_RE.match(token)
        if match and float(match.group(1)) >= 100:
            return True
    return False


def _check_legs(legs: list[str], kind: MultilegKind, raw_input: str) -> None:
    label = _leg_label(kind)
    for number, leg in enumerate(legs, start=1):
        if not leg.strip():
            raise _error(f"Empty {label} leg", _leg_kind(kind), raw_input, leg_index=number)
        if _LEG_COMMA_RE.search(leg):
            raise _error(
                f"{label.capitalize()} legs must be separated by &",
                "InvalidParlayStructure",
                raw_input,
                detail=leg,
            )
        if "@" not in leg:
            reason = (
                "Invalid leg format: missing @ symbol"
                if _has_embedded_price(leg)
                else f"Each {label} leg must have a price"
            )
            raise _error(
                f"Leg {number}: {reason}",
                _leg_kind(kind),
                raw_input,
                detail=leg,
                leg_index=number,
            )


def _parse_legs(
    legs: list[str],
    kind: MultilegKind,
    raw_input: str,
    parse_leg: LegParser,
) -> tuple[StraightResult, ...]:
    parsed: list[StraightResult] = []
    for number, leg in enumerate(legs, start=1):
        try:
            parsed.append(parse_leg(f"IW {leg}"))
        except ChatBetParseError as exc:
            logger.info(
                "Rejected %s leg=%d kind=%s",
                _leg_label(kind),
                number,
                exc.kind,
                extra={"error_kind": exc.kind, "leg_index": number},
            )
            raise _error(
                f"Leg {number}: {exc.reason}",
                _leg_kind(kind),
                raw_input,
                detail=leg,
                leg_index=number,
            ) from exc
    return tuple(parsed)


def _parse_parlay_stake(size_text: str, raw_input: str) -> _Stake:
    """Amounts read as fill sizes for orders and fills alike: 2.5 means 2500."""
    text = size_text.strip()
    if "towin:" in text.lower():
        raise _error(_TOWIN_KEYWORD_REASON, "InvalidParlayToWin", raw_input, detail=text)
    if len(_TW_RE.findall(text)) > 1:
        raise _error(_TW_REPEATED_REASON, "InvalidParlayToWin", raw_input, detail=text)

    tw_form = _PARLAY_TW_FORM_RE.match(text)
    if tw_form:
        return _Stake(
            risk=parse_fill_size(tw_form.group(1), raw_input),
            to_win=parse_fill_size(tw_form.group(2), raw_input),
        )

    parts = text.split()
    if len(parts) == 2 and all(_AMOUNT_RE.match(part) for part in parts):
        raise _error(_TW_MISSING_REASON, "InvalidSizeFormat", raw_input, detail=text)
    if len(parts) == 1 and _AMOUNT_RE.match(parts[0]):
        return _Stake(risk=parse_fill_size(parts[0], raw_input))
    raise _error(
        'Invalid parlay size. Format: "= $100", "= 2.5", "= 3k" or "= $100 tw $500"',
        "InvalidSizeFormat",
        raw_input,
        detail=text,
    )


def _parse_round_robin_stake(size_text: str, raw_input: str) -> _Stake:
    text = size_text.strip()
    if "towin:" in text.lower():
        raise _error(_TOWIN_KEYWORD_REASON, "InvalidRoundRobinToWin", raw_input, detail=text)
    if _RR_LEADING_RISK_RE.match(text):
        raise _error(
            "Risk type must come after size amount", "InvalidSizeFormat", raw_input, detail=text
        )
    if len(_TW_RE.findall(text)) > 1:
        raise _error(_TW_REPEATED_REASON, "InvalidRoundRobinToWin", raw_input, detail=text)

    tw_form = _RR_TW_FORM_RE.match(text)
    if tw_form:
        return _Stake(
            risk=parse_fill_size(tw_form.group(1), raw_input),
            risk_type=_RISK_TYPES[tw_form.group(2).lower()],
            to_win=parse_fill_size(tw_form.group(3), raw_input),
        )
    if _RR_TW_MISSING_RE.match(text):
        raise _error(_TW_MISSING_REASON, "InvalidSizeFormat", raw_input, detail=text)

    risk_form = _RR_RISK_FORM_RE.match(text)
    if risk_form:
        return _Stake(
            risk=parse_fill_size(risk_form.group(1), raw_input),
            risk_type=_RISK_TYPES[risk_form.group(2).lower()],
        )

    parts = text.split()
    if len(parts) == 1 and _AMOUNT_RE.match(parts[0]):
        raise _error(
            'Round robin requires risk type: "per" or "total"',
            "MissingRiskType",
            raw_input,
            detail=text,
        )
    if len(parts) == 2 and _AMOUNT_RE.match(parts[0]):
        raise _error(
            'Invalid risk type: must be "per" or "total"',
            "InvalidRiskType",
            raw_input,
            detail=parts[1],
        )
    raise _error(
        'Invalid round robin size. Format: "= $100 per", "= 2.5 total", "= 3k per"',
        "InvalidSizeFormat",
        raw_input,
        detail=text,
    )


def _resolve_stake(
    layout: _Layout, kind: MultilegKind, chat_type: ChatType, raw_input: str
) -> _Stake:
    if layout.size_text is None:
        if chat_type == "fill":
            raise _error(MISSING_SIZE_REASON, "MissingSizeForFill", raw_input)
        return _Stake(risk=None)
    if kind == "parlay":
        return _parse_parlay_stake(layout.size_text, raw_input)
    return _parse_round_robin_stake(layout.size_text, raw_input)


def _execution_time(chat_type: ChatType, execution_time: datetime | None) -> datetime | None:
    if chat_type != "fill":
        return None
    return execution_time


def parse_parlay(
    message: str,
    chat_type: ChatType,
    parse_leg: LegParser,
    *,
    execution_time: datetime | None = None,
) -> ParlayResult:
    """Parse an IWP/YGP message whose legs are straight bets joined by `&`."""
    raw_input = message
    layout = _layout(message)
    flags, rest = _consume_flags(layout.header, raw_input, stop_at_leg_keywords=True)
    legs = _split_legs(rest) + layout.legs

    _check_legs(legs, "parlay", raw_input)
    if len(legs) < 2:
        raise _error("Parlay requires at least 2 legs", "InvalidParlayStructure", raw_input)
    parsed = _parse_legs(legs, "parlay", raw_input, parse_leg)

    stake = _resolve_stake(layout, "parlay", chat_type, raw_input)
    use_fair = stake.to_win is None
    to_win = stake.to_win
    if use_fair and stake.risk is not None:
        to_win = parlay_fair_to_win([leg.bet.price for leg in parsed], stake.risk)

    return ParlayResult(
        chat_type=chat_type,
        legs=parsed,
        bet=ParlayBet(
            risk=stake.risk,
            to_win=to_win,
            execution_timestamp=_execution_time(chat_type, execution_time),
            free_bet=flags.flag("freebet"),
        ),
        use_fair=use_fair,
        pushes_lose=True if flags.flag("pusheslose") or flags.flag("tieslose") else None,
    )


def parse_round_robin(
    message: str,
    chat_type: ChatType,
    parse_leg: LegParser,
    *,
    execution_time: datetime | None = None,
) -> RoundRobinResult:
    """Parse an IWRR/YGRR message: flags, nCr notation, legs, then stake."""
    raw_input = message
    layout = _layout(message)
    flags, rest = _consume_flags(layout.header, raw_input, stop_at_leg_keywords=False)
    notation, rest = _take_ncr(rest, raw_input)
    legs = _split_legs(rest) + layout.legs

    _check_legs(legs, "round_robin", raw_input)
    if len(legs) != notation.total_legs:
        raise _error(
            f"Expected {notation.total_legs} legs from nCr notation, but found {len(legs)}",
            "LegCountMismatch",
            raw_input,
        )
    parsed = _parse_legs(legs, "round_robin", raw_input, parse_leg)

    stake = _resolve_stake(layout, "round_robin", chat_type, raw_input)
    use_fair = stake.to_win is None
    to_win = stake.to_win
    if use_fair and stake.risk is not None:
        to_win = round_robin_fair_to_win(
            [leg.bet.price for leg in parsed],
            stake.risk,
            parlay_size=notation.parlay_size,
            is_at_most=notation.is_at_most,
        )

    return RoundRobinResult(
        chat_type=chat_type,
        legs=parsed,
        bet=ParlayBet(
            risk=stake.risk,
            to_win=to_win,
            execution_timestamp=_execution_time(chat_type, execution_time),
            free_bet=flags.flag("freebet"),
        ),
        use_fair=use_fair,
        pushes_lose=True if flags.flag("pusheslose") or flags.flag("tieslose") else None,
        parlay_size=notation.parlay_size,
        total_legs=notation.total_legs,
        is_at_most=notation.is_at_most,
        risk_type=stake.risk_type,
    )
