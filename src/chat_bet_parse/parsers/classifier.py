"""Ordered heuristics deciding which contract type a contract text describes."""

from __future__ import annotations

import logging
import re

from ..exceptions import ChatBetParseError
from ..models import ContractType
from .primitives import detect_prop_type, validate_prop_format

logger = logging.getLogger("chat_bet_parse.parsers")

_PERIOD_TOKEN = r"(?:f5|f3|f7|h1|1h|h2|2h|q1|q2|q3|q4|p1|p2|p3)"
_PERIOD_PHRASE = r"(?:f5|f3|h1|1h|h2|2h|\d+(?:st|nd|rd|th)?\s*(?:inning|i|quarter|q|period|p))"
_LINE = r"[ou]\d+(?:\.\d+)?(?:[+-]\d+(?:\.\d+)?)?"

_TT_INNER_RE = re.compile(r"\stt\s", re.IGNORECASE)
_TT_LINE_RE = re.compile(rf"\stt\s*{_LINE}", re.IGNORECASE)
_TT_LEADING_RE = re.compile(r"^tt\s", re.IGNORECASE)
_HAS_LINE_RE = re.compile(_LINE, re.IGNORECASE)
_PROP_LIKE_RE = re.compile(
    r"^[a-zA-Z0-9]+\s+[a-zA-Z\s]+(yards|rbi|rebounds|score|strikeouts|prop)", re.IGNORECASE
)
_SPREAD_RE = re.compile(r"([a-zA-Z]+(?:\s+[a-zA-Z0-9]+)*)\s*([+-])(\d+(?:\.\d+)?)", re.IGNORECASE)
_GAME_TOTAL_RE = re.compile(r"[ou]\d*\.?\d+(?:[+-]\d+(?:\.\d+)?)?(\s+runs)?", re.IGNORECASE)
_GAME_TOTAL_PERIOD_AFTER_RE = re.compile(
    rf"[ou]\d*\.?\d+(?:[+-]\d+(?:\.\d+)?)?\s+{_PERIOD_TOKEN}", re.IGNORECASE
)
_TEAM_PERIOD_TOTAL_RE = re.compile(rf"^[a-zA-Z\s&.-]+\s+{_PERIOD_PHRASE}\s+{_LINE}", re.IGNORECASE)
_TEAM_TOTAL_SHORTHAND_RE = re.compile(rf"^[a-zA-Z\s&.-]+\s+{_LINE}", re.IGNORECASE)
_INNER_OU_RE = re.compile(r"\s[ou]\d", re.IGNORECASE)
_LEADING_OU_RE = re.compile(r"^[ou]\d", re.IGNORECASE)
_ZERO_LINE_RE = re.compile(r"[a-zA-Z]+\s*[+-]0(?:\s|$)", re.IGNORECASE)
_ML_SUFFIX_RE = re.compile(r"\sml\s*$|\sml\s+", re.IGNORECASE)
_TEAM_PERIOD_ONLY_RE = re.compile(rf"^[a-zA-Z]+\s+{_PERIOD_PHRASE}\s*$", re.IGNORECASE)


def has_over_under_line(contract_text: str) -> bool:
    return bool(_HAS_LINE_RE.search(contract_text))


def classify_contract(contract_text: str, raw_input: str) -> ContractType:
    """Return the contract type; the first matching rule wins."""
    text = contract_text.lower().strip()

    if "series" in text:
        return "Series"

    if (
        _TT_INNER_RE.search(contract_text)
        or _TT_LINE_RE.search(contract_text)
        or _TT_LEADING_RE.search(contract_text)
    ):
        if _TT_LEADING_RE.match(contract_text.strip()):
            raise ChatBetParseError(
                'Invalid team format: "". Team name cannot be empty',
                kind="InvalidTeamFormat",
                raw_input=raw_input,
            )
        return "TotalPointsContestant"

    prop = detect_prop_type(text)
    if prop is not None:
        validate_prop_format(text, has_over_under_line(contract_text), raw_input)
        return prop.category

    if _PROP_LIKE_RE.search(contract_text):
        # Unknown prop wording; validation raises the specific error.
        validate_prop_format(text, has_over_under_line(contract_text), raw_input)

    spread = _SPREAD_RE.search(contract_text)
    if spread:
        value = float(spread.group(3))
        if value == 0 or value >= 100:
            return "HandicapContestantML"
        return "HandicapContestantLine"

    if "/" in contract_text and (
        _GAME_TOTAL_RE.search(contract_text) or _GAME_TOTAL_PERIOD_AFTER_RE.search(contract_text)
    ):
        return "TotalPoints"

    if _TEAM_PERIOD_TOTAL_RE.search(contract_text):
        return "TotalPoints"

    if (
        _TEAM_TOTAL_SHORTHAND_RE.search(contract_text)
        and "TT" not in contract_text
        and " tt " not in text
    ):
        return "TotalPoints"

    if (
        (
            "/" not in contract_text
            and not _INNER_OU_RE.search(contract_text)
            and not _LEADING_OU_RE.search(contract_text)
        )
        or _ZERO_LINE_RE.search(contract_text)
        or _ML_SUFFIX_RE.search(contract_text)
        or _TEAM_PERIOD_ONLY_RE.search(contract_text)
    ):
        return "HandicapContestantML"

    logger.debug("No contract rule matched text=%r", contract_text)
    raise ChatBetParseError(
        f'Unable to determine contract type from: "{contract_text}"',
        kind="InvalidContractType",
        raw_input=raw_input,
        detail=contract_text,
    )
