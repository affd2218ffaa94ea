"""Extraction of `key:value` keyword properties from chat tokens."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..exceptions import ChatBetParseError
from .primitives import KNOWN_LEAGUES

STRAIGHT_KEYWORDS: tuple[str, ...] = ("date", "league", "freebet")
MULTILEG_FLAGS: tuple[str, ...] = ("pusheslose", "tieslose", "freebet")
BOOLEAN_KEYWORDS: frozenset[str] = frozenset({"freebet", "pusheslose", "tieslose"})
SPACED_COLON_REASON = "Invalid keyword syntax: no spaces allowed around colon"


@dataclass
class KeywordSet:
    """Keyword values pulled out of a message plus the tokens left behind."""

    values: dict[str, str | bool] = field(default_factory=dict)
    remaining: list[str] = field(default_factory=list)

    @property
    def date(self) -> str | None:
        value = self.values.get("date")
        return value if isinstance(value, str) else None

    @property
    def league(self) -> str | None:
        value = self.values.get("league")
        return value if isinstance(value, str) else None

    def flag(self, key: str) -> bool:
        return self.values.get(key) is True


def split_keyword(token: str, raw_input: str) -> tuple[str, str]:
    key, _, value = token.partition(":")
    if not key or not value:
        raise ChatBetParseError(
            SPACED_COLON_REASON, kind="InvalidKeywordSyntax", raw_input=raw_input, detail=token
        )
    return key, value


def apply_keyword(
    key: str,
    value: str,
    keywords: KeywordSet,
    *,
    allowed: Sequence[str],
    raw_input: str,
) -> None:
    """Validate one keyword against the allow-list and record its value."""
    if key not in allowed:
        raise ChatBetParseError(
            f"Unknown keyword: {key}", kind="UnknownKeyword", raw_input=raw_input, detail=key
        )
    if key in BOOLEAN_KEYWORDS:
        if value != "true":
            raise ChatBetParseError(
                f'Invalid {key} value: must be "true"',
                kind="InvalidKeywordValue",
                raw_input=raw_input,
                detail=value,
            )
        keywords.values[key] = True
        return
    if key == "league" and value.upper() not in KNOWN_LEAGUES:
        raise ChatBetParseError(
            f"Invalid league value: {value}",
            kind="InvalidKeywordValue",
            raw_input=raw_input,
            detail=value,
        )
    keywords.values[key] = value


def extract_keywords(
    tokens: Iterable[str],
    raw_input: str,
    allowed: Sequence[str] = STRAIGHT_KEYWORDS,
) -> KeywordSet:
    """Pull every `key:value` token out, keeping the others in order."""
    keywords = KeywordSet()
    for token in tokens:
        if ":" not in token:
            keywords.remaining.append(token)
            continue
        key, value = split_keyword(token, raw_input)
        apply_keyword(key, value, keywords, allowed=allowed, raw_input=raw_input)
    return keywords
