"""Parser for round-robin nCr notation such as 4c2 or 5c3-."""

from __future__ import annotations

import re
from dataclasses import dataclass

from ..exceptions import ChatBetParseError

_COMMA_SIZES_RE = re.compile(r"[cC].*,")
_NCR_RE = re.compile(r"^(-?[\d.]+|[A-Za-z]+)[cC](-?[\d.]+|[A-Za-z]+|[^-\s]+)(-+)?$")
_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d+)?$")


@dataclass(frozen=True, slots=True)
class NcrNotation:
    """N total legs, parlays of R legs; at-most also includes every size from 2 to R."""

    total_legs: int
    parlay_size: int
    is_at_most: bool = False


def _ncr_error(reason: str, raw_input: str, notation: str) -> ChatBetParseError:
    return ChatBetParseError(
        reason, kind="InvalidNcrNotation", raw_input=raw_input, detail=notation
    )


def parse_ncr_notation(notation: str, raw_input: str) -> NcrNotation:
    trimmed = notation.strip()
    if _COMMA_SIZES_RE.search(trimmed):
        raise _ncr_error("Comma-separated parlay sizes not supported", raw_input, notation)

    match = _NCR_RE.match(trimmed)
    if not match:
        raise _ncr_error("Invalid nCr notation format", raw_input, notation)
    total_str, size_str, modifier = match.group(1), match.group(2), match.group(3) or ""

    if len(modifier) > 1:
        raise _ncr_error("Invalid at-most modifier", raw_input, notation)
    for label, value in (("Total legs", total_str), ("Parlay size", size_str)):
        if not _NUMBER_RE.match(value):
            raise _ncr_error(f"{label} must be a number", raw_input, notation)
    for label, value in (("Total legs", total_str), ("Parlay size", size_str)):
        if "." in value:
            raise _ncr_error(f"{label} must be an integer", raw_input, notation)

    total_legs, parlay_size = int(total_str), int(size_str)
    if total_legs < 0:
        raise _ncr_error("Total legs must be positive", raw_input, notation)
    if parlay_size < 0:
        raise _ncr_error("Parlay size must be positive", raw_input, notation)
    if total_legs < 3:
        raise _ncr_error("Total legs must be at least 3", raw_input, notation)
    if parlay_size < 2:
        raise _ncr_error("Parlay size must be at least 2", raw_input, notation)
    if parlay_size >= total_legs:
        raise _ncr_error("Parlay size must be less than total legs", raw_input, notation)

    return NcrNotation(total_legs=total_legs, parlay_size=parlay_size, is_at_most=modifier == "-")
