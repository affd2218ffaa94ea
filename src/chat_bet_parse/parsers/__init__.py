"""Chat shorthand parsers for straight, write-in, parlay and round robin bets."""

from .engine import ChatBetParser, parse, summarize_parse_results
from .ncr import NcrNotation, parse_ncr_notation
from .odds import parlay_fair_to_win, round_robin_fair_to_win

__all__ = [
    "ChatBetParser",
    "NcrNotation",
    "parlay_fair_to_win",
    "parse",
    "parse_ncr_notation",
    "round_robin_fair_to_win",
    "summarize_parse_results",
]
