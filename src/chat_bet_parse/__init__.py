"""Parse IW/YG sports betting chat shorthand into typed bet results."""

from .exceptions import ChatBetParseError
from .models import ParlayResult, ParseOutcome, ParseResult, RoundRobinResult, StraightResult
from .parsers import ChatBetParser, parse, summarize_parse_results

__all__ = [
    "ChatBetParseError",
    "ChatBetParser",
    "ParlayResult",
    "ParseOutcome",
    "ParseResult",
    "RoundRobinResult",
    "StraightResult",
    "parse",
    "summarize_parse_results",
]
