"""Tests for write-in contract parsing."""

from __future__ import annotations

from datetime import date

import pytest

from chat_bet_parse import ChatBetParseError, ChatBetParser, StraightResult
from chat_bet_parse.models import Writein
from chat_bet_parse.parsers.contracts import validate_writein_description


def _writein(message: str, **kwargs) -> StraightResult:
    result = ChatBetParser().parse(message, **kwargs)
    assert isinstance(result, StraightResult)
    assert isinstance(result.contract, Writein)
    return result


def test_shorthand_writein_with_league() -> None:
    result = _writein("YGW MLB 2025-05-14 Cardinals win in extra innings @ +150 = 1.0")
    contract = result.contract
    assert result.contract_type == "Writein"
    assert result.chat_type == "fill"
    assert contract.event_date == date(2025, 5, 14)
    assert contract.description == "Cardinals win in extra innings"
    assert contract.league == "MLB"
    assert contract.sport == "Baseball"
    assert result.bet.price == 150.0
    assert result.bet.size == 1000.0


def test_writein_keywords_and_year_inference() -> None:
    result = _writein(
        "IWW 12/25 freebet:true Lakers score 120+ points league:NBA @ +200",
        reference_date=date(2025, 1, 1),
    )
    contract = result.contract
    assert contract.event_date == date(2025, 12, 25)
    assert contract.description == "Lakers score 120+ points"
    assert contract.league == "NBA"
    assert contract.sport == "Basketball"
    assert result.bet.free_bet is True
    assert result.bet.size is None


def test_long_form_writein_defaults_price() -> None:
    result = _writein("IW writein 2025-11-05 Trump to win presidency")
    assert result.contract.description == "Trump to win presidency"
    assert result.contract.league is None
    assert result.bet.price == -110.0


@pytest.mark.parametrize(
    ("message", "kind", "reason"),
    [
        (
            "YG writein 2024-02-30 Some event description @ +100 = 1.0",
            "InvalidWriteinDate",
            "Invalid calendar date",
        ),
        ("IW writein Trump to win presidency @ +150", "InvalidWriteinDate", "Unable to parse date"),
        (
            "YG writein2024/11/5 Trump to win presidency @ +150 = 3.0",
            "InvalidContractType",
            "Unable to determine contract type",
        ),
        (
            "IWW 2025-05-14 Too short @ +100",
            "InvalidWriteinDescription",
            "Invalid writein description: Description must be at least 10 characters long (currently 9)",
        ),
        (
            "IW writein 2025-05-14 @ +100",
            "InvalidWriteinFormat",
            "Invalid writein format: Writein contracts must include a description",
        ),
        (
            "IW writein 5/14",
            "InvalidWriteinFormat",
            "Invalid writein format: Writein contracts require at least a date and description",
        ),
    ],
)
def test_writein_errors(message: str, kind: str, reason: str) -> None:
    with pytest.raises(ChatBetParseError) as exc_info:
        ChatBetParser().parse(message)
    assert exc_info.value.kind == kind
    assert exc_info.value.reason.startswith(reason)


def test_validate_writein_description_bounds() -> None:
    assert validate_writein_description("  Lakers win by 20+  ", "raw") == "Lakers win by 20+"
    with pytest.raises(ChatBetParseError, match="Description cannot be empty"):
        validate_writein_description("   ", "raw")
    with pytest.raises(ChatBetParseError, match=r"cannot exceed 255 characters \(currently 256\)"):
        validate_writein_description("x" * 256, "raw")
    with pytest.raises(ChatBetParseError, match="cannot contain newlines"):
        validate_writein_description("Lakers win\nby twenty", "raw")
