"""Top-level chat message parser dispatching straight, parlay and round robin bets."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable
from datetime import UTC, date, datetime

from ..exceptions import ChatBetParseError
from ..models import (
    Bet,
    ChatType,
    ParlayResult,
    ParseOutcome,
    ParseResult,
    ParseRunSummary,
    RoundRobinResult,
    StraightResult,
)
from .classifier import classify_contract
from .contracts import CONTRACT_PARSERS, ContractContext, parse_writein
from .multileg import parse_parlay, parse_round_robin
from .tokenizer import DEFAULT_PRICE, WriteinTokens, chat_type_for_prefix, tokenize

_PARLAY_PREFIXES = {"IWP": "IW", "YGP": "YG"}
_ROUND_ROBIN_PREFIXES = {"IWRR": "IW", "YGRR": "YG"}


class ChatBetParser:
    """Parse IW/YG chat shorthand into typed bet results."""

    def __init__(
        self,
        logger: logging.Logger | None = None,
        *,
        default_price: float = DEFAULT_PRICE,
    ) -> None:
        self.logger = logger or logging.getLogger("chat_bet_parse.parsers")
        self.default_price = default_price

    def parse(
        self,
        message: str,
        reference_date: date | None = None,
        execution_time: datetime | None = None,
    ) -> ParseResult:
        """Parse one message; raises ChatBetParseError on the first problem found."""
        stripped = message.strip()
        if not stripped:
            raise ChatBetParseError(
                "Invalid chat format: Message too short",
                kind="InvalidChatFormat",
                raw_input=message,
            )
        prefix = stripped.split()[0].upper()

        if prefix in _PARLAY_PREFIXES:
            chat_type = chat_type_for_prefix(_PARLAY_PREFIXES[prefix], message)
            return parse_parlay(
                message,
                chat_type,
                lambda leg: self._parse_straight(leg, reference_date, None),
                execution_time=self._execution_time(chat_type, execution_time),
            )
        if prefix in _ROUND_ROBIN_PREFIXES:
            chat_type = chat_type_for_prefix(_ROUND_ROBIN_PREFIXES[prefix], message)
            return parse_round_robin(
                message,
                chat_type,
                lambda leg: self._parse_straight(leg, reference_date, None),
                execution_time=self._execution_time(chat_type, execution_time),
            )
        return self._parse_straight(message, reference_date, execution_time)

    def parse_many(
        self,
        messages: Iterable[str],
        reference_date: date | None = None,
        execution_time: datetime | None = None,
    ) -> list[ParseOutcome]:
        """Parse a batch, recording failures instead of raising them."""
        outcomes: list[ParseOutcome] = []
        for message in messages:
            try:
                result = self.parse(message, reference_date, execution_time)
            except ChatBetParseError as exc:
                self.logger.info(
                    "Rejected message kind=%s reason=%s",
                    exc.kind,
                    exc.reason,
                    extra={"error_kind": exc.kind},
                )
                outcomes.append(
                    ParseOutcome(message=message, error_kind=exc.kind, error=str(exc))
                )
                continue
            outcomes.append(ParseOutcome(message=message, result=result))
        return outcomes

    def _execution_time(
        self, chat_type: ChatType, execution_time: datetime | None
    ) -> datetime | None:
        if chat_type != "fill":
            return None
        return execution_time or datetime.now(UTC)

    def _parse_straight(
        self,
        message: str,
        reference_date: date | None,
        execution_time: datetime | None,
    ) -> StraightResult:
        tokens = tokenize(message, reference_date=reference_date, default_price=self.default_price)
        bet = Bet(
            price=tokens.price,
            size=tokens.size,
            execution_timestamp=self._execution_time(tokens.chat_type, execution_time),
            free_bet=tokens.free_bet,
        )

        if isinstance(tokens, WriteinTokens):
            contract = parse_writein(
                tokens.event_date, tokens.description, message, league=tokens.league
            )
            return StraightResult(
                chat_type=tokens.chat_type,
                contract_type="Writein",
                contract=contract,
                bet=bet,
            )

        contract_type = classify_contract(tokens.contract_text, message)
        self.logger.debug(
            "Classified contract type=%s text=%r",
            contract_type,
            tokens.contract_text,
            extra={"contract_type": contract_type},
        )
        context = ContractContext(
            raw_input=message,
            rotation_number=tokens.rotation_number,
            game_number=tokens.game_number,
            explicit_league=tokens.explicit_league,
            explicit_sport=tokens.explicit_sport,
            event_date=tokens.event_date,
        )
        contract = CONTRACT_PARSERS[contract_type](tokens.contract_text, context)
        return StraightResult(
            chat_type=tokens.chat_type,
            contract_type=contract_type,
            contract=contract,
            rotation_number=tokens.rotation_number,
            bet=bet,
        )


_default_parser = ChatBetParser()


def parse(
    message: str,
    reference_date: date | None = None,
    execution_time: datetime | None = None,
) -> ParseResult:
    """Parse one chat message with the default parser."""
    return _default_parser.parse(message, reference_date, execution_time)


def summarize_parse_results(outcomes: list[ParseOutcome]) -> ParseRunSummary:
    """Build aggregate summary from batch parse outcomes."""
    result_types: Counter[str] = Counter()
    contract_types: Counter[str] = Counter()
    error_kinds: Counter[str] = Counter()
    for outcome in outcomes:
        if outcome.result is None:
            error_kinds.update([outcome.error_kind or "unknown"])
            continue
        result_types.update([outcome.result.result_type])
        if isinstance(outcome.result, StraightResult):
            contract_types.update([outcome.result.contract_type])
        elif isinstance(outcome.result, ParlayResult | RoundRobinResult):
            contract_types.update(leg.contract_type for leg in outcome.result.legs)

    parsed = sum(result_types.values())
    return ParseRunSummary(
        total_messages=len(outcomes),
        parsed=parsed,
        failed=len(outcomes) - parsed,
        by_result_type=dict(result_types),
        by_contract_type=dict(contract_types),
        top_error_kinds=dict(error_kinds.most_common(8)),
    )
