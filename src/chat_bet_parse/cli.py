"""CLI: parse chat bet messages and print typed results."""

from __future__ import annotations

import argparse
import json
import sys
import uuid
from datetime import date
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from .config import load_settings
from .exceptions import ConfigError, JournalError
from .journal import JournalWriter
from .log_setup import setup_logger
from .models import ParseOutcome, ParseRunSummary, StraightResult, Writein
from .parsers import ChatBetParser, summarize_parse_results


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse chat bet parser CLI arguments."""
    parser = argparse.ArgumentParser(
        description="Parse IW/YG sports betting chat messages into typed bet records."
    )
    parser.add_argument(
        "messages",
        nargs="*",
        help="Chat messages to parse, e.g. 'YG Lakers @ +120 = 2.5'.",
    )
    parser.add_argument(
        "--input-file",
        type=Path,
        default=None,
        help="Read messages from a file, one per line. Blank lines and # comments are skipped.",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Emit parse outcomes as JSON instead of a table.",
    )
    parser.add_argument(
        "--reference-date",
        type=date.fromisoformat,
        default=None,
        help="Anchor date (YYYY-MM-DD) used to infer the year of MM/DD dates.",
    )
    parser.add_argument(
        "--journal-dir",
        type=Path,
        default=None,
        help="Directory for the JSONL audit journal. Overrides CHAT_BET_JOURNAL_DIR.",
    )
    return parser.parse_args(argv)


def _load_messages(input_file: Path) -> list[str]:
    if not input_file.exists():
        raise ValueError(f"Input file does not exist: {input_file}")
    try:
        with input_file.open("r", encoding="utf-8") as fh:
            lines = fh.read().splitlines()
    except OSError as exc:
        raise ValueError(f"Failed reading input file {input_file}: {exc}") from exc
    return [line for line in lines if line.strip() and not line.lstrip().startswith("#")]


def _describe_straight(result: StraightResult) -> str:
    contract = result.contract
    if isinstance(contract, Writein):
        return f"{contract.event_date} {contract.description}"
    parts = [result.contract_type]
    contestant = getattr(contract, "contestant", None)
    if contestant:
        parts.append(contestant)
    else:
        match = contract.match
        parts.append("/".join(team for team in (match.team1, match.team2) if team))
    line = getattr(contract, "line", None)
    is_over = getattr(contract, "is_over", None)
    if line is not None:
        prefix = "" if is_over is None else ("o" if is_over else "u")
        parts.append(f"{prefix}{line:g}")
    return " ".join(parts)


def _outcome_row(index: int, outcome: ParseOutcome) -> tuple[str, ...]:
    result = outcome.result
    if result is None:
        return (str(index), "-", outcome.error_kind or "-", "-", "-", outcome.error or "-")
    if isinstance(result, StraightResult):
        size = "-" if result.bet.size is None else f"{result.bet.size:g}"
        return (
            str(index),
            f"Straight/{result.chat_type}",
            _describe_straight(result),
            f"{result.bet.price:+g}",
            size,
            "ok",
        )
    legs = "; ".join(
        f"{_describe_straight(leg)} @ {leg.bet.price:+g}" for leg in result.legs
    )
    risk = "-" if result.bet.risk is None else f"{result.bet.risk:g}"
    to_win = "-" if result.bet.to_win is None else f"{result.bet.to_win:g}"
    return (
        str(index),
        f"{result.result_type}/{result.chat_type}",
        legs,
        f"to win {to_win}",
        risk,
        "ok",
    )


def _print_outcomes(console: Console, outcomes: list[ParseOutcome], *, max_print: int) -> None:
    table = Table(title="Parsed chat bets")
    table.add_column("#")
    table.add_column("Type")
    table.add_column("Contract", overflow="fold")
    table.add_column("Price")
    table.add_column("Size/Risk")
    table.add_column("Status", overflow="fold")
    for index, outcome in enumerate(outcomes[:max_print], start=1):
        table.add_row(*_outcome_row(index, outcome))
    console.print(table)


def _print_summary(console: Console, summary: ParseRunSummary) -> None:
    console.print(
        f"Parsed {summary.parsed}/{summary.total_messages} messages | failed={summary.failed}"
    )
    if summary.top_error_kinds:
        kinds = ", ".join(f"{kind}:{count}" for kind, count in summary.top_error_kinds.items())
        console.print(f"Top error kinds: {kinds}")


def _journal_outcomes(journal: JournalWriter, outcomes: list[ParseOutcome]) -> None:
    for outcome in outcomes:
        payload: dict[str, Any] = {"message": outcome.message}
        if outcome.result is None:
            payload.update(error_kind=outcome.error_kind, error=outcome.error)
            journal.write_event("parse_error", payload=payload)
        else:
            payload["result"] = outcome.result.model_dump(mode="json")
            journal.write_event("parse_result", payload=payload)


def main(argv: list[str] | None = None) -> int:
    """Parse the given chat messages and report results."""
    args = parse_args(argv)
    logger = setup_logger()
    console = Console()
    session_id = uuid.uuid4().hex[:12]

    try:
        settings = load_settings()
    except ConfigError as exc:
        logger.error("Configuration failure: %s", exc)
        return 2
    setup_logger(level=settings.log_level)

    messages: list[str] = list(args.messages)
    if args.input_file is not None:
        try:
            messages.extend(_load_messages(args.input_file))
        except ValueError as exc:
            logger.error("Input failure: %s", exc)
            return 2
    if not messages:
        logger.error("Provide at least one message or --input-file.")
        return 2

    journal: JournalWriter | None = None
    journal_dir = args.journal_dir or settings.journal_dir
    if journal_dir is not None:
        try:
            journal = JournalWriter(journal_dir=journal_dir, session_id=session_id)
            journal.write_event(
                "parse_start",
                payload={
                    "message_count": len(messages),
                    "reference_date": args.reference_date,
                    "settings": settings.safe_summary(),
                },
            )
        except JournalError as exc:
            logger.error("Failed to initialize journal: %s", exc)
            return 3

    try:
        parser = ChatBetParser(logger=logger, default_price=settings.default_price)
        outcomes = parser.parse_many(messages, reference_date=args.reference_date)
        summary = summarize_parse_results(outcomes)

        if args.json:
            print(
                json.dumps(
                    {
                        "outcomes": [outcome.model_dump(mode="json") for outcome in outcomes],
                        "summary": summary.model_dump(mode="json"),
                    },
                    indent=2,
                )
            )
        else:
            _print_outcomes(console, outcomes, max_print=settings.max_print)
            _print_summary(console, summary)

        if journal is not None:
            _journal_outcomes(journal, outcomes)
            journal.write_event("parse_summary", payload=summary.model_dump(mode="json"))
    except JournalError as exc:
        logger.error("Journal write failure: %s", exc)
        return 3
    except Exception as exc:  # pragma: no cover - runtime guard
        logger.exception("Unexpected parse failure: %s", exc)
        return 99

    return 0 if summary.failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
