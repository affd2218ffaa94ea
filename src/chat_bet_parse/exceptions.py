"""Application exception classes."""

from __future__ import annotations

from typing import Literal

ErrorKind = Literal[
    "InvalidChatFormat",
    "UnrecognizedChatPrefix",
    "InvalidContractType",
    "InvalidPriceFormat",
    "InvalidSizeFormat",
    "InvalidLineValue",
    "InvalidTeamFormat",
    "InvalidPeriodFormat",
    "InvalidGameNumber",
    "InvalidRotationNumber",
    "MissingSizeForFill",
    "InvalidWriteinFormat",
    "InvalidWriteinDate",
    "InvalidWriteinDescription",
    "InvalidDate",
    "InvalidKeywordSyntax",
    "InvalidKeywordValue",
    "UnknownKeyword",
    "ConflictingSportLeague",
    "InvalidNcrNotation",
    "MissingNcrNotation",
    "LegCountMismatch",
    "InvalidParlayStructure",
    "InvalidParlayLeg",
    "InvalidParlayToWin",
    "InvalidRoundRobinLeg",
    "InvalidRoundRobinToWin",
    "MissingRiskType",
    "InvalidRiskType",
]


class ConfigError(Exception):
    """Raised when configuration is invalid or incomplete."""


class JournalError(Exception):
    """Raised when writing to journal files fails."""


class ChatBetParseError(Exception):
    """Raised when a chat message cannot be parsed into a bet."""

    def __init__(
        self,
        reason: str,
        *,
        kind: ErrorKind,
        raw_input: str,
        detail: str | None = None,
        position: int | None = None,
        leg_index: int | None = None,
    ) -> None:
        super().__init__(f'{reason}. Input: "{raw_input}"')
        self.reason = reason
        self.kind = kind
        self.raw_input = raw_input
        self.detail = detail
        self.position = position
        self.leg_index = leg_index


class ContractMappingError(Exception):
    """Raised when a parse result cannot be mapped to a tracking leg spec."""

    def __init__(self, message: str, *, contract_type: str | None = None) -> None:
        super().__init__(message)
        self.contract_type = contract_type


class GradingError(Exception):
    """Base class for grading boundary failures."""

    def __init__(self, message: str, *, original_error: Exception | None = None) -> None:
        super().__init__(message)
        self.original_error = original_error


class GradingConnectionError(GradingError):
    """Raised when the grading database cannot be reached."""


class GradingQueryError(GradingError):
    """Raised when a grading query fails to execute."""


class GradingDataError(GradingError):
    """Raised when grading input is incomplete or inconsistent."""
