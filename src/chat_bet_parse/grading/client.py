"""Backend-agnostic grading client interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date

from ..models import ParseResult
from .models import GradeResult


class GradingClient(ABC):
    """Base contract for clients that grade parsed bets against game results."""

    @abstractmethod
    def grade(
        self, result: ParseResult, *, match_scheduled_date: date | None = None
    ) -> GradeResult:
        """Return W, L, P, or ? when results are not yet available."""

    @abstractmethod
    def test_connection(self) -> None:
        """Raise GradingConnectionError when the backend is unreachable."""

    @abstractmethod
    def is_connected(self) -> bool:
        """Report whether the backend connection is open."""

    @abstractmethod
    def close(self) -> None:
        """Release backend resources."""
