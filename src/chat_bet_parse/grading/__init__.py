"""Grading boundary: parameter mapping and the client interface."""

from .client import GradingClient
from .mapper import map_parse_result_to_sql_parameters, validate_grading_parameters
from .models import GradeResult, GradingSqlParameters

__all__ = [
    "GradeResult",
    "GradingClient",
    "GradingSqlParameters",
    "map_parse_result_to_sql_parameters",
    "validate_grading_parameters",
]
