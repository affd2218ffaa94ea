"""Ticket-tracking leg spec mapping."""

from .mapper import (
    map_parse_result_to_contract_leg_spec,
    map_parse_result_to_contract_leg_specs,
    validate_contract_leg_spec,
)
from .models import ContractLegSpec, ContractMappingOptions

__all__ = [
    "ContractLegSpec",
    "ContractMappingOptions",
    "map_parse_result_to_contract_leg_spec",
    "map_parse_result_to_contract_leg_specs",
    "validate_contract_leg_spec",
]
