"""
Data preparation — reading serialized scenarios, record validation, item eligibility.
"""

from .loader import load_scenario, read_scenario_json
from .validators import (
    ValidationResult,
    partition_scenario,
    require_horizon,
    validate_scenario,
)

__all__ = [
    "load_scenario",
    "read_scenario_json",
    "ValidationResult",
    "partition_scenario",
    "require_horizon",
    "validate_scenario",
]
