"""Validation module for propeller core."""

from .checks import validate_params, ValidationResult, Severity

__all__ = [
    "validate_params",
    "ValidationResult",
    "Severity",
]
