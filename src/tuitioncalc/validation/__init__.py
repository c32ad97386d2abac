"""Validation module for course selections."""

from tuitioncalc.validation.validator import (
    LineItemValidator,
    ValidationError,
    ValidationErrorType,
    ValidationResult,
)

__all__ = [
    "LineItemValidator",
    "ValidationError",
    "ValidationErrorType",
    "ValidationResult",
]
