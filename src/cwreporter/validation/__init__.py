"""
Validation and error handling for the cwreporter package.
"""

from .exceptions import (
    BatchSubmissionError,
    ErrorSeverity,
    ReporterError,
    ValidationError,
    handle_cli_error,
    handle_config_error,
    handle_error,
)
from .validators import (
    validate_enum_choice,
    validate_namespace,
    validate_percentiles,
    validate_positive_float,
)

__all__ = [
    "BatchSubmissionError",
    "ErrorSeverity",
    "ReporterError",
    "ValidationError",
    "handle_cli_error",
    "handle_config_error",
    "handle_error",
    "validate_enum_choice",
    "validate_namespace",
    "validate_percentiles",
    "validate_positive_float",
]
