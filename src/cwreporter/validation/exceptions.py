"""
Exception types and consistent error logging for the reporter.

Configuration problems surface as ValidationError when a reporter is built.
Runtime failures derive from ReporterError; BatchSubmissionError is the only
one allowed to abort the remainder of a report cycle.
"""

import logging
import sys
from enum import Enum
from typing import Any, Optional, Sequence, Union

_module_logger = logging.getLogger(__name__)


class ErrorSeverity(Enum):
    """Severity levels for error handling."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.DEBUG: (logging.DEBUG, True),
    ErrorSeverity.INFO: (logging.INFO, False),
    ErrorSeverity.WARNING: (logging.WARNING, False),
    ErrorSeverity.ERROR: (logging.ERROR, True),
    ErrorSeverity.CRITICAL: (logging.CRITICAL, True),
}


class ValidationError(Exception):
    """
    Exception raised when reporter configuration fails validation.
    """

    def __init__(self, message: str, field_name: Optional[str] = None,
                 value: Any = None, severity: ErrorSeverity = ErrorSeverity.ERROR):
        super().__init__(message)
        self.field_name = field_name
        self.value = value
        self.severity = severity


class ReporterError(Exception):
    """Base class for failures while running a report cycle."""


class BatchSubmissionError(ReporterError):
    """
    Raised when the ingestion client rejects a batch.

    The original client exception is chained as ``__cause__``.
    """

    def __init__(self, namespace: str, points: Sequence[Any]):
        super().__init__(
            f"Failed submitting {len(points)} data points to namespace '{namespace}'"
        )
        self.namespace = namespace
        self.points = list(points)


def handle_error(
    error: Exception,
    context: str,
    severity: Union[ErrorSeverity, str] = ErrorSeverity.ERROR,
    reraise: bool = True,
    logger: Optional[logging.Logger] = None
) -> None:
    """
    Log an error at the level matching its severity, then optionally re-raise it.

    Tracebacks are attached for debug, error and critical severities.

    Args:
        error: The exception to report
        context: Where it happened, e.g. "config loading"
        severity: An ErrorSeverity or its string value
        reraise: Re-raise `error` after logging
        logger: Logger to report through (defaults to this module's logger)
    """
    if not isinstance(severity, ErrorSeverity):
        severity = ErrorSeverity(severity.lower())

    level, with_traceback = _LOG_LEVELS[severity]
    (logger or _module_logger).log(level, f"Error in {context}: {error}", exc_info=with_traceback)

    if reraise:
        raise error


def handle_config_error(error: Exception, context: str, **kwargs) -> None:
    """Handle configuration-related errors."""
    handle_error(error, f"config {context}", **kwargs)


def handle_cli_error(error: Exception, context: str, **kwargs) -> None:
    """Handle CLI-related errors by logging and exiting."""
    exit_code = kwargs.pop('exit_code', 1)
    include_traceback = kwargs.pop('include_traceback', False)

    severity = kwargs.pop('severity', ErrorSeverity.ERROR if include_traceback else ErrorSeverity.WARNING)
    handle_error(error, f"CLI {context}", severity=severity, reraise=False, **kwargs)

    sys.exit(exit_code)
