"""
Infrastructure-specific decorators, providing cross-cutting concerns like
routing decode failures to a FailureSink instead of the caller.
"""

import functools
import logging

from ..application.domain import FailureSink
from ..application.exceptions import (
    ApiErrorReported,
    ParseError,
    ResponseError,
    VersionMismatch,
)

logger = logging.getLogger(__name__)


def _log_failure(fn_name: str, failure: ResponseError):
    """Log a terminal decode failure the way the failure kind deserves."""
    if isinstance(failure, ApiErrorReported):
        logger.error(
            f"{fn_name}: error response [{failure.code}]: "
            f"{failure.description}"
        )
    elif isinstance(failure, VersionMismatch):
        logger.error(
            f"{fn_name}: response version did not match our expectations "
            f"(expected {failure.expected}, got {failure.actual})."
        )
    elif isinstance(failure, ParseError):
        logger.error(f"{fn_name}: could not parse JSON response: {failure}")
    else:
        logger.error(f"{fn_name}: {type(failure).__name__}: {failure}")


def reports_failures(decode):
    """
    Turn a raising decoder into one that reports to a sink and returns None.

    The wrapped function takes the raw response and a FailureSink. Any
    ResponseError it raises ends the decode, so the sink receives exactly
    one failure; it is logged first and the caller then receives None
    instead of an exception.
    """

    @functools.wraps(decode)
    def wrapper(raw, sink: FailureSink):
        try:
            return decode(raw)
        except ResponseError as failure:
            _log_failure(decode.__name__, failure)
            sink.report(failure)
            return None

    return wrapper
