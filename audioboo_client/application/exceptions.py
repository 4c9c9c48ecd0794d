"""
Core exceptions for the Audioboo API client.

This module defines a hierarchy of custom exceptions to allow for granular
error handling and clear separation of failure domains. The decode failures
(ResponseError and its subclasses) are never raised to the caller of a
domain decoder; they are delivered to a FailureSink instead.
"""


class AudiobooError(Exception):
    """Base exception for all component-specific errors."""
    pass


# --- Configuration Errors ---

class ConfigurationError(AudiobooError):
    """Raised for errors related to application configuration."""
    pass


# --- Infrastructure Errors ---

class InfrastructureError(AudiobooError):
    """Base class for errors related to external systems (network, API, etc.)."""
    pass


class TransportError(InfrastructureError):
    """Raised when a request to the Audioboo API cannot be completed."""
    pass


# --- Response Decoding Errors ---

class ResponseError(AudiobooError):
    """
    Base class for terminal failures while decoding an API response.

    Each subclass corresponds to exactly one notification category a
    FailureSink can receive.
    """
    pass


class ParseError(ResponseError):
    """Raised for malformed JSON or a missing/ill-typed required field."""

    def __init__(self, message: str = "Could not parse JSON response"):
        super().__init__(message)


class VersionMismatch(ResponseError):
    """Raised when the envelope carries an unexpected protocol version."""

    def __init__(self, expected: int, actual: int):
        super().__init__(
            f"Response version {actual} did not match expected {expected}"
        )
        self.expected = expected
        self.actual = actual


class ApiErrorReported(ResponseError):
    """Raised when the response body carries a server-reported error."""

    def __init__(self, code: int, description: str):
        super().__init__(f"Error response [{code}]: {description}")
        self.code = code
        self.description = description


# --- Recoverable Field Errors ---

class FieldTimestampUnparsable(AudiobooError):
    """
    Raised when a timestamp field does not match the expected format.

    Handled locally by the timestamp decoder; the field is set to None.
    """
    pass
