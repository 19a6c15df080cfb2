"""
Error kinds raised by the imagery and analysis agents.

Agents raise SurveyError with an explicit ErrorKind; the survey controller
catches it at its boundary and keeps only the kind and a display string.
"""
from enum import Enum


class ErrorKind(str, Enum):
    MISSING_CONFIGURATION = "missing_configuration"
    NETWORK = "network"
    REQUEST_DENIED = "request_denied"
    ZERO_RESULTS = "zero_results"
    OVER_QUERY_LIMIT = "over_query_limit"
    INVALID_REQUEST = "invalid_request"
    UNKNOWN_STATUS = "unknown_status"
    GEOCODE_EMPTY = "geocode_empty"
    IMAGERY_FETCH_FAILED = "imagery_fetch_failed"
    ANALYSIS_FAILED = "analysis_failed"
    EXPORT_FAILED = "export_failed"
    UNKNOWN = "unknown"


UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


class SurveyError(Exception):
    """A user-facing failure tagged with its ErrorKind."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"SurveyError({self.kind.value!r}, {self.message!r})"
