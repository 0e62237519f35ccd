"""Error taxonomy surfaced by the dispatcher."""

from __future__ import annotations


class EngineError(Exception):
    """Base class for errors reported as typed error responses."""

    error_type = "engine_error"


class InvalidInput(EngineError, ValueError):
    """Malformed or missing fields in a request payload."""

    error_type = "invalid_input"


class UnknownOperation(EngineError):
    """Request kind is not recognized."""

    error_type = "unknown_operation"

    def __init__(self, kind: object):
        super().__init__(f"Unknown operation '{kind}'")
        self.kind = kind


class AnalyzerFailure(EngineError):
    """Unexpected exception raised inside an analyzer."""

    error_type = "analyzer_failure"

    def __init__(self, kind: str, cause: BaseException):
        super().__init__(f"{kind} failed: {type(cause).__name__}: {cause}")
        self.kind = kind
        self.cause = cause
