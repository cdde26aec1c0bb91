"""
sitescore/errors.py — error kinds raised by the fetch/analyze pipeline.
"""


class AnalysisError(Exception):
    """Base class; ``message`` is safe to show to the end user."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidUrl(AnalysisError):
    """Empty or malformed URL input. Surfaced to the caller as-is."""


class FetchFailed(AnalysisError):
    """Network, relay, status or empty-body failure. Callers fall back to demo data."""


class NoMetricsAvailable(FetchFailed):
    """The response could not be parsed at all (e.g. relay body is not JSON)."""
