from __future__ import annotations

"""Error taxonomy for interview operations.

Every request-level failure carries the HTTP status it maps to, so the web
layer can render ``{"error": message}`` without knowing the individual cases.
"""


class ConfigError(RuntimeError):
    """Raised at startup when required configuration is missing."""


class InterviewError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(InterviewError):
    status_code = 400


class SessionNotFound(InterviewError):
    status_code = 400

    def __init__(self, message: str = "No active interview session") -> None:
        super().__init__(message)


class UpstreamError(InterviewError):
    status_code = 500
