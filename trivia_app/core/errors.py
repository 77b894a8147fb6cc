"""Exceptions raised by the trivia core.

Every error carries the HTTP status the API layer reports for it, so the
server can translate the whole hierarchy with a single exception handler.
"""

from __future__ import annotations


class TriviaError(Exception):
    """Base class for errors surfaced to API clients."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TriviaError):
    """Raised when request fields are missing or malformed."""

    status_code = 400


class AuthenticationError(TriviaError):
    """Raised when credentials do not match a known account."""

    status_code = 401


class NotFoundError(TriviaError):
    """Raised when a session, question or user id does not resolve."""

    status_code = 404


class ConflictError(TriviaError):
    """Raised when an operation would violate the session or account state."""

    status_code = 409


class SourceNotImplementedError(TriviaError):
    """Raised for question sources that are not wired up yet."""

    status_code = 501


class QuestionCatalogError(Exception):
    """Raised when the question catalog cannot be loaded at startup."""
