"""
Domain exceptions for the study backend.

Every error can carry the full list of precondition violations that caused
it, so a caller sees all broken constraints at once.
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Violation:
    code: str
    message: str
    field: str | None = None

    def as_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "field": self.field}


class FlashStudyError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, violations: list[Violation] | None = None):
        super().__init__(message)
        self.message = message
        self.violations = list(violations or [])


class NotFoundError(FlashStudyError):
    """Entity is missing or not visible to the caller."""


class InvalidArgumentError(FlashStudyError):
    """Malformed identifier or out-of-range value."""


class InvalidReferenceError(FlashStudyError):
    """Outcome update targets a flashcard that is not part of the session."""


class EmptyDeckError(FlashStudyError):
    """A session cannot be started on a deck without flashcards."""


class AlreadyCompletedError(FlashStudyError):
    """The session has already been completed."""


class ConcurrentUpdateError(FlashStudyError):
    """The session was modified by another request in the meantime."""


class UnavailableError(FlashStudyError):
    """The underlying store failed."""


# Order matters: the first matching code decides the exception type.
VIOLATION_ERRORS: list[tuple[str, type[FlashStudyError]]] = [
    ("already_completed", AlreadyCompletedError),
    ("unknown_flashcard", InvalidReferenceError),
    ("empty_deck", EmptyDeckError),
    ("invalid_argument", InvalidArgumentError),
]


def error_for_violations(violations: list[Violation]) -> FlashStudyError:
    codes = {v.code for v in violations}
    for code, error_cls in VIOLATION_ERRORS:
        if code in codes:
            message = next(v.message for v in violations if v.code == code)
            return error_cls(message, violations)
    return InvalidArgumentError(violations[0].message, violations)
