"""
Error kinds raised while creating or listing events.

Every creation failure aborts the whole operation; the insert is always the
last step, so nothing is persisted when one of these is raised.
"""

from __future__ import annotations

from typing import List, Optional


class EventError(Exception):
    """Base exception for event operations."""

    kind = "EventError"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind, "retryable": self.retryable}


class MissingImage(EventError):
    """Submission lacks the required image attachment."""

    kind = "MissingImage"

    def __init__(self, message: str = "image file is required"):
        super().__init__(message)


class UploadFailure(EventError):
    """Media host rejected the image or could not be reached."""

    kind = "UploadFailure"
    retryable = True


class InvalidDateFormat(EventError):
    kind = "InvalidDateFormat"

    def __init__(self, value):
        super().__init__(f"Invalid date format: {value}")
        self.value = value


class InvalidTimeFormat(EventError):
    kind = "InvalidTimeFormat"

    def __init__(self, value):
        super().__init__(f"Invalid time format: {value}")
        self.value = value


class ValidationFailure(EventError):
    """A required field is absent, blank, or of the wrong shape."""

    kind = "ValidationFailure"

    def __init__(self, problems: List[str]):
        super().__init__("; ".join(problems) or "invalid event")
        self.problems = problems


class PersistenceFailure(EventError):
    """Store unreachable, or a constraint kept rejecting the write."""

    kind = "PersistenceFailure"
    retryable = True

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause
