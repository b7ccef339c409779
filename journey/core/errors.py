"""
Domain exceptions for the trip workflow.

Every exception carries a client-facing ``message``. The HTTP layer renders
any ``JourneyError`` as ``400 {"message": ...}``; the message of a
``StorageFailure`` is always generic so database details never leak.

Usage:
    from journey.core.errors import NotFound

    raise NotFound("trip not found")
"""

from enum import Enum
from typing import List, Optional


class ErrorCode(str, Enum):
    """Machine-readable category of a workflow failure."""

    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    ALREADY_CONFIRMED = "ALREADY_CONFIRMED"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    NOTIFICATION_FAILURE = "NOTIFICATION_FAILURE"


class JourneyError(Exception):
    """Base exception for all Journey workflow errors."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidInput(JourneyError):
    """Malformed identifier, failed schema validation or cross-field mismatch."""

    code = ErrorCode.INVALID_INPUT

    def __init__(self, message: str, violations: Optional[List[str]] = None):
        self.violations = list(violations or [])
        super().__init__(message)


class NotFound(JourneyError):
    """Referenced trip or participant does not exist."""

    code = ErrorCode.NOT_FOUND


class AlreadyConfirmed(JourneyError):
    """Confirmation was already applied; a domain conflict, not a fault."""

    code = ErrorCode.ALREADY_CONFIRMED


class StorageFailure(JourneyError):
    """A repository call failed for reasons opaque to the workflow."""

    code = ErrorCode.STORAGE_FAILURE

    def __init__(self, operation: str, message: str = "something went wrong, try again"):
        self.operation = operation
        super().__init__(message)


class NotificationFailure(JourneyError):
    """Sending an email failed. Only ever logged, never returned to a client."""

    code = ErrorCode.NOTIFICATION_FAILURE
