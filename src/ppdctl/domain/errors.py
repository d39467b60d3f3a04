"""Error kinds raised by domain rules.

Each exception carries a stable ``code`` that the service layer copies
into ``ServiceError.code``. None of these are fatal; all are recoverable
by the caller.
"""

from __future__ import annotations

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Stable error codes surfaced through ServiceResult."""

    NOT_FOUND = "NOT_FOUND"
    INVALID_ASSIGNMENT = "INVALID_ASSIGNMENT"
    REQUIRED_SLOT_VIOLATION = "REQUIRED_SLOT_VIOLATION"
    NOT_A_CANDIDATE = "NOT_A_CANDIDATE"
    INCONSISTENT_STATE = "INCONSISTENT_STATE"
    INDEX_OUT_OF_RANGE = "INDEX_OUT_OF_RANGE"
    RENDER_FAILED = "RENDER_FAILED"


class PaperdollError(Exception):
    """Base class for every domain rule violation."""

    code: ErrorCode = ErrorCode.NOT_FOUND

    def __init__(self, message: str, **detail: Any) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail


class NotFoundError(PaperdollError):
    """A doll, slot, fragment, or paperdoll id does not exist."""

    code = ErrorCode.NOT_FOUND


class InvalidAssignmentError(PaperdollError):
    """A fragment is not a legal candidate for the target slot."""

    code = ErrorCode.INVALID_ASSIGNMENT


class RequiredSlotViolationError(PaperdollError):
    """Attempt to empty a required slot."""

    code = ErrorCode.REQUIRED_SLOT_VIOLATION


class NotACandidateError(PaperdollError):
    """The currently assigned fragment is missing from its slot's candidates."""

    code = ErrorCode.NOT_A_CANDIDATE


class InconsistentStateError(PaperdollError):
    """A required slot has no assignment when an operation needs one."""

    code = ErrorCode.INCONSISTENT_STATE


class IndexOutOfRangeError(PaperdollError):
    """A candidate index lies outside the slot's candidate list."""

    code = ErrorCode.INDEX_OUT_OF_RANGE


class RenderError(PaperdollError):
    """The catalog could not produce an image for a paperdoll."""

    code = ErrorCode.RENDER_FAILED
