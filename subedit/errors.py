"""Error codes and error handling utilities for SubEdit."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from subedit.core.document import LineHandle


class ErrorCode(Enum):
    """Standardized error codes for SubEdit operations."""

    # Document errors
    LINE_NOT_FOUND = auto()
    LINE_STALE = auto()
    LINE_TIMING_INVALID = auto()

    # Selection errors
    SELECTION_REENTRANT = auto()

    # Input errors
    SHIFT_AMOUNT_INVALID = auto()

    # Configuration errors
    CONFIG_INVALID = auto()

    OPERATION_FAILED = auto()


ERROR_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.LINE_NOT_FOUND: "The subtitle line does not belong to this document.",
    ErrorCode.LINE_STALE: "The subtitle line was removed from the document.",
    ErrorCode.LINE_TIMING_INVALID: "The line ends before it starts. Check the start and end times.",

    ErrorCode.SELECTION_REENTRANT: "Selection changed while listeners were still being notified.",

    ErrorCode.SHIFT_AMOUNT_INVALID: "Enter a number of seconds to shift by, e.g. 1.5 or -0,25.",

    ErrorCode.CONFIG_INVALID: "Configuration is invalid and was reset to defaults.",

    ErrorCode.OPERATION_FAILED: "Operation failed. See details for more information.",
}


@dataclass
class SubEditError(Exception):
    """Base exception for SubEdit with error code and context."""

    code: ErrorCode
    message: str = ""
    line: LineHandle | None = None
    details: dict[str, Any] = field(default_factory=dict)
    suggestion: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = ERROR_MESSAGES.get(self.code, "An unexpected error occurred.")
        if not self.suggestion and self.code in ERROR_MESSAGES:
            self.suggestion = ERROR_MESSAGES[self.code]

    def __str__(self) -> str:
        parts = [self.message]
        if self.line is not None:
            parts.append(f"\nLine: {self.line}")
        if self.details:
            details_str = " | ".join(f"{k}={v}" for k, v in self.details.items())
            parts.append(f"\nDetails: {details_str}")
        return "".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging or UI display."""
        return {
            "code": self.code.name,
            "message": self.message,
            "line": str(self.line) if self.line is not None else None,
            "details": self.details,
            "suggestion": self.suggestion,
        }


class ReentrantSelectionChangeError(SubEditError):
    """Raised when a listener mutates the controller from inside a notification."""

    def __init__(self, operation: str) -> None:
        super().__init__(ErrorCode.SELECTION_REENTRANT, details={"operation": operation})


def format_error_for_user(error: SubEditError | Exception) -> str:
    """Format an error for display to the user."""
    if isinstance(error, SubEditError):
        parts = [error.message]
        if error.suggestion and error.suggestion != error.message:
            parts.append(f"\n\n{error.suggestion}")
        if error.line is not None:
            parts.append(f"\n\nLine: #{error.line.slot}")
        return "".join(parts)

    return format_error_for_user(
        SubEditError(
            ErrorCode.OPERATION_FAILED,
            message=f"{type(error).__name__}: {error}",
        )
    )
