"""Tests for subedit.errors."""

from subedit.core.document import LineHandle
from subedit.errors import (
    ERROR_MESSAGES,
    ErrorCode,
    ReentrantSelectionChangeError,
    SubEditError,
    format_error_for_user,
)


def test_default_message_comes_from_code() -> None:
    error = SubEditError(ErrorCode.LINE_STALE)
    assert error.message == ERROR_MESSAGES[ErrorCode.LINE_STALE]


def test_str_includes_line_and_details() -> None:
    error = SubEditError(ErrorCode.LINE_NOT_FOUND, line=LineHandle(3, 1), details={"slot": 3})
    text = str(error)
    assert "line#3@1" in text
    assert "slot=3" in text


def test_to_dict_is_serializable() -> None:
    error = SubEditError(ErrorCode.LINE_STALE, line=LineHandle(0, 2))
    data = error.to_dict()
    assert data["code"] == "LINE_STALE"
    assert data["line"] == "line#0@2"


def test_reentrant_error_records_operation() -> None:
    error = ReentrantSelectionChangeError("next_line")
    assert error.code is ErrorCode.SELECTION_REENTRANT
    assert error.details == {"operation": "next_line"}


def test_format_generic_exception() -> None:
    text = format_error_for_user(ValueError("boom"))
    assert text.startswith("ValueError: boom")


def test_every_code_has_a_message() -> None:
    assert set(ERROR_MESSAGES) == set(ErrorCode)


def test_shift_amount_error_explains_expected_input() -> None:
    error = SubEditError(ErrorCode.SHIFT_AMOUNT_INVALID, details={"text": "-"})
    text = format_error_for_user(error)
    assert "seconds" in text
    assert error.to_dict()["details"] == {"text": "-"}
