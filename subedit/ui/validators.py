"""Numeric input validation for line edits."""

from __future__ import annotations

from PySide6.QtCore import QObject
from PySide6.QtWidgets import QLineEdit
from PySide6.QtGui import QValidator

_SIGNS = frozenset("+-")
_DECIMAL_POINTS = frozenset(".,")


class BoundValue:
    """Mutable string holder a validator transfers field contents to and from."""

    def __init__(self, value: str = "") -> None:
        self._value = value

    def get(self) -> str:
        return self._value

    def set(self, value: str) -> None:
        self._value = value

    def __repr__(self) -> str:
        return f"BoundValue({self._value!r})"


def pretty_float(value: float) -> str:
    """Format *value* without trailing zeros, e.g. ``1.5`` or ``2``."""
    text = f"{value:f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return text


class NumericValidator(QValidator):
    """Restricts a QLineEdit to digits, an optional sign and decimal point.

    A sign is admitted only as the first character of a signed field, a
    decimal point (``.`` or ``,``) only once in a float field.
    """

    def __init__(
        self,
        target: BoundValue | None = None,
        *,
        is_float: bool = False,
        is_signed: bool = False,
        parent: QObject | None = None,
    ) -> None:
        super().__init__(parent)
        self._target = target
        self._is_float = is_float
        self._is_signed = is_signed
        self._widget: QLineEdit | None = None

    @property
    def is_float(self) -> bool:
        return self._is_float

    @property
    def is_signed(self) -> bool:
        return self._is_signed

    @property
    def target(self) -> BoundValue | None:
        return self._target

    def widget(self) -> QLineEdit | None:
        return self._widget

    def attach(self, line_edit: QLineEdit) -> None:
        self._widget = line_edit
        line_edit.setValidator(self)

    def clone(self) -> NumericValidator:
        return NumericValidator(
            self._target,
            is_float=self._is_float,
            is_signed=self._is_signed,
            parent=self.parent(),
        )

    # -- character filtering --

    def check_character(
        self,
        ch: str,
        *,
        is_first: bool,
        can_sign: bool,
        got_decimal: bool,
    ) -> tuple[bool, bool]:
        """Return whether *ch* is admitted and the updated decimal flag."""
        if ch in _SIGNS:
            return is_first and can_sign and self._is_signed, got_decimal
        # nothing may be typed in front of an existing sign
        if is_first and not can_sign:
            return False, got_decimal
        if ch in _DECIMAL_POINTS:
            if not self._is_float or got_decimal:
                return False, got_decimal
            return True, True
        return "0" <= ch <= "9", got_decimal

    def admits_insertion(self, text: str, ch: str, sel_start: int, sel_end: int | None = None) -> bool:
        """Whether typing *ch* over ``text[sel_start:sel_end]`` is allowed.

        Per-keystroke form of the filter for callers that see key events
        rather than the whole proposed text. Qt line edits go through
        ``validate`` instead.
        """
        if sel_end is None:
            sel_end = sel_start
        kept = text[:sel_start] + text[sel_end:]
        has_sign = any(c in _SIGNS for c in kept)
        has_decimal = any(c in _DECIMAL_POINTS for c in kept)
        admitted, _ = self.check_character(
            ch,
            is_first=sel_start == 0,
            can_sign=not has_sign,
            got_decimal=has_decimal,
        )
        return admitted

    def is_valid_text(self, text: str) -> bool:
        if not text:
            return False
        got_decimal = False
        for index, ch in enumerate(text):
            admitted, got_decimal = self.check_character(
                ch, is_first=index == 0, can_sign=True, got_decimal=got_decimal,
            )
            if not admitted:
                return False
        return True

    # -- QValidator overrides --

    def validate(self, text: str, pos: int) -> tuple[QValidator.State, str, int]:
        if not text:
            return QValidator.State.Intermediate, text, pos
        if not self.is_valid_text(text):
            return QValidator.State.Invalid, text, pos
        if not any("0" <= ch <= "9" for ch in text):
            return QValidator.State.Intermediate, text, pos
        return QValidator.State.Acceptable, text, pos

    # -- value transfer --

    def transfer_to_widget(self) -> bool:
        if self._widget is None:
            return False
        raw = self._target.get() if self._target is not None else ""
        self._widget.setText(self._format_value(raw))
        return True

    def transfer_from_widget(self) -> bool:
        if self._widget is None:
            return False
        text = self._widget.text()
        if not self.is_valid_text(text):
            return False
        if self._target is not None:
            self._target.set(text)
        return True

    def _format_value(self, raw: str) -> str:
        cleaned = raw.strip().replace(",", ".")
        if self._is_float:
            try:
                return pretty_float(float(cleaned))
            except ValueError:
                return "0"
        try:
            return str(int(cleaned))
        except ValueError:
            return "0"
