"""Application settings via QSettings."""

from __future__ import annotations

from pathlib import Path
from typing import Mapping

from PySide6.QtCore import QSettings


class AppSettings:
    """Wraps QSettings for persistent app configuration."""

    def __init__(self, qsettings: QSettings | None = None) -> None:
        self._qs = qsettings if qsettings is not None else QSettings("SubEdit", "SubEdit")

    # -- editing --

    @property
    def shift_amount(self) -> str:
        """Last time shift in seconds, as typed into the shift field."""
        raw = self._qs.value("edit/shift_amount", "0", type=str)
        return (raw or "").strip() or "0"

    @shift_amount.setter
    def shift_amount(self, value: str) -> None:
        self._qs.setValue("edit/shift_amount", (value or "").strip() or "0")

    # -- keybind overrides --

    @property
    def keybind_overrides(self) -> dict[str, str]:
        raw = self._qs.value("ui/keybind_overrides", {})
        if raw is None:
            return {}
        if isinstance(raw, Mapping):
            source_items = raw.items()
        else:
            return {}
        cleaned: dict[str, str] = {}
        for key, value in source_items:
            if isinstance(key, str) and isinstance(value, str):
                cleaned[key] = value
        return cleaned

    @keybind_overrides.setter
    def keybind_overrides(self, value: dict[str, str]) -> None:
        cleaned: dict[str, str] = {}
        for key, item in value.items():
            if isinstance(key, str) and isinstance(item, str):
                cleaned[key] = item
        self._qs.setValue("ui/keybind_overrides", cleaned)

    # -- window geometry --

    @property
    def window_geometry(self) -> bytes | None:
        return self._qs.value("ui/window_geometry")

    @window_geometry.setter
    def window_geometry(self, value: bytes) -> None:
        self._qs.setValue("ui/window_geometry", value)

    # -- helpers --

    @property
    def app_data_dir(self) -> Path:
        path = self._app_data_dir()
        path.mkdir(parents=True, exist_ok=True)
        return path

    @staticmethod
    def _app_data_dir() -> Path:
        import os
        base = Path(os.environ.get("APPDATA", Path.home() / ".config"))
        return base / "subedit"
