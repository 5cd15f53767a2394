"""Keyboard shortcuts reference dialog."""

from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QAbstractItemView,
    QDialog,
    QDialogButtonBox,
    QHeaderView,
    QLabel,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from subedit.ui.keybindings import KeybindRegistry


class ShortcutsDialog(QDialog):
    """Read-only listing of the resolved keybinds."""

    def __init__(self, keybinds: KeybindRegistry, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self.setWindowTitle("Keyboard Shortcuts")
        self.setMinimumSize(520, 360)
        self._keybinds = keybinds
        self._table = QTableWidget()
        self._setup_ui()

    def table(self) -> QTableWidget:
        return self._table

    def _setup_ui(self) -> None:
        layout = QVBoxLayout(self)
        intro = QLabel("Next/Previous Line make the new line active and select only it.")
        intro.setWordWrap(True)
        layout.addWidget(intro)

        table = self._table
        table.setColumnCount(3)
        table.setHorizontalHeaderLabels(["Action", "Shortcut", "Category"])
        table.setEditTriggers(QAbstractItemView.EditTrigger.NoEditTriggers)
        table.setSelectionMode(QAbstractItemView.SelectionMode.NoSelection)
        table.setFocusPolicy(Qt.FocusPolicy.NoFocus)
        table.verticalHeader().setVisible(False)
        header = table.horizontalHeader()
        header.setSectionResizeMode(0, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(1, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(2, QHeaderView.ResizeMode.ResizeToContents)

        rows = self._keybinds.resolved_keybinds()
        table.setRowCount(len(rows))
        for row_index, entry in enumerate(rows):
            table.setItem(row_index, 0, QTableWidgetItem(entry.label))
            table.setItem(row_index, 1, QTableWidgetItem(entry.sequence or "-"))
            table.setItem(row_index, 2, QTableWidgetItem(entry.category))
        layout.addWidget(table, 1)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close)
        buttons.rejected.connect(self.reject)
        layout.addWidget(buttons)
