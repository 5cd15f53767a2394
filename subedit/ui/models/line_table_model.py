"""QAbstractTableModel over the lines of a SubtitleDocument."""

from __future__ import annotations

from typing import Any

from PySide6.QtCore import QAbstractTableModel, QModelIndex, Qt

from subedit.core.document import LineHandle, SubtitleDocument

COLUMNS = ["#", "Start", "End", "Style", "Actor", "Text"]


def format_ass_time(ms: int) -> str:
    """Render milliseconds as H:MM:SS.cc."""
    total_cs = max(ms, 0) // 10
    cs = total_cs % 100
    total_seconds = total_cs // 100
    seconds = total_seconds % 60
    minutes = (total_seconds // 60) % 60
    hours = total_seconds // 3600
    return f"{hours}:{minutes:02d}:{seconds:02d}.{cs:02d}"


class LineTableModel(QAbstractTableModel):
    """Table model for displaying subtitle lines in document order."""

    def __init__(self, document: SubtitleDocument | None = None, parent=None) -> None:
        super().__init__(parent)
        self._document = document if document is not None else SubtitleDocument()
        self._handles: list[LineHandle] = self._document.handles()

    def set_document(self, document: SubtitleDocument) -> None:
        self.beginResetModel()
        self._document = document
        self._handles = document.handles()
        self.endResetModel()

    def refresh(self) -> None:
        """Re-read the document after lines were added, removed or edited."""
        self.beginResetModel()
        self._handles = self._document.handles()
        self.endResetModel()

    def handle_at(self, row: int) -> LineHandle | None:
        if 0 <= row < len(self._handles):
            return self._handles[row]
        return None

    def row_of(self, handle: LineHandle) -> int | None:
        return self._document.index_of(handle)

    # -- QAbstractTableModel overrides --

    def rowCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(self._handles)

    def columnCount(self, parent: QModelIndex = QModelIndex()) -> int:
        return len(COLUMNS)

    def headerData(self, section: int, orientation: Qt.Orientation,
                   role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if role == Qt.ItemDataRole.DisplayRole and orientation == Qt.Orientation.Horizontal:
            if 0 <= section < len(COLUMNS):
                return COLUMNS[section]
        return None

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole) -> Any:
        if not index.isValid() or role != Qt.ItemDataRole.DisplayRole:
            return None

        line = self._document.get(self._handles[index.row()])
        if line is None:
            return None
        col = index.column()

        if col == 0:
            return str(index.row() + 1)
        elif col == 1:
            return format_ass_time(line.start_ms)
        elif col == 2:
            return format_ass_time(line.end_ms)
        elif col == 3:
            return line.style
        elif col == 4:
            return line.actor
        elif col == 5:
            return line.text
        return None
