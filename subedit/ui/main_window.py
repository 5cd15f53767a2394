"""Main editor window: subtitle grid plus timing controls."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from PySide6.QtCore import QItemSelection, QItemSelectionModel, QModelIndex
from PySide6.QtWidgets import (
    QAbstractItemView, QHBoxLayout, QLabel, QLineEdit, QMainWindow,
    QPushButton, QTableView, QVBoxLayout, QWidget,
)

from subedit.core.document import LineHandle, SubtitleDocument
from subedit.core.document_controller import DocumentSelectionController
from subedit.core.selection import DummySelectionController, SelectionController, SubtitleSelection
from subedit.errors import ErrorCode, SubEditError, format_error_for_user
from subedit.ui.keybindings import (
    DEFAULT_KEYBINDS,
    KeybindConflictError,
    KeybindRegistry,
    create_bound_action,
)
from subedit.ui.models.line_table_model import LineTableModel
from subedit.ui.selection_bridge import SelectionSignalBridge
from subedit.ui.shortcuts_dialog import ShortcutsDialog
from subedit.ui.validators import BoundValue, NumericValidator

if TYPE_CHECKING:
    from subedit.config.settings import AppSettings

logger = logging.getLogger(__name__)


class EditorWindow(QMainWindow):
    """Subtitle grid whose selection is owned by a SelectionController."""

    def __init__(self, settings: AppSettings, document: SubtitleDocument | None = None) -> None:
        super().__init__()
        self._settings = settings
        self._document: SubtitleDocument | None = None
        self._controller: SelectionController = DummySelectionController()
        self._syncing = False
        startup_error: SubEditError | None = None
        try:
            self._keybind_registry = KeybindRegistry(
                DEFAULT_KEYBINDS,
                self._settings.keybind_overrides,
            )
        except (KeybindConflictError, ValueError) as exc:
            startup_error = SubEditError(
                ErrorCode.CONFIG_INVALID,
                message="Custom keyboard shortcuts were invalid and have been reset.",
                details={"reason": str(exc)},
            )
            self._settings.keybind_overrides = {}
            self._keybind_registry = KeybindRegistry(DEFAULT_KEYBINDS)

        self.setWindowTitle("SubEdit")
        self.setMinimumSize(700, 400)
        self.resize(1000, 650)

        self._bridge = SelectionSignalBridge(self)
        self._bridge.active_line_changed.connect(self._on_active_line_changed)
        self._bridge.selected_set_changed.connect(self._on_selected_set_changed)

        self._setup_layout()
        self._setup_menu()
        self._restore_state()
        self.set_document(document)
        if startup_error is not None:
            self._report_error(startup_error)

    def controller(self) -> SelectionController:
        return self._controller

    def shift_field(self) -> QLineEdit:
        return self._shift_edit

    def table_view(self) -> QTableView:
        return self._table

    def set_document(self, document: SubtitleDocument | None) -> None:
        """Open *document*; None switches to an empty session."""
        self._document = document
        if document is None:
            self._controller = DummySelectionController()
        else:
            self._controller = DocumentSelectionController(document)
        self._syncing = True
        try:
            self._model.set_document(document if document is not None else SubtitleDocument())
        finally:
            self._syncing = False
        self._bridge.bind(self._controller)
        self._sync_view_from_controller()

    # -- layout --

    def _setup_layout(self) -> None:
        central = QWidget()
        self.setCentralWidget(central)
        outer = QVBoxLayout(central)

        self._model = LineTableModel(parent=self)
        self._table = QTableView()
        self._table.setModel(self._model)
        self._table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self._table.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self._table.horizontalHeader().setStretchLastSection(True)
        self._table.selectionModel().selectionChanged.connect(self._on_view_selection_changed)
        self._table.selectionModel().currentRowChanged.connect(self._on_view_current_changed)
        outer.addWidget(self._table, 1)

        timing_row = QHBoxLayout()
        timing_row.addWidget(QLabel("Shift by (s):"))
        self._shift_value = BoundValue(self._settings.shift_amount)
        self._shift_edit = QLineEdit()
        self._shift_edit.setMaximumWidth(120)
        self._shift_validator = NumericValidator(
            self._shift_value, is_float=True, is_signed=True, parent=self,
        )
        self._shift_validator.attach(self._shift_edit)
        self._shift_validator.transfer_to_widget()
        timing_row.addWidget(self._shift_edit)
        shift_btn = QPushButton("Shift Selected")
        shift_btn.clicked.connect(self.shift_selected_lines)
        timing_row.addWidget(shift_btn)
        timing_row.addStretch(1)
        self._active_label = QLabel("No active line")
        timing_row.addWidget(self._active_label)
        outer.addLayout(timing_row)

    def _setup_menu(self) -> None:
        file_menu = self.menuBar().addMenu("&File")
        file_menu.addAction(create_bound_action(
            parent=self,
            text="E&xit",
            keybind_id="app.exit",
            registry=self._keybind_registry,
            handler=self.close,
        ))

        lines_menu = self.menuBar().addMenu("&Lines")
        for keybind_id, text, handler in (
            ("line.next", "&Next Line", self._next_line),
            ("line.prev", "&Previous Line", self._prev_line),
            ("line.select_all", "Select &All", self._select_all),
            ("line.clear_selection", "&Clear Selection", self._clear_selection),
            ("line.delete", "&Delete Lines", self.delete_selected_lines),
            ("timing.shift", "&Shift Times", self.shift_selected_lines),
        ):
            lines_menu.addAction(create_bound_action(
                parent=self,
                text=text,
                keybind_id=keybind_id,
                registry=self._keybind_registry,
                handler=handler,
            ))

        help_menu = self.menuBar().addMenu("&Help")
        help_menu.addAction(create_bound_action(
            parent=self,
            text="Keyboard &Shortcuts",
            keybind_id="help.keyboard_shortcuts",
            registry=self._keybind_registry,
            handler=self.open_shortcuts,
        ))

    def _restore_state(self) -> None:
        geometry = self._settings.window_geometry
        if geometry:
            self.restoreGeometry(geometry)

    def closeEvent(self, event) -> None:
        self._settings.window_geometry = self.saveGeometry()
        try:
            self._read_shift_seconds()
        except SubEditError:
            logger.info("not saving unparsable shift amount %r", self._shift_edit.text())
        else:
            self._settings.shift_amount = self._shift_value.get()
        self._bridge.bind(None)
        super().closeEvent(event)

    # -- actions --

    def _next_line(self) -> None:
        self._controller.next_line()

    def _prev_line(self) -> None:
        self._controller.prev_line()

    def _select_all(self) -> None:
        if isinstance(self._controller, DocumentSelectionController):
            self._controller.select_all()

    def _clear_selection(self) -> None:
        if isinstance(self._controller, DocumentSelectionController):
            self._controller.clear_selection()

    def delete_selected_lines(self) -> None:
        if not isinstance(self._controller, DocumentSelectionController):
            return
        self._syncing = True
        try:
            removed = self._controller.delete_lines(self._controller.selected_set())
            self._model.refresh()
        finally:
            self._syncing = False
        logger.info("deleted %d line(s)", len(removed))
        self._sync_view_from_controller()

    def shift_selected_lines(self) -> bool:
        """Shift the selected lines by the shift field's seconds."""
        if self._document is None or not isinstance(self._controller, DocumentSelectionController):
            return False
        try:
            seconds = self._read_shift_seconds()
        except SubEditError as error:
            self._report_error(error)
            return False
        self._settings.shift_amount = self._shift_value.get()
        count = self._document.shift(self._controller.selected_in_order(), round(seconds * 1000))
        logger.info("shifted %d line(s) by %.3fs", count, seconds)
        self._refresh_model()
        self._sync_view_from_controller()
        return True

    def _read_shift_seconds(self) -> float:
        if not self._shift_validator.transfer_from_widget():
            raise SubEditError(ErrorCode.SHIFT_AMOUNT_INVALID, details={"text": self._shift_edit.text()})
        raw = self._shift_value.get()
        try:
            return float(raw.replace(",", "."))
        except ValueError:
            raise SubEditError(ErrorCode.SHIFT_AMOUNT_INVALID, details={"text": raw}) from None

    def _report_error(self, error: SubEditError) -> None:
        logger.warning("%s", error.to_dict())
        self.statusBar().showMessage(format_error_for_user(error), 6000)

    def open_shortcuts(self) -> ShortcutsDialog:
        dialog = ShortcutsDialog(self._keybind_registry, self)
        dialog.show()
        return dialog

    def _refresh_model(self) -> None:
        self._syncing = True
        try:
            self._model.refresh()
        finally:
            self._syncing = False

    # -- controller -> view --

    def _on_active_line_changed(self, line: LineHandle | None) -> None:
        if self._syncing:
            return
        self._apply_active_line(line)

    def _on_selected_set_changed(self, selection: SubtitleSelection) -> None:
        if self._syncing:
            return
        self._apply_selection(selection)

    def _sync_view_from_controller(self) -> None:
        self._apply_selection(self._controller.selected_set())
        self._apply_active_line(self._controller.active_line())

    def _apply_selection(self, selection: SubtitleSelection) -> None:
        view_selection = QItemSelection()
        last_column = self._model.columnCount() - 1
        for handle in selection:
            row = self._model.row_of(handle)
            if row is None:
                continue
            view_selection.select(self._model.index(row, 0), self._model.index(row, last_column))
        self._syncing = True
        try:
            self._table.selectionModel().select(
                view_selection,
                QItemSelectionModel.SelectionFlag.ClearAndSelect,
            )
        finally:
            self._syncing = False

    def _apply_active_line(self, line: LineHandle | None) -> None:
        row = self._model.row_of(line) if line is not None else None
        self._syncing = True
        try:
            if row is None:
                self._table.selectionModel().setCurrentIndex(
                    QModelIndex(), QItemSelectionModel.SelectionFlag.NoUpdate,
                )
                self._active_label.setText("No active line")
            else:
                index = self._model.index(row, 0)
                self._table.selectionModel().setCurrentIndex(
                    index, QItemSelectionModel.SelectionFlag.NoUpdate,
                )
                self._table.scrollTo(index)
                self._active_label.setText(f"Line {row + 1}")
        finally:
            self._syncing = False

    # -- view -> controller --

    def _on_view_selection_changed(self, *_args) -> None:
        if self._syncing:
            return
        rows = {index.row() for index in self._table.selectionModel().selectedRows()}
        handles = [self._model.handle_at(row) for row in sorted(rows)]
        accepted = self._controller.set_selected_set(h for h in handles if h is not None)
        if not accepted:
            self._apply_selection(self._controller.selected_set())

    def _on_view_current_changed(self, current: QModelIndex, _previous: QModelIndex) -> None:
        if self._syncing:
            return
        line = self._model.handle_at(current.row()) if current.isValid() else None
        self._controller.set_active_line(line)
        if self._controller.active_line() != line:
            self._apply_active_line(self._controller.active_line())
