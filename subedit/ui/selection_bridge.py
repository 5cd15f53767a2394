"""Qt signal adapter for selection controller notifications."""

from __future__ import annotations

from PySide6.QtCore import QObject, Signal

from subedit.core.document import LineHandle
from subedit.core.selection import SelectionController, SelectionListener, SubtitleSelection


class _Forwarder(SelectionListener):
    def __init__(self, bridge: SelectionSignalBridge) -> None:
        self._bridge = bridge

    def on_active_line_changed(self, line: LineHandle | None) -> None:
        self._bridge.active_line_changed.emit(line)

    def on_selected_set_changed(self, selection: SubtitleSelection) -> None:
        self._bridge.selected_set_changed.emit(selection)


class SelectionSignalBridge(QObject):
    """Re-emits a controller's notifications as Qt signals.

    Signals are emitted synchronously, so directly connected slots run on
    the call stack of the controller mutation like any other listener.
    """

    active_line_changed = Signal(object)    # LineHandle | None
    selected_set_changed = Signal(object)   # frozenset[LineHandle]

    def __init__(self, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._listener = _Forwarder(self)
        self._controller: SelectionController | None = None

    def controller(self) -> SelectionController | None:
        return self._controller

    def bind(self, controller: SelectionController | None) -> None:
        """Listen to *controller*, detaching from the previous one."""
        if self._controller is not None:
            self._controller.remove_selection_listener(self._listener)
        self._controller = controller
        if controller is not None:
            controller.add_selection_listener(self._listener)
