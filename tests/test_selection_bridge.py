"""Tests for SelectionSignalBridge."""

from subedit.core.document import DialogueLine, SubtitleDocument
from subedit.core.document_controller import DocumentSelectionController
from subedit.ui.selection_bridge import SelectionSignalBridge


def _controller() -> DocumentSelectionController:
    return DocumentSelectionController(
        SubtitleDocument([DialogueLine(text="a"), DialogueLine(text="b")])
    )


def test_bridge_emits_controller_changes() -> None:
    controller = _controller()
    bridge = SelectionSignalBridge()
    active: list = []
    selections: list = []
    bridge.active_line_changed.connect(active.append)
    bridge.selected_set_changed.connect(selections.append)
    bridge.bind(controller)

    controller.next_line()

    first = controller.document.first()
    assert active == [first]
    assert selections == [frozenset({first})]
    assert bridge.controller() is controller


def test_rebinding_detaches_previous_controller() -> None:
    old = _controller()
    new = _controller()
    bridge = SelectionSignalBridge()
    active: list = []
    bridge.active_line_changed.connect(active.append)

    bridge.bind(old)
    bridge.bind(new)
    old.next_line()

    assert active == []
    assert old.listener_count() == 0
    assert new.listener_count() == 1


def test_unbinding_stops_signals() -> None:
    controller = _controller()
    bridge = SelectionSignalBridge()
    active: list = []
    bridge.active_line_changed.connect(active.append)
    bridge.bind(controller)
    bridge.bind(None)

    controller.next_line()

    assert active == []
    assert bridge.controller() is None
