"""Tests for selection controllers and listener notification."""

from __future__ import annotations

import pytest

from subedit.core.document import DialogueLine, LineHandle, SubtitleDocument
from subedit.core.document_controller import DocumentSelectionController
from subedit.core.selection import (
    BaseSelectionController,
    DummySelectionController,
    SelectionListener,
    SubtitleSelection,
)
from subedit.errors import ReentrantSelectionChangeError


class RecordingListener(SelectionListener):
    def __init__(self) -> None:
        self.active: list[LineHandle | None] = []
        self.selections: list[SubtitleSelection] = []

    def on_active_line_changed(self, line: LineHandle | None) -> None:
        self.active.append(line)

    def on_selected_set_changed(self, selection: SubtitleSelection) -> None:
        self.selections.append(selection)

    def reset(self) -> None:
        self.active.clear()
        self.selections.clear()


def _document(count: int = 3) -> SubtitleDocument:
    return SubtitleDocument(
        DialogueLine(start_ms=i * 1000, end_ms=(i + 1) * 1000, text=f"line {i}")
        for i in range(count)
    )


@pytest.fixture
def controller() -> DocumentSelectionController:
    return DocumentSelectionController(_document())


@pytest.fixture
def listener(controller: DocumentSelectionController) -> RecordingListener:
    recorder = RecordingListener()
    controller.add_selection_listener(recorder)
    return recorder


class TestActiveLine:

    def test_set_then_get_returns_line(self, controller):
        first = controller.document.first()
        controller.set_active_line(first)
        assert controller.active_line() == first

    def test_new_value_notifies_once(self, controller, listener):
        first = controller.document.first()
        controller.set_active_line(first)
        assert listener.active == [first]
        assert listener.selections == []

    def test_same_value_does_not_notify(self, controller, listener):
        first = controller.document.first()
        controller.set_active_line(first)
        listener.reset()
        controller.set_active_line(first)
        assert listener.active == []

    def test_none_to_none_does_not_notify(self, controller, listener):
        controller.set_active_line(None)
        assert listener.active == []

    def test_clearing_active_line_notifies_with_none(self, controller, listener):
        controller.set_active_line(controller.document.first())
        listener.reset()
        controller.set_active_line(None)
        assert controller.active_line() is None
        assert listener.active == [None]


class TestSelectedSet:

    def test_set_then_get_returns_set(self, controller):
        handles = controller.document.handles()[:2]
        assert controller.set_selected_set(handles) is True
        assert controller.selected_set() == frozenset(handles)

    def test_change_notifies_with_new_set(self, controller, listener):
        handles = controller.document.handles()[:2]
        controller.set_selected_set(handles)
        assert listener.selections == [frozenset(handles)]
        assert listener.active == []

    def test_same_content_in_other_order_does_not_notify(self, controller, listener):
        first, second, third = controller.document.handles()
        controller.set_selected_set([first, second, third])
        listener.reset()
        assert controller.set_selected_set([third, first, second]) is True
        assert listener.selections == []

    def test_empty_to_empty_does_not_notify(self, controller, listener):
        controller.set_selected_set([])
        assert listener.selections == []

    def test_refuses_stale_line_and_keeps_state(self, controller, listener):
        first, second, third = controller.document.handles()
        controller.set_selected_set([first])
        controller.document.remove([third])
        listener.reset()

        assert controller.set_selected_set([second, third]) is False
        assert controller.selected_set() == frozenset({first})
        assert listener.selections == []

    def test_refuses_foreign_line(self, controller, listener):
        foreign = LineHandle(slot=42, generation=0)
        assert controller.set_selected_set([foreign]) is False
        assert controller.selected_set() == frozenset()
        assert listener.selections == []

    def test_selected_set_is_a_copy(self, controller):
        handles = controller.document.handles()
        controller.set_selected_set(handles[:1])
        snapshot = controller.selected_set()
        controller.set_selected_set(handles)
        assert snapshot == frozenset(handles[:1])


class TestNavigation:

    def test_next_line_moves_and_collapses_selection(self, controller, listener):
        first, second, third = controller.document.handles()
        controller.set_active_line(first)
        controller.set_selected_set([first, third])
        listener.reset()

        controller.next_line()

        assert controller.active_line() == second
        assert controller.selected_set() == frozenset({second})
        assert listener.active == [second]
        assert listener.selections == [frozenset({second})]

    def test_prev_line_moves_back(self, controller, listener):
        first, second, _ = controller.document.handles()
        controller.set_active_line(second)
        listener.reset()

        controller.prev_line()

        assert controller.active_line() == first
        assert controller.selected_set() == frozenset({first})
        assert listener.active == [first]
        assert listener.selections == [frozenset({first})]

    def test_next_line_at_last_line_is_silent(self, controller, listener):
        last = controller.document.last()
        controller.set_active_line(last)
        controller.set_selected_set(controller.document.handles())
        listener.reset()

        controller.next_line()

        assert controller.active_line() == last
        assert controller.selected_set() == frozenset(controller.document.handles())
        assert listener.active == []
        assert listener.selections == []

    def test_prev_line_at_first_line_is_silent(self, controller, listener):
        first = controller.document.first()
        controller.set_active_line(first)
        listener.reset()

        controller.prev_line()

        assert controller.active_line() == first
        assert listener.active == []
        assert listener.selections == []

    def test_next_line_without_active_line_starts_at_first(self, controller):
        controller.next_line()
        assert controller.active_line() == controller.document.first()

    def test_prev_line_without_active_line_starts_at_last(self, controller):
        controller.prev_line()
        assert controller.active_line() == controller.document.last()

    def test_navigation_on_empty_document_is_silent(self):
        controller = DocumentSelectionController(SubtitleDocument())
        recorder = RecordingListener()
        controller.add_selection_listener(recorder)
        controller.next_line()
        controller.prev_line()
        assert controller.active_line() is None
        assert recorder.active == []
        assert recorder.selections == []

    def test_navigation_from_stale_active_line_is_silent(self, controller, listener):
        _, second, _ = controller.document.handles()
        controller.set_active_line(second)
        controller.document.remove([second])
        listener.reset()

        controller.next_line()

        assert controller.active_line() == second
        assert listener.active == []


class TestListeners:

    def test_removed_listener_is_not_notified(self, controller, listener):
        controller.remove_selection_listener(listener)
        controller.set_active_line(controller.document.first())
        controller.set_selected_set(controller.document.handles())
        controller.next_line()
        assert listener.active == []
        assert listener.selections == []

    def test_registering_twice_notifies_once(self, controller, listener):
        controller.add_selection_listener(listener)
        controller.set_active_line(controller.document.first())
        assert len(listener.active) == 1
        assert controller.listener_count() == 1

    def test_every_listener_is_notified(self, controller, listener):
        other = RecordingListener()
        controller.add_selection_listener(other)
        controller.next_line()
        assert listener.active == other.active == [controller.document.first()]

    def test_removing_unknown_listener_is_noop(self, controller, listener):
        controller.remove_selection_listener(RecordingListener())
        assert controller.listener_count() == 1

    def test_listener_may_unsubscribe_during_notification(self, controller):
        class OneShot(RecordingListener):
            def on_active_line_changed(self, line):
                super().on_active_line_changed(line)
                controller.remove_selection_listener(self)

        one_shot = OneShot()
        controller.add_selection_listener(one_shot)
        controller.next_line()
        controller.next_line()
        assert len(one_shot.active) == 1

    def test_mutating_from_callback_is_rejected(self, controller):
        class Meddler(RecordingListener):
            def on_active_line_changed(self, line):
                controller.set_selected_set([])

        controller.add_selection_listener(Meddler())
        with pytest.raises(ReentrantSelectionChangeError):
            controller.set_active_line(controller.document.first())


class TestGridOperations:

    def test_select_all_and_clear(self, controller, listener):
        controller.select_all()
        assert controller.selected_set() == frozenset(controller.document.handles())
        controller.clear_selection()
        assert controller.selected_set() == frozenset()
        assert len(listener.selections) == 2

    def test_select_range_is_inclusive_in_document_order(self, controller):
        first, second, third = controller.document.handles()
        assert controller.select_range(third, first) is True
        assert controller.selected_in_order() == [first, second, third]
        assert controller.active_line() == first

    def test_select_range_with_stale_anchor_is_refused(self, controller):
        first, _, third = controller.document.handles()
        controller.document.remove([first])
        assert controller.select_range(first, third) is False
        assert controller.selected_set() == frozenset()

    def test_delete_active_line_moves_to_following_line(self, controller, listener):
        first, second, third = controller.document.handles()
        controller.set_active_line(second)
        controller.set_selected_set([second])
        listener.reset()

        removed = controller.delete_lines([second])

        assert removed == [second]
        assert controller.active_line() == third
        assert controller.selected_set() == frozenset({third})
        assert listener.active == [third]
        assert listener.selections == [frozenset({third})]
        assert controller.document.handles() == [first, third]

    def test_delete_last_lines_falls_back_to_previous(self, controller):
        first, second, third = controller.document.handles()
        controller.set_active_line(third)
        controller.set_selected_set([second, third])
        controller.delete_lines([second, third])
        assert controller.active_line() == first
        assert controller.selected_set() == frozenset({first})

    def test_delete_unselected_line_keeps_state_silent(self, controller, listener):
        first, _, third = controller.document.handles()
        controller.set_active_line(first)
        controller.set_selected_set([first])
        listener.reset()

        controller.delete_lines([third])

        assert controller.active_line() == first
        assert listener.active == []
        assert listener.selections == []

    def test_delete_everything_clears_state(self, controller, listener):
        controller.set_active_line(controller.document.first())
        controller.select_all()
        listener.reset()

        controller.delete_lines(controller.document.handles())

        assert controller.active_line() is None
        assert controller.selected_set() == frozenset()
        assert listener.active == [None]
        assert listener.selections == [frozenset()]


class TestBaseController:

    def test_announcements_reach_listeners(self):
        base = _MinimalController()
        recorder = RecordingListener()
        base.add_selection_listener(recorder)
        handle = LineHandle(0, 0)
        base._announce_active_line_changed(handle)
        base._announce_selected_set_changed(frozenset({handle}))
        assert recorder.active == [handle]
        assert recorder.selections == [frozenset({handle})]

    def test_cannot_instantiate_without_storage(self):
        with pytest.raises(TypeError):
            BaseSelectionController()  # type: ignore[abstract]


class _MinimalController(BaseSelectionController):
    def set_active_line(self, line):
        pass

    def active_line(self):
        return None

    def set_selected_set(self, lines):
        return False

    def selected_set(self):
        return frozenset()

    def next_line(self):
        pass

    def prev_line(self):
        pass


class TestDummyController:

    def test_accessors_are_empty(self):
        dummy = DummySelectionController()
        assert dummy.active_line() is None
        assert dummy.selected_set() == frozenset()

    def test_mutators_leave_state_and_never_notify(self):
        dummy = DummySelectionController()
        recorder = RecordingListener()
        dummy.add_selection_listener(recorder)
        handle = LineHandle(0, 0)

        dummy.set_active_line(handle)
        assert dummy.set_selected_set([handle]) is False
        dummy.next_line()
        dummy.prev_line()

        assert dummy.active_line() is None
        assert dummy.selected_set() == frozenset()
        assert recorder.active == []
        assert recorder.selections == []

    def test_empty_selection_is_accepted(self):
        assert DummySelectionController().set_selected_set([]) is True
