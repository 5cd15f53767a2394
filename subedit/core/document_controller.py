"""Selection controller over a SubtitleDocument."""

from __future__ import annotations

import logging
from typing import Iterable

from subedit.core.document import LineHandle, SubtitleDocument
from subedit.core.selection import (
    EMPTY_SELECTION,
    BaseSelectionController,
    SubtitleSelection,
)

logger = logging.getLogger(__name__)


class DocumentSelectionController(BaseSelectionController):
    """Tracks the active line and selected set of one open document.

    A selected set is refused when it names a line that is not (or no
    longer) part of the document. The active line is not checked.
    """

    def __init__(self, document: SubtitleDocument) -> None:
        super().__init__()
        self._document = document
        self._active: LineHandle | None = None
        self._selected: SubtitleSelection = EMPTY_SELECTION

    @property
    def document(self) -> SubtitleDocument:
        return self._document

    # -- SelectionController --

    def set_active_line(self, line: LineHandle | None) -> None:
        self._check_not_announcing("set_active_line")
        if line == self._active:
            return
        self._active = line
        self._announce_active_line_changed(line)

    def active_line(self) -> LineHandle | None:
        return self._active

    def set_selected_set(self, lines: Iterable[LineHandle]) -> bool:
        self._check_not_announcing("set_selected_set")
        selection = frozenset(lines)
        invalid = [line for line in selection if not self._document.is_valid(line)]
        if invalid:
            logger.debug("refused selection with %d unknown line(s)", len(invalid))
            return False
        if selection == self._selected:
            return True
        self._selected = selection
        self._announce_selected_set_changed(selection)
        return True

    def selected_set(self) -> SubtitleSelection:
        return self._selected

    def next_line(self) -> None:
        self._check_not_announcing("next_line")
        if self._active is None:
            target = self._document.first()
        else:
            target = self._document.next_handle(self._active)
        if target is not None:
            self._move_to(target)

    def prev_line(self) -> None:
        self._check_not_announcing("prev_line")
        if self._active is None:
            target = self._document.last()
        else:
            target = self._document.prev_handle(self._active)
        if target is not None:
            self._move_to(target)

    # -- grid conveniences --

    def selected_in_order(self) -> list[LineHandle]:
        return [handle for handle in self._document if handle in self._selected]

    def select_all(self) -> None:
        self.set_selected_set(self._document.handles())

    def clear_selection(self) -> None:
        self.set_selected_set(EMPTY_SELECTION)

    def select_range(self, anchor: LineHandle, target: LineHandle) -> bool:
        """Select every line between *anchor* and *target* and activate *target*."""
        start = self._document.index_of(anchor)
        end = self._document.index_of(target)
        if start is None or end is None:
            return False
        if start > end:
            start, end = end, start
        handles = self._document.handles()[start:end + 1]
        if not self.set_selected_set(handles):
            return False
        self.set_active_line(target)
        return True

    def delete_lines(self, lines: Iterable[LineHandle]) -> list[LineHandle]:
        """Remove lines from the document and drop them from the selection state.

        If the active line is removed, the first surviving line after it
        becomes active, or the last surviving line before it.
        """
        self._check_not_announcing("delete_lines")
        order = self._document.handles()
        removed = self._document.remove(lines)
        if not removed:
            return []
        gone = set(removed)

        active = self._active
        if active in gone:
            active = self._replacement_for(active, order, gone)
        selection = frozenset(line for line in self._selected if line not in gone)
        if not selection and active is not None and self._active in gone:
            selection = frozenset({active})

        active_changed = active != self._active
        selection_changed = selection != self._selected
        self._active = active
        self._selected = selection
        if active_changed:
            self._announce_active_line_changed(active)
        if selection_changed:
            self._announce_selected_set_changed(selection)
        return removed

    # -- internals --

    def _move_to(self, target: LineHandle) -> None:
        selection = frozenset({target})
        active_changed = target != self._active
        selection_changed = selection != self._selected
        self._active = target
        self._selected = selection
        logger.debug("navigated to %s", target)
        if active_changed:
            self._announce_active_line_changed(target)
        if selection_changed:
            self._announce_selected_set_changed(selection)

    @staticmethod
    def _replacement_for(
        line: LineHandle,
        order: list[LineHandle],
        gone: set[LineHandle],
    ) -> LineHandle | None:
        index = order.index(line)
        for candidate in order[index + 1:]:
            if candidate not in gone:
                return candidate
        for candidate in reversed(order[:index]):
            if candidate not in gone:
                return candidate
        return None
