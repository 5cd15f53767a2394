"""Active line and selected set tracking for an editing session.

Two things are managed by a selection controller: the active line and the
selected set. There is zero or one active line; it decides which values the
user is presented to modify. The selected set may contain any number of
lines and decides which lines are actually modified. In most cases the
active line is a member of the selected set, but nothing here enforces it.

There is one controller per editing session. The primary implementation is
DocumentSelectionController, driven by the subtitle grid; the dummy
controller stands in when no document is open.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Iterable

from subedit.core.document import LineHandle
from subedit.errors import ReentrantSelectionChangeError

SubtitleSelection = frozenset[LineHandle]

EMPTY_SELECTION: SubtitleSelection = frozenset()


class SelectionListener(ABC):
    """Receives selection change notifications.

    Callbacks run synchronously on the call stack of the mutating operation.
    They must not call the controller's mutators.
    """

    @abstractmethod
    def on_active_line_changed(self, line: LineHandle | None) -> None:
        ...

    @abstractmethod
    def on_selected_set_changed(self, selection: SubtitleSelection) -> None:
        ...


class SelectionController(ABC):
    """Abstract interface for subtitle selection controllers."""

    @abstractmethod
    def set_active_line(self, line: LineHandle | None) -> None:
        """Change the active line; None means there is no active line.

        Listeners are only notified if the active line actually changed.
        """

    @abstractmethod
    def active_line(self) -> LineHandle | None:
        ...

    @abstractmethod
    def set_selected_set(self, lines: Iterable[LineHandle]) -> bool:
        """Replace the selected set with *lines*, entirely or not at all.

        Returns False when the implementation refuses the new set. Listeners
        are notified only for an accepted set whose content differs from the
        current one.
        """

    @abstractmethod
    def selected_set(self) -> SubtitleSelection:
        ...

    @abstractmethod
    def next_line(self) -> None:
        """Make the next line in sequence active and the sole selection.

        Does nothing when there is no next line.
        """

    @abstractmethod
    def prev_line(self) -> None:
        """Make the previous line in sequence active and the sole selection.

        Does nothing when there is no previous line.
        """

    @abstractmethod
    def add_selection_listener(self, listener: SelectionListener) -> None:
        ...

    @abstractmethod
    def remove_selection_listener(self, listener: SelectionListener) -> None:
        ...


class BaseSelectionController(SelectionController):
    """Listener bookkeeping and change announcement for concrete controllers.

    Subclasses own the active line and selected set storage and the
    navigation policy, and call the ``_announce_*`` methods after mutating.
    """

    def __init__(self) -> None:
        # keyed by id() so registration is by identity even for listeners
        # that define __eq__
        self._listeners: dict[int, SelectionListener] = {}
        self._announcing = 0

    def add_selection_listener(self, listener: SelectionListener) -> None:
        self._listeners.setdefault(id(listener), listener)

    def remove_selection_listener(self, listener: SelectionListener) -> None:
        if self._listeners.get(id(listener)) is listener:
            del self._listeners[id(listener)]

    def listener_count(self) -> int:
        return len(self._listeners)

    def _announce_active_line_changed(self, line: LineHandle | None) -> None:
        self._announcing += 1
        try:
            for listener in list(self._listeners.values()):
                listener.on_active_line_changed(line)
        finally:
            self._announcing -= 1

    def _announce_selected_set_changed(self, selection: SubtitleSelection) -> None:
        self._announcing += 1
        try:
            for listener in list(self._listeners.values()):
                listener.on_selected_set_changed(selection)
        finally:
            self._announcing -= 1

    def _check_not_announcing(self, operation: str) -> None:
        if self._announcing:
            raise ReentrantSelectionChangeError(operation)


class DummySelectionController(SelectionController):
    """Selection controller for a permanently empty document."""

    def set_active_line(self, line: LineHandle | None) -> None:
        pass

    def active_line(self) -> LineHandle | None:
        return None

    def set_selected_set(self, lines: Iterable[LineHandle]) -> bool:
        return not frozenset(lines)

    def selected_set(self) -> SubtitleSelection:
        return EMPTY_SELECTION

    def next_line(self) -> None:
        pass

    def prev_line(self) -> None:
        pass

    def add_selection_listener(self, listener: SelectionListener) -> None:
        pass

    def remove_selection_listener(self, listener: SelectionListener) -> None:
        pass
