"""In-memory subtitle document with generation-checked line handles."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Iterable, Iterator

from subedit.errors import ErrorCode, SubEditError

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LineHandle:
    """Non-owning reference to a line stored in a SubtitleDocument.

    The document keeps lines in an arena of slots. Removing a line bumps the
    generation of its slot, so handles taken before the removal stop
    resolving even after the slot is reused.
    """

    slot: int
    generation: int

    def __str__(self) -> str:
        return f"line#{self.slot}@{self.generation}"


@dataclass
class DialogueLine:
    """One dialogue event of a subtitle script."""

    start_ms: int = 0
    end_ms: int = 0
    style: str = "Default"
    actor: str = ""
    text: str = ""
    comment: bool = False

    @property
    def duration_ms(self) -> int:
        return self.end_ms - self.start_ms


class SubtitleDocument:
    """Owns dialogue lines and their logical order."""

    def __init__(self, lines: Iterable[DialogueLine] = ()) -> None:
        self._slots: list[DialogueLine | None] = []
        self._generations: list[int] = []
        self._free: list[int] = []
        self._order: list[LineHandle] = []
        self._positions: dict[LineHandle, int] | None = None
        for line in lines:
            self.append(line)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[LineHandle]:
        return iter(list(self._order))

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, LineHandle) and self.is_valid(handle)

    # -- mutation --

    def append(self, line: DialogueLine) -> LineHandle:
        return self.insert(len(self._order), line)

    def insert(self, index: int, line: DialogueLine) -> LineHandle:
        """Insert *line* before position *index* and return its handle."""
        if line.end_ms < line.start_ms:
            raise SubEditError(
                ErrorCode.LINE_TIMING_INVALID,
                details={"start_ms": line.start_ms, "end_ms": line.end_ms},
            )
        if self._free:
            slot = self._free.pop()
            self._slots[slot] = line
        else:
            slot = len(self._slots)
            self._slots.append(line)
            self._generations.append(0)
        handle = LineHandle(slot, self._generations[slot])
        index = max(0, min(index, len(self._order)))
        self._order.insert(index, handle)
        self._positions = None
        return handle

    def remove(self, handles: Iterable[LineHandle]) -> list[LineHandle]:
        """Remove lines; returns the handles that were actually removed.

        Stale or foreign handles are ignored.
        """
        doomed = {handle for handle in handles if self.is_valid(handle)}
        if not doomed:
            return []
        removed = [handle for handle in self._order if handle in doomed]
        self._order = [handle for handle in self._order if handle not in doomed]
        for handle in removed:
            self._slots[handle.slot] = None
            self._generations[handle.slot] += 1
            self._free.append(handle.slot)
        self._positions = None
        logger.debug("removed %d line(s)", len(removed))
        return removed

    def clear(self) -> None:
        self.remove(list(self._order))

    def shift(self, handles: Iterable[LineHandle], delta_ms: int) -> int:
        """Move lines in time by *delta_ms*, clamping at zero. Returns the count shifted."""
        count = 0
        for handle in handles:
            line = self.get(handle)
            if line is None:
                continue
            duration = line.duration_ms
            line.start_ms = max(0, line.start_ms + delta_ms)
            line.end_ms = line.start_ms + duration
            count += 1
        return count

    # -- lookup --

    def is_valid(self, handle: LineHandle) -> bool:
        slot = handle.slot
        return (
            0 <= slot < len(self._slots)
            and self._slots[slot] is not None
            and self._generations[slot] == handle.generation
        )

    def get(self, handle: LineHandle) -> DialogueLine | None:
        if not self.is_valid(handle):
            return None
        return self._slots[handle.slot]

    def line(self, handle: LineHandle) -> DialogueLine:
        """Resolve *handle*, raising SubEditError when it no longer resolves."""
        if self.is_valid(handle):
            line = self._slots[handle.slot]
            assert line is not None
            return line
        if 0 <= handle.slot < len(self._slots) and handle.generation < self._generations[handle.slot]:
            raise SubEditError(ErrorCode.LINE_STALE, line=handle)
        raise SubEditError(ErrorCode.LINE_NOT_FOUND, line=handle)

    def handles(self) -> list[LineHandle]:
        return list(self._order)

    def index_of(self, handle: LineHandle) -> int | None:
        if self._positions is None:
            self._positions = {h: i for i, h in enumerate(self._order)}
        return self._positions.get(handle)

    def handle_at(self, index: int) -> LineHandle | None:
        if 0 <= index < len(self._order):
            return self._order[index]
        return None

    def first(self) -> LineHandle | None:
        return self._order[0] if self._order else None

    def last(self) -> LineHandle | None:
        return self._order[-1] if self._order else None

    def next_handle(self, handle: LineHandle) -> LineHandle | None:
        index = self.index_of(handle)
        if index is None:
            return None
        return self.handle_at(index + 1)

    def prev_handle(self, handle: LineHandle) -> LineHandle | None:
        index = self.index_of(handle)
        if index is None or index == 0:
            return None
        return self._order[index - 1]
