"""Central keybinding registry and action helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Mapping

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction, QKeySequence
from PySide6.QtWidgets import QWidget


@dataclass(frozen=True, slots=True)
class KeybindSpec:
    """Declarative keybinding specification."""

    id: str
    label: str
    default_sequence: str
    description: str
    category: str
    scope: str = "window"


@dataclass(frozen=True, slots=True)
class ResolvedKeybind:
    """A keybinding resolved with overrides and normalized sequence."""

    id: str
    label: str
    sequence: str
    description: str
    category: str
    scope: str


class KeybindConflictError(ValueError):
    """Raised when two keybinds share the same shortcut in the same scope."""


DEFAULT_KEYBINDS: tuple[KeybindSpec, ...] = (
    KeybindSpec(
        id="app.exit",
        label="Exit Application",
        default_sequence="Ctrl+Q",
        description="Close SubEdit.",
        category="Application",
    ),
    KeybindSpec(
        id="line.next",
        label="Next Line",
        default_sequence="Ctrl+Down",
        description="Make the next line active and select only it.",
        category="Lines",
    ),
    KeybindSpec(
        id="line.prev",
        label="Previous Line",
        default_sequence="Ctrl+Up",
        description="Make the previous line active and select only it.",
        category="Lines",
    ),
    KeybindSpec(
        id="line.select_all",
        label="Select All Lines",
        default_sequence="Ctrl+A",
        description="Select every line in the document.",
        category="Lines",
    ),
    KeybindSpec(
        id="line.clear_selection",
        label="Clear Selection",
        default_sequence="Ctrl+Shift+A",
        description="Deselect all lines.",
        category="Lines",
    ),
    KeybindSpec(
        id="line.delete",
        label="Delete Lines",
        default_sequence="Ctrl+Del",
        description="Delete the selected lines.",
        category="Lines",
    ),
    KeybindSpec(
        id="timing.shift",
        label="Shift Times",
        default_sequence="Ctrl+I",
        description="Shift the selected lines by the amount in the shift field.",
        category="Timing",
    ),
    KeybindSpec(
        id="help.keyboard_shortcuts",
        label="Show Keyboard Shortcuts",
        default_sequence="Ctrl+/",
        description="List every keyboard shortcut.",
        category="Help",
    ),
)


class KeybindRegistry:
    """Resolve keybind specs with overrides and validate conflicts."""

    def __init__(
        self,
        specs: tuple[KeybindSpec, ...],
        overrides: Mapping[str, str] | None = None,
    ) -> None:
        self._specs = specs
        self._specs_by_id = self._build_spec_index(specs)
        self._sequences: dict[str, str] = {}
        data = dict(overrides or {})
        for spec in specs:
            raw_sequence = data.get(spec.id, spec.default_sequence)
            self._sequences[spec.id] = self._normalize_sequence(raw_sequence, spec.id)
        self._validate_conflicts()

    @staticmethod
    def _build_spec_index(specs: tuple[KeybindSpec, ...]) -> dict[str, KeybindSpec]:
        index: dict[str, KeybindSpec] = {}
        for spec in specs:
            if spec.id in index:
                raise ValueError(f"Duplicate keybind id: {spec.id}")
            index[spec.id] = spec
        return index

    @staticmethod
    def _normalize_sequence(raw: str, keybind_id: str) -> str:
        if not isinstance(raw, str):
            raise ValueError(f"Shortcut override for {keybind_id} must be a string")
        text = raw.strip()
        if not text:
            return ""
        sequence = QKeySequence.fromString(text, QKeySequence.SequenceFormat.PortableText)
        if sequence.isEmpty():
            raise ValueError(f"Invalid shortcut sequence for {keybind_id}: {raw}")
        return sequence.toString(QKeySequence.SequenceFormat.PortableText)

    def _validate_conflicts(self) -> None:
        occupied: dict[tuple[str, str], str] = {}
        for spec in self._specs:
            sequence = self._sequences.get(spec.id, "")
            if not sequence:
                continue
            key = (spec.scope, sequence)
            existing = occupied.get(key)
            if existing is not None and existing != spec.id:
                raise KeybindConflictError(
                    f"Shortcut conflict in {spec.scope} scope: {sequence} used by {existing} and {spec.id}"
                )
            occupied[key] = spec.id

    def sequence_for(self, keybind_id: str) -> str:
        if keybind_id not in self._specs_by_id:
            raise KeyError(f"Unknown keybind id: {keybind_id}")
        return self._sequences[keybind_id]

    def resolved_keybinds(self) -> list[ResolvedKeybind]:
        """Keybinds grouped by category, in declaration order within a category."""
        rows = [
            ResolvedKeybind(
                id=spec.id,
                label=spec.label,
                sequence=self._sequences[spec.id],
                description=spec.description,
                category=spec.category,
                scope=spec.scope,
            )
            for spec in self._specs
        ]
        return sorted(rows, key=lambda row: row.category)


def create_bound_action(
    *,
    parent: QWidget,
    text: str,
    keybind_id: str,
    registry: KeybindRegistry,
    handler: Callable[[], None],
) -> QAction:
    """Create a QAction wired to a handler and shortcut from the registry."""

    action = QAction(text, parent)
    shortcut = registry.sequence_for(keybind_id)
    if shortcut:
        action.setShortcut(shortcut)
        action.setShortcutContext(Qt.ShortcutContext.WindowShortcut)
    action.triggered.connect(handler)
    return action
