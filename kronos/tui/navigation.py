"""Screens of the interactive interface and cursor movement over lists."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Generic, Sequence, TypeVar

T = TypeVar("T")


class Screen(Enum):
    """Views the interactive interface can show."""

    DASHBOARD = auto()
    SEARCH = auto()
    SEARCH_RESULTS = auto()
    RECENT = auto()
    OBSERVATION_DETAIL = auto()
    TIMELINE = auto()
    SESSIONS = auto()
    SESSION_DETAIL = auto()
    DOCTOR = auto()
    DOCTOR_FIX = auto()
    CONFIG = auto()
    OLLAMA = auto()
    LLM = auto()
    EXPORT = auto()
    SETUP = auto()


@dataclass(frozen=True)
class MenuItem:
    """One entry of the dashboard menu."""

    label: str
    screen: Screen
    key: str


_DASHBOARD_MENU: tuple[MenuItem, ...] = (
    MenuItem("Buscar observaciones", Screen.SEARCH, "s"),
    MenuItem("Recientes", Screen.RECENT, "r"),
    MenuItem("Sesiones", Screen.SESSIONS, "S"),
    MenuItem("Doctor", Screen.DOCTOR, "d"),
    MenuItem("Configuracion", Screen.CONFIG, "c"),
    MenuItem("Ollama", Screen.OLLAMA, "o"),
    MenuItem("LLM Config", Screen.LLM, "l"),
    MenuItem("Exportar", Screen.EXPORT, "e"),
    MenuItem("Setup agentes", Screen.SETUP, "a"),
)


@dataclass
class CursorList(Generic[T]):
    """A sequence of items with a cursor that stays within its bounds."""

    items: Sequence[T] = field(default_factory=tuple)
    cursor: int = 0

    def __post_init__(self) -> None:
        if self.cursor < 0:
            raise ValueError("cursor cannot be negative")
        if self.items and self.cursor >= len(self.items):
            raise ValueError("cursor is past the end of the list")

    def __len__(self) -> int:
        return len(self.items)

    def move_down(self) -> int:
        """Move the cursor one row down unless it is on the last item."""
        if self.cursor < len(self.items) - 1:
            self.cursor += 1
        return self.cursor

    def move_up(self) -> int:
        """Move the cursor one row up unless it is on the first item."""
        if self.cursor > 0:
            self.cursor -= 1
        return self.cursor

    def selected(self) -> T | None:
        """The item under the cursor, or None when the list is empty."""
        if self.cursor < len(self.items):
            return self.items[self.cursor]
        return None


def dashboard_menu() -> tuple[MenuItem, ...]:
    """Entries of the dashboard menu, in display order."""
    return _DASHBOARD_MENU


def menu_item_for_key(key: str) -> MenuItem:
    """The dashboard entry bound to a shortcut key; keys are case-sensitive."""
    for item in _DASHBOARD_MENU:
        if item.key == key:
            return item
    raise KeyError(key)