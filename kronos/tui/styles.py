"""Terminal colours and styles for the interactive views."""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum

COLOR_BASE = "#191724"
COLOR_SURFACE = "#1f1d2e"
COLOR_OVERLAY = "#26233a"
COLOR_MUTED = "#6e6a86"
COLOR_SUBTEXT = "#908caa"
COLOR_TEXT = "#e0def4"
COLOR_LOVE = "#eb6f92"
COLOR_GOLD = "#f6c177"
COLOR_ROSE = "#ebbcba"
COLOR_PINE = "#31748f"
COLOR_FOAM = "#9ccfd8"
COLOR_IRIS = "#c4a7e7"
COLOR_MAUVE = COLOR_IRIS

_RESET = "\x1b[0m"
_ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")
_HEX_RE = re.compile(r"#([0-9a-fA-F]{6})")


class Align(Enum):
    """Horizontal alignment of text inside a fixed width."""

    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class Border(Enum):
    """Box-drawing border sets: corners, horizontal and vertical strokes."""

    NONE = None
    NORMAL = ("┌", "┐", "└", "┘", "─", "│")
    ROUNDED = ("╭", "╮", "╰", "╯", "─", "│")


def _rgb(color: str) -> tuple[int, int, int]:
    match = _HEX_RE.fullmatch(color)
    if match is None:
        raise ValueError(f"invalid colour: {color!r}")
    digits = match.group(1)
    return int(digits[0:2], 16), int(digits[2:4], 16), int(digits[4:6], 16)


def _char_width(char: str) -> int:
    if unicodedata.combining(char):
        return 0
    return 2 if unicodedata.east_asian_width(char) in ("W", "F") else 1


def _visible_width(text: str) -> int:
    return sum(_char_width(char) for char in _ANSI_RE.sub("", text))


@dataclass(frozen=True)
class Style:
    """Immutable text style rendered with ANSI escape sequences."""

    foreground: str | None = None
    background: str | None = None
    bold: bool = False
    padding: tuple[int, int] = (0, 0)
    width: int = 0
    align: Align = Align.LEFT
    border: Border = Border.NONE
    border_foreground: str | None = None

    def __post_init__(self) -> None:
        for color in (self.foreground, self.background, self.border_foreground):
            if color is not None:
                _rgb(color)
        vertical, horizontal = self.padding
        if vertical < 0 or horizontal < 0:
            raise ValueError("padding cannot be negative")
        if self.width < 0:
            raise ValueError("width cannot be negative")

    def _prefix(self) -> str:
        codes: list[str] = []
        if self.bold:
            codes.append("1")
        if self.foreground is not None:
            codes.append("38;2;{};{};{}".format(*_rgb(self.foreground)))
        if self.background is not None:
            codes.append("48;2;{};{};{}".format(*_rgb(self.background)))
        return f"\x1b[{';'.join(codes)}m" if codes else ""

    def _align(self, line: str, target: int) -> str:
        gap = target - _visible_width(line)
        if gap <= 0:
            return line
        if self.align is Align.RIGHT:
            return " " * gap + line
        if self.align is Align.CENTER:
            left = gap // 2
            return " " * left + line + " " * (gap - left)
        return line + " " * gap

    def render(self, text: str) -> str:
        """Apply the style to text, line by line."""
        vertical, horizontal = self.padding
        lines = text.split("\n")
        content = max(_visible_width(line) for line in lines)
        target = max(self.width - 2 * horizontal, content) if self.width else content

        side = " " * horizontal
        block = [side + self._align(line, target) + side for line in lines]
        blank = " " * (target + 2 * horizontal)
        block = [blank] * vertical + block + [blank] * vertical

        prefix = self._prefix()
        if prefix:
            block = [prefix + line + _RESET for line in block]

        if self.border is Border.NONE:
            return "\n".join(block)

        top_left, top_right, bottom_left, bottom_right, across, down = self.border.value
        inner = target + 2 * horizontal
        edge_prefix = (
            "\x1b[38;2;{};{};{}m".format(*_rgb(self.border_foreground))
            if self.border_foreground is not None
            else ""
        )
        edge_suffix = _RESET if edge_prefix else ""

        def edge(part: str) -> str:
            return edge_prefix + part + edge_suffix

        framed = [edge(top_left + across * inner + top_right)]
        framed.extend(edge(down) + line + edge(down) for line in block)
        framed.append(edge(bottom_left + across * inner + bottom_right))
        return "\n".join(framed)


STYLE_BASE = Style(foreground=COLOR_TEXT, background=COLOR_BASE)
STYLE_SURFACE = Style(foreground=COLOR_TEXT, background=COLOR_SURFACE)
STYLE_OVERLAY = Style(foreground=COLOR_TEXT, background=COLOR_OVERLAY)
STYLE_MUTED = Style(foreground=COLOR_MUTED)
STYLE_SUBTEXT = Style(foreground=COLOR_SUBTEXT)
STYLE_TITLE = Style(foreground=COLOR_IRIS, bold=True)
STYLE_HIGHLIGHT = Style(foreground=COLOR_TEXT, background=COLOR_OVERLAY)
STYLE_CURSOR = Style(foreground=COLOR_ROSE, bold=True)
STYLE_OK = Style(foreground=COLOR_FOAM)
STYLE_WARN = Style(foreground=COLOR_GOLD)
STYLE_FAIL = Style(foreground=COLOR_LOVE)
STYLE_BORDER = Style(
    border=Border.ROUNDED, border_foreground=COLOR_OVERLAY, padding=(0, 1)
)
STYLE_CARD = Style(border=Border.ROUNDED, border_foreground=COLOR_PINE, padding=(0, 1))
STYLE_STATUS_BAR = Style(
    foreground=COLOR_SUBTEXT, background=COLOR_SURFACE, padding=(0, 1)
)
STYLE_HELP = Style(foreground=COLOR_MUTED)
STYLE_INPUT = Style(border=Border.NORMAL, border_foreground=COLOR_PINE, padding=(0, 1))
STYLE_TAG = Style(foreground=COLOR_IRIS, background=COLOR_OVERLAY, padding=(0, 1))
STYLE_IRIS = Style(foreground=COLOR_IRIS)

_TYPE_COLORS = {
    "bugfix": COLOR_LOVE,
    "decision": COLOR_GOLD,
    "architecture": COLOR_PINE,
    "discovery": COLOR_FOAM,
    "pattern": COLOR_IRIS,
    "config": COLOR_ROSE,
    "preference": COLOR_MAUVE,
    "passive": COLOR_MUTED,
    "session": COLOR_SUBTEXT,
}


def obs_type_color(obs_type: str) -> str:
    """Colour used for an observation type; plain text colour when unknown."""
    return _TYPE_COLORS.get(str(obs_type), COLOR_TEXT)