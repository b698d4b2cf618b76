import re

import pytest

from kronos.tui.styles import (
    COLOR_GOLD,
    COLOR_LOVE,
    COLOR_MUTED,
    COLOR_TEXT,
    STYLE_CARD,
    STYLE_CURSOR,
    Align,
    Border,
    Style,
    obs_type_color,
)

ANSI = re.compile(r"\x1b\[[0-9;]*m")


def plain(text):
    return ANSI.sub("", text)


def test_unstyled_render_returns_text_unchanged():
    assert Style().render("abc") == "abc"


def test_bold_wraps_with_escape_and_reset():
    out = Style(bold=True).render("abc")
    assert out.startswith("\x1b[1")
    assert out.endswith("\x1b[0m")
    assert plain(out) == "abc"


def test_foreground_uses_truecolor_sequence():
    out = Style(foreground=COLOR_LOVE).render("x")
    assert "38;2;235;111;146" in out
    assert plain(out) == "x"


def test_background_sequence_present():
    out = Style(background=COLOR_TEXT).render("x")
    assert "\x1b[48;2;" in out


def test_width_pads_every_line():
    out = Style(width=10).render("ab\nabcd")
    lines = out.split("\n")
    assert [len(line) for line in lines] == [10, 10]
    assert lines[0].startswith("ab")


def test_center_alignment_keeps_text_in_middle():
    out = Style(width=9, align=Align.CENTER).render("abc")
    assert len(out) == 9
    assert out.strip() == "abc"
    assert out.index("abc") == (len(out) - len("abc")) // 2


def test_right_alignment():
    out = Style(width=6, align=Align.RIGHT).render("ab")
    assert out.endswith("ab")
    assert len(out) == 6


def test_horizontal_padding_surrounds_text():
    out = Style(padding=(0, 2)).render("x")
    assert out.strip() == "x"
    assert len(out) == 5


def test_vertical_padding_adds_blank_lines():
    out = Style(padding=(1, 0)).render("x")
    lines = out.split("\n")
    assert len(lines) == 3
    assert lines[1] == "x"
    assert lines[0].strip() == ""


def test_rounded_border_frames_block():
    out = Style(border=Border.ROUNDED).render("hi\nthere")
    lines = [plain(line) for line in out.split("\n")]
    assert lines[0][0] == "╭" and lines[0][-1] == "╮"
    assert lines[-1][0] == "╰" and lines[-1][-1] == "╯"
    assert len({len(line) for line in lines}) == 1
    assert len(lines) == 4


def test_card_style_has_border_and_padding():
    out = STYLE_CARD.render("data")
    lines = [plain(line) for line in out.split("\n")]
    assert lines[1].startswith("│ data")
    assert lines[1].endswith(" │")


def test_cursor_style_is_bold():
    out = STYLE_CURSOR.render("▶ ")
    assert out.startswith("\x1b[1;")
    assert plain(out) == "▶ "


def test_invalid_colour_raises():
    with pytest.raises(ValueError):
        Style(foreground="red")


def test_negative_padding_raises():
    with pytest.raises(ValueError):
        Style(padding=(0, -1))


@pytest.mark.parametrize(
    "obs_type, expected",
    [("bugfix", COLOR_LOVE), ("decision", COLOR_GOLD), ("passive", COLOR_MUTED)],
)
def test_obs_type_color_known(obs_type, expected):
    assert obs_type_color(obs_type) == expected


def test_obs_type_color_unknown_falls_back_to_text():
    assert obs_type_color("unknown-type") == COLOR_TEXT