import pytest

from kronos.tui.navigation import (
    CursorList,
    MenuItem,
    Screen,
    dashboard_menu,
    menu_item_for_key,
)


def test_menu_first_entry_is_search():
    first = dashboard_menu()[0]
    assert first == MenuItem("Buscar observaciones", Screen.SEARCH, "s")


def test_menu_keys_are_unique():
    keys = [item.key for item in dashboard_menu()]
    assert len(keys) == len(set(keys))


def test_menu_screens_are_unique_and_not_dashboard():
    screens = [item.screen for item in dashboard_menu()]
    assert len(screens) == len(set(screens))
    assert Screen.DASHBOARD not in screens


@pytest.mark.parametrize("item", dashboard_menu())
def test_menu_item_for_key_round_trip(item):
    assert menu_item_for_key(item.key) is item


def test_menu_keys_are_case_sensitive():
    assert menu_item_for_key("S").screen == Screen.SESSIONS
    assert menu_item_for_key("s").screen == Screen.SEARCH


def test_menu_item_for_unknown_key():
    with pytest.raises(KeyError):
        menu_item_for_key("z")


def test_llm_entry():
    assert menu_item_for_key("l").label == "LLM Config"


def test_move_down_stops_at_last():
    items = ["a", "b", "c"]
    cursor = CursorList(items)
    for _ in range(len(items) + 3):
        cursor.move_down()
    assert cursor.cursor == len(items) - 1
    assert cursor.selected() == items[-1]


def test_move_up_stops_at_first():
    items = ["a", "b", "c"]
    cursor = CursorList(items, cursor=len(items) - 1)
    for _ in range(len(items) + 3):
        cursor.move_up()
    assert cursor.cursor == 0
    assert cursor.selected() == items[0]


def test_down_then_up_returns_to_start():
    items = ["a", "b", "c"]
    cursor = CursorList(items)
    start = cursor.selected()
    cursor.move_down()
    assert cursor.selected() == items[1]
    cursor.move_up()
    assert cursor.selected() == start


def test_move_returns_cursor():
    cursor = CursorList(["a", "b"])
    assert cursor.move_down() == cursor.cursor
    assert cursor.move_up() == cursor.cursor


def test_empty_list_has_no_selection():
    cursor = CursorList([])
    cursor.move_down()
    cursor.move_up()
    assert cursor.selected() is None
    assert len(cursor) == 0


def test_cursor_over_menu_selects_items():
    menu = dashboard_menu()
    cursor = CursorList(menu)
    seen = [cursor.selected()]
    for _ in range(len(menu) - 1):
        cursor.move_down()
        seen.append(cursor.selected())
    assert tuple(seen) == menu


def test_negative_cursor_rejected():
    with pytest.raises(ValueError):
        CursorList(["a"], cursor=-1)


def test_cursor_past_end_rejected():
    items = ["a", "b"]
    with pytest.raises(ValueError):
        CursorList(items, cursor=len(items))