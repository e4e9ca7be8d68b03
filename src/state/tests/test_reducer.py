"""Tests for the pure grid reducer."""

from __future__ import annotations

import dataclasses
import logging

import pytest

from src.colors.matrix import INVALID, NOT_SET, Comparison
from src.state.models import (
    AddColor,
    AppState,
    BulkAddColors,
    BulkEditExistingColors,
    EditColor,
    InvalidActionError,
    PasteColor,
    RemoveColor,
    Update,
)
from src.state.reducer import (
    colors_changed,
    initial_state,
    parse_bulk_line,
    parse_bulk_lines,
    reducer,
)
from src.state.url_codec import DecodedQuery


def bulk(text: str, **fields) -> AppState:
    state = AppState(colors=("black",), bulk_edit_value=text, **fields)
    return reducer(state, BulkAddColors())


# ---------------------------------------------------------------------------
# Color list edits
# ---------------------------------------------------------------------------


class TestEditColor:
    def test_replaces_only_target(self, three_colors):
        new = reducer(three_colors, EditColor(index=1, value="#ff00ff"))
        assert new.colors == ("#000", "#ff00ff", "#fff")
        assert new == dataclasses.replace(three_colors, colors=("#000", "#ff00ff", "#fff"))

    def test_does_not_mutate_input(self, three_colors):
        reducer(three_colors, EditColor(index=0, value="red"))
        assert three_colors.colors == ("#000", "", "#fff")

    def test_invalid_text_allowed(self, three_colors):
        new = reducer(three_colors, EditColor(index=0, value="not a color"))
        assert new.colors[0] == "not a color"

    def test_out_of_range_ignored(self, three_colors, caplog):
        with caplog.at_level(logging.WARNING, logger="contrast_grid.state.reducer"):
            new = reducer(three_colors, EditColor(index=7, value="red"))
        assert new is three_colors
        assert "Ignoring edit" in caplog.text

    def test_title_of_replaced_color_dropped(self):
        state = bulk("blue #primary\nred")
        new = reducer(state, EditColor(index=0, value="green"))
        assert dict(new.titles) == {}

    def test_title_kept_while_color_still_listed(self):
        state = bulk("blue #primary\nblue\nred")
        new = reducer(state, EditColor(index=0, value="green"))
        assert dict(new.titles) == {"blue": "primary"}


class TestPasteColor:
    @pytest.mark.parametrize(
        "pasted, stored",
        [
            (" ff00ff ", "#ff00ff"),
            ("abc", "#abc"),
            ("#abc", "#abc"),
            ("rgb(1, 2, 3)", "rgb(1, 2, 3)"),
            ("red", "red"),
        ],
    )
    def test_normalises_bare_hex(self, three_colors, pasted, stored):
        new = reducer(three_colors, PasteColor(index=1, text=pasted))
        assert new.colors[1] == stored


class TestAddColor:
    def test_prepends_blank(self, three_colors):
        new = reducer(three_colors, AddColor())
        assert new.colors == ("", "#000", "", "#fff")


class TestRemoveColor:
    def test_removes_index(self, three_colors):
        assert reducer(three_colors, RemoveColor(index=0)).colors == ("", "#fff")

    def test_last_color_becomes_blank(self):
        state = AppState(colors=("red",))
        assert reducer(state, RemoveColor(index=0)).colors == ("",)

    def test_never_empty(self):
        state = AppState(colors=("",))
        assert reducer(state, RemoveColor(index=0)).colors == ("",)

    def test_out_of_range_ignored(self, three_colors):
        assert reducer(three_colors, RemoveColor(index=3)) is three_colors

    def test_title_of_removed_color_dropped(self):
        state = bulk("blue #primary\nred #alert")
        new = reducer(state, RemoveColor(index=0))
        assert new.colors == ("red",)
        assert dict(new.titles) == {"red": "alert"}

    def test_last_color_removal_clears_titles(self):
        new = reducer(bulk("blue #primary"), RemoveColor(index=0))
        assert dict(new.titles) == {}


# ---------------------------------------------------------------------------
# Bulk edit
# ---------------------------------------------------------------------------


class TestBulkLineParsing:
    def test_color_only(self):
        assert parse_bulk_line("red") == ("red", "")

    def test_color_and_comment(self):
        assert parse_bulk_line("blue #primary") == ("blue", "primary")

    def test_hex_color_with_comment(self):
        assert parse_bulk_line("#fff #page background") == ("#fff", "page background")

    def test_hex_without_comment(self):
        assert parse_bulk_line("  #fff  ") == ("#fff", "")

    def test_split_on_first_comment_marker(self):
        assert parse_bulk_line("red   #a #b") == ("red", "a #b")

    def test_embedded_newline_kept_whole(self):
        assert parse_bulk_line("red\nblue") == ("red\nblue", "")

    def test_empty_comment(self):
        assert parse_bulk_line("red #  ") == ("red", "")

    def test_leading_hash_is_color_text(self):
        # No whitespace before the "#", so the whole line is color text.
        assert parse_bulk_line("  #just a note") == ("#just a note", "")

    def test_lines_dropped_and_order_kept(self):
        colors, titles = parse_bulk_lines("red\n\n  \nblue #x\nred")
        assert colors == ["red", "blue", "red"]
        assert titles == {"blue": "x"}


class TestBulkAdd:
    def test_colors_and_titles(self):
        new = bulk("red\nblue #primary\n\n  ")
        assert new.colors == ("red", "blue")
        assert dict(new.titles) == {"blue": "primary"}

    def test_bulk_value_trimmed(self):
        assert bulk("\n red \n").bulk_edit_value == "red"

    def test_duplicates_preserved(self):
        assert bulk("red\nred\nred").colors == ("red", "red", "red")

    def test_titles_rebuilt_not_merged(self):
        new = bulk("blue", titles={"red": "old"})
        assert dict(new.titles) == {}

    def test_windows_newlines(self):
        assert bulk("red\r\nblue #b\r\n").colors == ("red", "blue")

    def test_empty_input_yields_single_blank(self):
        new = bulk("   \n\n")
        assert new.colors == ("",)
        assert dict(new.titles) == {}

    def test_other_fields_unchanged(self):
        new = bulk("red", grayscale=True, minimum_contrast=3.0)
        assert new.grayscale is True
        assert new.minimum_contrast == 3.0


class TestBulkEditExisting:
    def test_joins_colors(self, three_colors):
        new = reducer(three_colors, BulkEditExistingColors())
        assert new.bulk_edit_value == "#000\n\n#fff"
        assert new.colors == three_colors.colors


# ---------------------------------------------------------------------------
# Generic update
# ---------------------------------------------------------------------------


class TestUpdate:
    def test_minimum_contrast_number(self, three_colors):
        assert reducer(three_colors, Update("minimumContrast", 4.5)).minimum_contrast == 4.5

    def test_minimum_contrast_text(self, three_colors):
        assert reducer(three_colors, Update("minimumContrast", "7")).minimum_contrast == 7.0

    def test_minimum_contrast_garbage(self, three_colors):
        assert reducer(three_colors, Update("minimumContrast", "abc")).minimum_contrast == INVALID

    def test_minimum_contrast_cleared(self, three_colors):
        assert reducer(three_colors, Update("minimum_contrast", "")).minimum_contrast == NOT_SET

    def test_comparison(self, three_colors):
        assert reducer(three_colors, Update("comparison", "type")).comparison is Comparison.TYPE

    def test_bad_comparison(self, three_colors):
        with pytest.raises(InvalidActionError):
            reducer(three_colors, Update("comparison", "sideways"))

    def test_grayscale(self, three_colors):
        assert reducer(three_colors, Update("grayscale", True)).grayscale is True

    @pytest.mark.parametrize("value", ["false", "true", 0, None])
    def test_grayscale_requires_bool(self, three_colors, value):
        with pytest.raises(InvalidActionError, match="grayscale must be a bool"):
            reducer(three_colors, Update("grayscale", value))

    def test_bulk_edit_value(self, three_colors):
        assert reducer(three_colors, Update("bulkEditValue", "a\nb")).bulk_edit_value == "a\nb"

    def test_colors_not_updatable(self, three_colors):
        with pytest.raises(InvalidActionError):
            reducer(three_colors, Update("colors", ["red"]))


# ---------------------------------------------------------------------------
# Dispatch plumbing
# ---------------------------------------------------------------------------


class TestDispatchForms:
    def test_dict_action(self, three_colors):
        new = reducer(three_colors, {"type": "editColor", "index": 2, "value": "red"})
        assert new.colors == ("#000", "", "red")

    def test_dict_bulk_action(self):
        state = AppState(bulk_edit_value="red")
        assert reducer(state, {"type": "bulk-add-colors"}).colors == ("red",)

    def test_unknown_dict_type(self, three_colors):
        with pytest.raises(InvalidActionError):
            reducer(three_colors, {"type": "explode"})

    def test_unknown_action_object(self, three_colors):
        with pytest.raises(InvalidActionError):
            reducer(three_colors, object())  # type: ignore[arg-type]


class TestInitialState:
    def test_seeded_from_decoded_query(self):
        decoded = DecodedQuery(colors=("red", "blue"), titles={"red": "alert"}, grayscale=True)
        state = initial_state(decoded)
        assert state.colors == ("red", "blue")
        assert dict(state.titles) == {"red": "alert"}
        assert state.grayscale is True
        assert state.comparison is Comparison.SWATCH
        assert state.minimum_contrast == NOT_SET
        assert state.bulk_edit_value == "red\nblue"


class TestColorsChanged:
    def test_color_edit(self, three_colors):
        assert colors_changed(three_colors, reducer(three_colors, AddColor()))

    def test_title_change(self):
        before = AppState(colors=("red",))
        after = AppState(colors=("red",), titles={"red": "x"})
        assert colors_changed(before, after)

    def test_flag_change_only(self, three_colors):
        after = reducer(three_colors, Update("grayscale", True))
        assert not colors_changed(three_colors, after)
