"""Pure state transitions for the contrast grid.

``reducer(state, action)`` never mutates *state* and never performs I/O;
persistence of the resulting snapshot is the store's job
(:mod:`src.state.store`).
"""

from __future__ import annotations

import dataclasses
import logging
import re
from typing import Any, Mapping, Sequence

from src.colors.matrix import Comparison
from src.colors.normalizer import normalize_hex
from src.state.models import (
    UPDATABLE_FIELDS,
    Action,
    AddColor,
    AppState,
    BulkAddColors,
    BulkEditExistingColors,
    EditColor,
    InvalidActionError,
    PasteColor,
    RemoveColor,
    Update,
    action_from_dict,
    parse_minimum_contrast,
)
from src.state.url_codec import DecodedQuery

logger = logging.getLogger("contrast_grid.state.reducer")

# "color", optionally followed by whitespace and a "#comment".
_BULK_LINE_RE = re.compile(r"^(?P<color>.*?)(?:\s+#(?P<comment>.*))?$")


def initial_state(decoded: DecodedQuery) -> AppState:
    """First snapshot of a session, seeded from the URL (or the default palette)."""
    return AppState(
        colors=decoded.colors,
        titles=decoded.titles,
        grayscale=decoded.grayscale,
        bulk_edit_value="\n".join(decoded.colors),
    )


# ---------------------------------------------------------------------------
# Bulk edit parsing
# ---------------------------------------------------------------------------


def parse_bulk_line(line: str) -> tuple[str, str]:
    """Split one bulk-edit line into ``(color, comment)``, both trimmed.

    The comment starts at the first run of whitespace followed by ``#``, so
    ``"#fff #page background"`` is ``("#fff", "page background")``.
    """
    match = _BULK_LINE_RE.match(line.strip())
    if match is None:
        return line.strip(), ""
    return match.group("color").strip(), (match.group("comment") or "").strip()


def parse_bulk_lines(text: str) -> tuple[list[str], dict[str, str]]:
    """Parse bulk-edit text into ordered colors and their non-empty titles.

    Blank lines and lines with no color are dropped.  Duplicate colors are
    kept in order; a later comment for the same color wins.
    """
    colors: list[str] = []
    titles: dict[str, str] = {}
    for line in text.splitlines():
        color, comment = parse_bulk_line(line)
        if not color:
            continue
        colors.append(color)
        if comment:
            titles[color] = comment
    return colors, titles


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


def _in_range(index: int, colors: Sequence[str]) -> bool:
    return 0 <= index < len(colors)


def _titles_for(titles: Mapping[str, str], colors: Sequence[str]) -> dict[str, str]:
    """Drop titles whose color is no longer in the list."""
    present = set(colors)
    return {color: title for color, title in titles.items() if color in present}


def _with_color(state: AppState, index: int, value: str) -> AppState:
    if not _in_range(index, state.colors):
        logger.warning("Ignoring edit of color %d: only %d colors", index, len(state.colors))
        return state
    colors = list(state.colors)
    colors[index] = value
    return dataclasses.replace(
        state, colors=tuple(colors), titles=_titles_for(state.titles, colors)
    )


def _remove_color(state: AppState, index: int) -> AppState:
    if len(state.colors) <= 1:
        return dataclasses.replace(state, colors=("",), titles={})
    if not _in_range(index, state.colors):
        logger.warning("Ignoring removal of color %d: only %d colors", index, len(state.colors))
        return state
    colors = tuple(c for i, c in enumerate(state.colors) if i != index)
    return dataclasses.replace(state, colors=colors, titles=_titles_for(state.titles, colors))


def _bulk_add(state: AppState) -> AppState:
    colors, titles = parse_bulk_lines(state.bulk_edit_value)
    if not colors:
        logger.debug("Bulk add produced no colors; resetting to a single blank entry")
        colors = [""]
    return dataclasses.replace(
        state,
        colors=tuple(colors),
        titles=titles,
        bulk_edit_value=state.bulk_edit_value.strip(),
    )


def _update(state: AppState, field_name: str, value: object) -> AppState:
    attribute = UPDATABLE_FIELDS.get(field_name)
    if attribute is None:
        raise InvalidActionError(f"Field {field_name!r} cannot be updated")

    if attribute == "minimum_contrast":
        value = parse_minimum_contrast(value)
    elif attribute == "comparison":
        try:
            value = Comparison(value)
        except ValueError as exc:
            raise InvalidActionError(f"Unknown comparison mode: {value!r}") from exc
    elif attribute == "grayscale":
        if not isinstance(value, bool):
            raise InvalidActionError(f"grayscale must be a bool, got {value!r}")
    elif attribute == "bulk_edit_value":
        value = "" if value is None else str(value)

    return dataclasses.replace(state, **{attribute: value})


def reducer(state: AppState, action: Action | Mapping[str, Any]) -> AppState:
    """Apply *action* to *state* and return the new snapshot.

    *action* may also be a UI-style ``{"type": ..., ...}`` mapping.

    Raises:
        InvalidActionError: For unknown actions or un-updatable fields.
    """
    if isinstance(action, Mapping):
        action = action_from_dict(action)
    logger.debug("Reducing %s", action)

    if isinstance(action, AddColor):
        return dataclasses.replace(state, colors=("", *state.colors))

    if isinstance(action, RemoveColor):
        return _remove_color(state, action.index)

    if isinstance(action, EditColor):
        return _with_color(state, action.index, action.value)

    if isinstance(action, PasteColor):
        return _with_color(state, action.index, normalize_hex(action.text.strip()))

    if isinstance(action, BulkEditExistingColors):
        return dataclasses.replace(state, bulk_edit_value="\n".join(state.colors))

    if isinstance(action, BulkAddColors):
        return _bulk_add(state)

    if isinstance(action, Update):
        return _update(state, action.field, action.value)

    raise InvalidActionError(f"Unknown action: {action!r}")


def colors_changed(before: AppState, after: AppState) -> bool:
    """True when a transition touched anything the URL encodes as content."""
    return before.colors != after.colors or dict(before.titles) != dict(after.titles)
