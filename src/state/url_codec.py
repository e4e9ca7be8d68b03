"""Shareable query-string encoding of the grid state.

Parameters:
    colors  ``|``-separated raw color texts.
    titles  ``|``-separated ``color:::title`` pairs (non-empty titles only).
            A ``|`` inside a color or title is written as a literal ``%7C``.
    🌈      Present once the user has edited anything, so a shared link is
            told apart from a first visit.  Its value is ``✓`` normally and
            empty when grayscale is on.

Decoding never fails: each parameter falls back to its default on its own.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Sequence
from urllib.parse import parse_qsl, urlencode

from src.state.palettes import default_palette

logger = logging.getLogger("contrast_grid.state.url_codec")

COLORS_PARAM = "colors"
TITLES_PARAM = "titles"
SESSION_PARAM = "🌈"
SESSION_MARK = "✓"

ITEM_SEPARATOR = "|"
TITLE_SEPARATOR = ":::"

# Double-encoded "#" that survives one round of URL decoding.
_ENCODED_HASH = "%23"
# A "|" inside a color or title, kept apart from ITEM_SEPARATOR.
_ENCODED_SEPARATOR = "%7C"


@dataclass(frozen=True)
class DecodedQuery:
    """Startup values read from a query string.

    Attributes:
        colors:       Colors from the URL, or the default palette.
        titles:       Color text → title; empty when absent.
        grayscale:    Grayscale toggle (only ever true with ``from_session``).
        from_session: Whether the 🌈 marker was present.
    """

    colors: tuple[str, ...]
    titles: dict[str, str] = field(default_factory=dict)
    grayscale: bool = False
    from_session: bool = False


def _set_param(pairs: list[tuple[str, str]], key: str, value: str | None) -> list[tuple[str, str]]:
    """Replace *key* in place (first occurrence), append it, or drop it when *value* is None."""
    result: list[tuple[str, str]] = []
    placed = False
    for k, v in pairs:
        if k != key:
            result.append((k, v))
        elif value is not None and not placed:
            result.append((k, value))
            placed = True
    if value is not None and not placed:
        result.append((key, value))
    return result


def _escape(item: str) -> str:
    return item.replace(ITEM_SEPARATOR, _ENCODED_SEPARATOR)


def _unescape(item: str) -> str:
    return item.replace(_ENCODED_SEPARATOR, ITEM_SEPARATOR).replace(_ENCODED_HASH, "#")


def encode_colors(colors: Sequence[str]) -> str:
    return ITEM_SEPARATOR.join(_escape(color) for color in colors)


def encode_titles(titles: Mapping[str, str]) -> str:
    return ITEM_SEPARATOR.join(
        f"{_escape(color)}{TITLE_SEPARATOR}{_escape(title)}"
        for color, title in titles.items()
        if title
    )


def encode(
    colors: Sequence[str],
    titles: Mapping[str, str] | None = None,
    *,
    grayscale: bool = False,
    base_query: str = "",
) -> str:
    """Serialise colors and titles into a query string (without leading ``?``).

    Args:
        colors:     Ordered color texts.
        titles:     Color text → title.  Empty titles are omitted.
        grayscale:  Grayscale toggle, carried by the 🌈 parameter's value.
        base_query: Existing query string; unrelated parameters are kept.
    """
    pairs = parse_qsl(base_query.lstrip("?"), keep_blank_values=True)
    pairs = _set_param(pairs, SESSION_PARAM, "" if grayscale else SESSION_MARK)
    pairs = _set_param(pairs, COLORS_PARAM, encode_colors(colors))
    pairs = _set_param(pairs, TITLES_PARAM, encode_titles(titles or {}) or None)
    return urlencode(pairs)


def decode_colors(raw: str | None) -> tuple[str, ...] | None:
    if not raw:
        return None
    return tuple(_unescape(item) for item in raw.split(ITEM_SEPARATOR))


def decode_titles(raw: str | None) -> dict[str, str]:
    """Parse ``color:::title`` entries; malformed ones are skipped."""
    titles: dict[str, str] = {}
    if not raw:
        return titles
    for entry in raw.split(ITEM_SEPARATOR):
        if TITLE_SEPARATOR not in entry:
            logger.warning("Skipping malformed title entry %r", entry)
            continue
        color, title = entry.split(TITLE_SEPARATOR, 1)
        color = _unescape(color)
        title = _unescape(title).strip()
        if title:
            titles[color] = title
    return titles


def decode(query: str, default_colors: Sequence[str] | None = None) -> DecodedQuery:
    """Read startup state from a query string (leading ``?`` optional).

    Args:
        query:          The raw query string, e.g. ``location.search``.
        default_colors: Palette for a missing ``colors`` parameter; defaults
                        to the configured palette.
    """
    params: dict[str, str] = {}
    for key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        params.setdefault(key, value)

    colors = decode_colors(params.get(COLORS_PARAM))
    if colors is None:
        colors = tuple(default_colors) if default_colors is not None else default_palette()

    session = params.get(SESSION_PARAM)
    return DecodedQuery(
        colors=colors,
        titles=decode_titles(params.get(TITLES_PARAM)),
        grayscale=session is not None and not session,
        from_session=session is not None,
    )
