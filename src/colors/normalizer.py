"""Color text normalisation and validation.

User-typed colors are free text: hex codes, CSS named colors, ``rgb()`` /
``hsl()`` functions, or typos.  Resolution to a canonical ``#rrggbb`` form
is delegated to a pluggable :data:`ColorResolver`; the default one is
backed by ``coloraide``.

CSS engines paint unparseable input as black, so any input that resolves
to black without literally *being* black is rejected as a probable typo.
"""

from __future__ import annotations

import logging
import re
from typing import Callable

from coloraide import Color

logger = logging.getLogger("contrast_grid.colors.normalizer")

# text -> "#rrggbb" or None
ColorResolver = Callable[[str], str | None]

Triple = tuple[int, int, int]

BLACK_HEX = "#000000"

# Only these spellings may legitimately resolve to black.
BLACK_LITERALS: frozenset[str] = frozenset({"black", "#000", "#000000"})

_BARE_HEX_RE = re.compile(r"^(?:[0-9a-f]{3}|[0-9a-f]{6})$", re.IGNORECASE)
_HEX6_RE = re.compile(r"^#([0-9a-f]{2})([0-9a-f]{2})([0-9a-f]{2})$", re.IGNORECASE)
_HEX3_RE = re.compile(r"^#([0-9a-f])([0-9a-f])([0-9a-f])$", re.IGNORECASE)


def resolve_color(text: str) -> str | None:
    """Resolve any CSS color syntax to a 6-digit lowercase hex string.

    Alpha is dropped. Out-of-range channels and out-of-gamut colors are
    clipped into sRGB, as a browser canvas would paint them.

    Returns:
        ``"#rrggbb"``, or ``None`` if the text is not a color.
    """
    try:
        parsed = Color(text)
    except ValueError:
        return None
    return parsed.convert("srgb").to_string(hex=True, alpha=False, fit="clip").lower()


def validate_color(text: str, resolver: ColorResolver | None = None) -> str | None:
    """Return the canonical hex for *text*, or ``None`` if it is not a usable color.

    Args:
        text:     Raw user input.  Surrounding whitespace is ignored.
        resolver: Optional resolution engine; defaults to :func:`resolve_color`.

    Returns:
        ``"#rrggbb"`` for a valid color, ``None`` otherwise.  Never raises.
    """
    if not isinstance(text, str):
        return None
    candidate = text.strip()
    if not candidate:
        return None

    resolved = (resolver or resolve_color)(candidate)
    if resolved is None:
        return None
    resolved = resolved.lower()

    if resolved == BLACK_HEX and candidate.lower() not in BLACK_LITERALS:
        logger.debug("Rejecting %r: resolves to black but is not a black literal", text)
        return None
    return resolved


def normalize_hex(raw: str) -> str:
    """Prefix ``#`` onto bare 3- or 6-digit hex strings (clipboard paste helper).

    Anything already starting with ``#``, ``rgb`` or ``hsl`` is returned
    unchanged, as is anything that is not bare hex.
    """
    if raw.startswith(("#", "rgb", "hsl")):
        return raw
    if _BARE_HEX_RE.match(raw):
        return "#" + raw
    return raw


def hex_to_rgb(hex_color: str) -> Triple | None:
    """Convert ``#rgb`` or ``#rrggbb`` into an ``(r, g, b)`` triple of 0–255 ints."""
    match = _HEX6_RE.match(hex_color)
    if match:
        return tuple(int(part, 16) for part in match.groups())  # type: ignore[return-value]
    match = _HEX3_RE.match(hex_color)
    if match:
        return tuple(int(part * 2, 16) for part in match.groups())  # type: ignore[return-value]
    return None


def color_to_rgb(text: str, resolver: ColorResolver | None = None) -> Triple | None:
    """Validate free text and return its RGB triple, or ``None``."""
    validated = validate_color(text, resolver)
    if validated is None:
        return None
    return hex_to_rgb(validated)


def swatch_background(text: str, resolver: ColorResolver | None = None) -> str | None:
    """Background for a color's header swatch; ``None`` paints nothing."""
    return validate_color(text, resolver)
