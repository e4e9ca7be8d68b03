"""Contrast matrix: one display decision per ordered pair of colors.

For a color list of length N the matrix has N×N cells, row-major.  Cell
``(i, j)`` compares ``colors[i]`` (*first*) against ``colors[j]``
(*second*).  Cells that cannot be shown are :class:`Placeholder` values;
the rest are :class:`SwatchCell` or :class:`TypeCell` depending on the
comparison mode.

Everything returned is plain data.  Rendering is the caller's business.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum
from typing import ClassVar, Iterator, Literal, Mapping, Sequence, Union

from src.colors.contrast import contrast, is_light, luminance
from src.colors.normalizer import ColorResolver, hex_to_rgb, validate_color

logger = logging.getLogger("contrast_grid.colors.matrix")

NOT_SET = "not set"
INVALID = "invalid"

MinimumContrast = Union[float, Literal["not set", "invalid"]]

MIN_COLOR_LENGTH = 3
BLACK = "#000000"
WHITE = "#ffffff"

_SIGNIFICANT_DIGITS = 3


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------


class Comparison(str, Enum):
    """How a contrast cell is rendered.

    SWATCH  — diagonally split tile plus the ratio
    TYPE    — second color as background, first as inset highlight, with
              ratios against the first color, black, and white
    """

    SWATCH = "swatch"
    TYPE = "type"


class BorderAccent(str, Enum):
    """Which side(s) of a swatch are light enough to need an accent border."""

    LIGHT_ROW = "light-row"
    LIGHT_COLUMN = "light-column"
    LIGHT_BOTH = "light-both"


# ---------------------------------------------------------------------------
# Cells
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Placeholder:
    """An empty cell: the pair is identical, blank, too short, or invalid."""

    row: int
    column: int
    display: ClassVar[bool] = False


@dataclass(frozen=True)
class SwatchCell:
    """Diagonal split swatch; *first* fills one triangle, *second* the other.

    Attributes:
        ratio:           Raw, unrounded contrast ratio.
        ratio_label:     Display text, e.g. ``"4.5:1"``.
        below_threshold: ``ratio <= minimum_contrast`` (numeric thresholds only).
        border:          Accent border for light colors, or ``None``.
        title:           Tooltip text, ``"(second, first)"``.
    """

    row: int
    column: int
    first: str
    second: str
    first_hex: str
    second_hex: str
    ratio: float
    ratio_label: str
    below_threshold: bool
    border: BorderAccent | None
    title: str
    display: ClassVar[bool] = True


@dataclass(frozen=True)
class TypeCell:
    """Text-style block: *second* is the background, *first* the foreground.

    The three sub-ratios are always present: against the first color,
    against pure black, and against pure white.  ``luminance_text_color``
    is the readable ink for the luminance readout on the background.
    """

    row: int
    column: int
    first: str
    second: str
    first_hex: str
    second_hex: str
    ratio: float
    ratio_label: str
    below_threshold: bool
    black_ratio: float
    black_ratio_label: str
    white_ratio: float
    white_ratio_label: str
    luminance: float
    luminance_label: str
    luminance_text_color: str
    title: str
    display: ClassVar[bool] = True


Cell = Union[Placeholder, SwatchCell, TypeCell]


@dataclass(frozen=True)
class HeaderSwatch:
    """Row/column header for one entered color."""

    index: int
    color: str
    title: str
    background: str | None


@dataclass(frozen=True)
class Matrix:
    comparison: Comparison
    grayscale: bool
    headers: tuple[HeaderSwatch, ...]
    rows: tuple[tuple[Cell, ...], ...]

    @property
    def size(self) -> int:
        return len(self.headers)


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------


def _format_significant(value: Decimal) -> str:
    if value.is_zero():
        return "0"
    quantum = Decimal(1).scaleb(value.adjusted() - _SIGNIFICANT_DIGITS + 1)
    rounded = value.quantize(quantum, rounding=ROUND_HALF_UP).normalize()
    return format(rounded, "f")


def format_ratio(value: float) -> str:
    """Format a number to at most 3 significant digits, trailing zeros dropped.

    ``21.0`` → ``"21"``, ``4.4999`` → ``"4.5"``, ``12.345`` → ``"12.3"``.
    """
    return _format_significant(Decimal(repr(value)))


def format_percentage(value: float | None) -> str:
    """Format a ``[0, 1]`` fraction as a percentage, e.g. ``0.2126`` → ``"21.3%"``."""
    if value is None:
        return INVALID
    return _format_significant(Decimal(repr(value)) * 100) + "%"


def ratio_label(value: float) -> str:
    return f"{format_ratio(value)}:1"


def format_pair(first: str, second: str) -> str:
    return f"({second}, {first})"


# ---------------------------------------------------------------------------
# Per-pair decisions
# ---------------------------------------------------------------------------


def is_below_threshold(ratio: float, minimum_contrast: MinimumContrast) -> bool:
    """True when a numeric threshold is set and the raw ratio does not exceed it."""
    if isinstance(minimum_contrast, bool) or not isinstance(minimum_contrast, (int, float)):
        return False
    return ratio <= minimum_contrast


def border_accent(first_hex: str, second_hex: str) -> BorderAccent | None:
    light_row = is_light(first_hex)
    light_column = is_light(second_hex)
    if light_row and light_column:
        return BorderAccent.LIGHT_BOTH
    if light_row:
        return BorderAccent.LIGHT_ROW
    if light_column:
        return BorderAccent.LIGHT_COLUMN
    return None


def _displayable(text: str, validated: str | None) -> bool:
    trimmed = text.strip()
    return bool(trimmed) and len(trimmed) >= MIN_COLOR_LENGTH and validated is not None


def build_cell(
    first: str,
    second: str,
    row: int = 0,
    column: int = 0,
    *,
    comparison: Comparison = Comparison.SWATCH,
    minimum_contrast: MinimumContrast = NOT_SET,
    titles: Mapping[str, str] | None = None,
    resolver: ColorResolver | None = None,
    validated: Mapping[str, str | None] | None = None,
) -> Cell:
    """Decide how to show the pair ``(first, second)``.

    Args:
        first:            Row color text.
        second:           Column color text.
        comparison:       Render mode.
        minimum_contrast: Numeric threshold, ``"not set"`` or ``"invalid"``.
        titles:           Color text → title, used for type-cell tooltips.
        resolver:         Color resolution engine (see :mod:`src.colors.normalizer`).
        validated:        Pre-computed ``validate_color`` results keyed by text.

    Returns:
        A :class:`Placeholder`, :class:`SwatchCell` or :class:`TypeCell`.
    """
    comparison = Comparison(comparison)
    if first == second:
        return Placeholder(row, column)

    def _validate(text: str) -> str | None:
        if validated is not None and text in validated:
            return validated[text]
        return validate_color(text, resolver)

    first_hex = _validate(first)
    second_hex = _validate(second)
    if first_hex is None or second_hex is None:
        return Placeholder(row, column)
    if not (_displayable(first, first_hex) and _displayable(second, second_hex)):
        return Placeholder(row, column)

    ratio = contrast(first_hex, second_hex)
    below = is_below_threshold(ratio, minimum_contrast)

    if comparison is Comparison.TYPE:
        black_ratio = contrast(second_hex, BLACK)
        white_ratio = contrast(second_hex, WHITE)
        background_luminance = luminance(*hex_to_rgb(second_hex))  # type: ignore[misc]
        return TypeCell(
            row=row,
            column=column,
            first=first,
            second=second,
            first_hex=first_hex,
            second_hex=second_hex,
            ratio=ratio,
            ratio_label=ratio_label(ratio),
            below_threshold=below,
            black_ratio=black_ratio,
            black_ratio_label=ratio_label(black_ratio),
            white_ratio=white_ratio,
            white_ratio_label=ratio_label(white_ratio),
            luminance=background_luminance,
            luminance_label=format_percentage(background_luminance),
            luminance_text_color="black" if background_luminance > 0.5 else "white",
            title=(titles or {}).get(second) or format_pair(first, second),
        )

    return SwatchCell(
        row=row,
        column=column,
        first=first,
        second=second,
        first_hex=first_hex,
        second_hex=second_hex,
        ratio=ratio,
        ratio_label=ratio_label(ratio),
        below_threshold=below,
        border=border_accent(first_hex, second_hex),
        title=format_pair(first, second),
    )


# ---------------------------------------------------------------------------
# Whole matrix
# ---------------------------------------------------------------------------


def iter_cells(
    colors: Sequence[str],
    *,
    comparison: Comparison = Comparison.SWATCH,
    minimum_contrast: MinimumContrast = NOT_SET,
    titles: Mapping[str, str] | None = None,
    resolver: ColorResolver | None = None,
) -> Iterator[Cell]:
    """Lazily yield every cell, row-major.  Each distinct text is validated once."""
    validated = {text: validate_color(text, resolver) for text in set(colors)}
    for i, first in enumerate(colors):
        for j, second in enumerate(colors):
            yield build_cell(
                first,
                second,
                i,
                j,
                comparison=comparison,
                minimum_contrast=minimum_contrast,
                titles=titles,
                resolver=resolver,
                validated=validated,
            )


def header_swatches(
    colors: Sequence[str],
    titles: Mapping[str, str] | None = None,
    resolver: ColorResolver | None = None,
) -> tuple[HeaderSwatch, ...]:
    titles = titles or {}
    return tuple(
        HeaderSwatch(
            index=index,
            color=color,
            title=titles.get(color) or color,
            background=validate_color(color, resolver),
        )
        for index, color in enumerate(colors)
    )


def build_matrix(
    colors: Sequence[str],
    *,
    comparison: Comparison = Comparison.SWATCH,
    minimum_contrast: MinimumContrast = NOT_SET,
    titles: Mapping[str, str] | None = None,
    grayscale: bool = False,
    resolver: ColorResolver | None = None,
) -> Matrix:
    """Materialise the full N×N matrix plus headers."""
    comparison = Comparison(comparison)
    size = len(colors)
    cells = list(
        iter_cells(
            colors,
            comparison=comparison,
            minimum_contrast=minimum_contrast,
            titles=titles,
            resolver=resolver,
        )
    )
    rows = tuple(tuple(cells[i * size:(i + 1) * size]) for i in range(size))
    shown = sum(1 for c in cells if c.display)
    logger.debug("Built %dx%d %s matrix (%d cells shown)", size, size, comparison.value, shown)
    return Matrix(
        comparison=comparison,
        grayscale=grayscale,
        headers=header_swatches(colors, titles, resolver),
        rows=rows,
    )
