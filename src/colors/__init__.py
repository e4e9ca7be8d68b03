"""Contrast Grid color engine — public API.

Usage::

    from src.colors import build_matrix, contrast, validate_color

    validate_color("rebeccapurple")            # "#663399"
    contrast("#ffffff", "#000000")             # 21.0
    matrix = build_matrix(["navy", "gold", "white"], minimum_contrast=4.5)
    for row in matrix.rows:
        for cell in row:
            if cell.display:
                print(cell.title, cell.ratio_label, cell.below_threshold)
"""

from __future__ import annotations

from src.colors.contrast import contrast, contrast_of, is_light, luminance
from src.colors.matrix import (
    INVALID,
    NOT_SET,
    BorderAccent,
    Cell,
    Comparison,
    HeaderSwatch,
    Matrix,
    MinimumContrast,
    Placeholder,
    SwatchCell,
    TypeCell,
    build_cell,
    build_matrix,
    format_percentage,
    format_ratio,
    iter_cells,
)
from src.colors.normalizer import (
    ColorResolver,
    hex_to_rgb,
    normalize_hex,
    resolve_color,
    validate_color,
)

__all__ = [
    "contrast",
    "contrast_of",
    "is_light",
    "luminance",
    "INVALID",
    "NOT_SET",
    "BorderAccent",
    "Cell",
    "Comparison",
    "HeaderSwatch",
    "Matrix",
    "MinimumContrast",
    "Placeholder",
    "SwatchCell",
    "TypeCell",
    "build_cell",
    "build_matrix",
    "format_percentage",
    "format_ratio",
    "iter_cells",
    "ColorResolver",
    "hex_to_rgb",
    "normalize_hex",
    "resolve_color",
    "validate_color",
]
