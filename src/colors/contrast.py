"""Relative luminance and WCAG contrast ratio.

Formulae follow WCAG 2.x:

    L = 0.2126 * R + 0.7152 * G + 0.0722 * B

where each channel is linearised from sRGB, and

    ratio = (L_lighter + 0.05) / (L_darker + 0.05)

which ranges from 1 (identical luminance) to 21 (black on white).
"""

from __future__ import annotations

from typing import Sequence, Union

from src.colors.normalizer import Triple, hex_to_rgb

ColorInput = Union[Triple, str]

# Luminance at or above this gets a border accent so it doesn't vanish on a light page.
LIGHT_LUMINANCE_THRESHOLD = 0.5

_LINEAR_CUTOFF = 0.03928
_LUMINANCE_OFFSET = 0.05
_CHANNEL_WEIGHTS = (0.2126, 0.7152, 0.0722)


def _linearize(channel: float) -> float:
    v = channel / 255
    return v / 12.92 if v <= _LINEAR_CUTOFF else ((v + 0.055) / 1.055) ** 2.4


def luminance(r: float, g: float, b: float) -> float:
    """Relative luminance in ``[0, 1]`` of 0–255 sRGB channel values."""
    return sum(w * _linearize(c) for w, c in zip(_CHANNEL_WEIGHTS, (r, g, b)))


def _as_triple(color: ColorInput) -> Triple:
    if isinstance(color, str):
        rgb = hex_to_rgb(color)
        if rgb is None:
            raise ValueError(f"Not a canonical hex color: {color!r}")
        return rgb
    return color


def contrast(first: ColorInput, second: ColorInput) -> float:
    """Contrast ratio between two colors; symmetric and always ``>= 1``.

    Args:
        first:  ``(r, g, b)`` triple or canonical hex string.
        second: ``(r, g, b)`` triple or canonical hex string.
    """
    darker, lighter = sorted(
        luminance(*_as_triple(c)) + _LUMINANCE_OFFSET for c in (first, second)
    )
    return lighter / darker


def contrast_of(colors: Sequence[ColorInput]) -> float:
    """Contrast of exactly two colors; any other count is degenerate and yields 0."""
    if len(colors) != 2:
        return 0.0
    return contrast(colors[0], colors[1])


def is_light(color: ColorInput) -> bool:
    return luminance(*_as_triple(color)) >= LIGHT_LUMINANCE_THRESHOLD
