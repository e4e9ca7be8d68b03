"""Shared fixtures for color engine tests."""

from __future__ import annotations

from typing import Callable

import pytest

from src.colors.normalizer import ColorResolver


class TableResolver:
    """Resolver backed by a fixed lookup table; counts its calls.

    Stands in for a rendering engine, including one that silently coerces
    unknown names to black.
    """

    def __init__(self, table: dict[str, str]) -> None:
        self.table = {k.lower(): v for k, v in table.items()}
        self.calls: list[str] = []

    def __call__(self, text: str) -> str | None:
        self.calls.append(text)
        return self.table.get(text.lower())


@pytest.fixture
def table_resolver() -> Callable[[dict[str, str]], TableResolver]:
    return TableResolver


@pytest.fixture
def black_coercing_resolver() -> ColorResolver:
    """Engine that paints anything it cannot parse as black, like a canvas does."""
    known = {"black": "#000000", "#000": "#000000", "#000000": "#000000", "white": "#ffffff"}
    return lambda text: known.get(text.lower(), "#000000")
