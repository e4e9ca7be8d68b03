"""State snapshot and action records for the contrast grid reducer.

:class:`AppState` is immutable: the reducer always returns a new
instance.  Actions are small frozen dataclasses tagged with the same
``type`` strings the UI dispatches, so plain dicts coming from the
presentation layer can be turned into actions with :func:`action_from_dict`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Union

from src.colors.matrix import INVALID, NOT_SET, Comparison, MinimumContrast

logger = logging.getLogger("contrast_grid.state.models")


class InvalidActionError(ValueError):
    """Raised for actions the reducer cannot interpret (programmer error)."""


def parse_minimum_contrast(raw: Any) -> MinimumContrast:
    """Coerce threshold input to a number or one of the two sentinels.

    Empty input means ``"not set"``; anything non-numeric (or not finite)
    is ``"invalid"``, which disables threshold flagging.
    """
    if raw is None:
        return NOT_SET
    if isinstance(raw, bool):
        return INVALID
    if isinstance(raw, (int, float)):
        return float(raw) if math.isfinite(raw) else INVALID
    if isinstance(raw, str):
        text = raw.strip()
        if text in ("", NOT_SET):
            return NOT_SET
        if text == INVALID:
            return INVALID
        try:
            value = float(text)
        except ValueError:
            return INVALID
        return value if math.isfinite(value) else INVALID
    return INVALID


# ---------------------------------------------------------------------------
# State
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AppState:
    """One complete snapshot of the grid.

    Attributes:
        colors:           Ordered color texts; never empty (``""`` is a placeholder).
        titles:           Color text → non-empty comment.
        grayscale:        Render the grid desaturated.
        comparison:       Cell render mode.
        minimum_contrast: Threshold, ``"not set"`` or ``"invalid"``.
        bulk_edit_value:  Raw text of the bulk-edit box.
    """

    colors: tuple[str, ...] = ("",)
    titles: Mapping[str, str] = field(default_factory=dict)
    grayscale: bool = False
    comparison: Comparison = Comparison.SWATCH
    minimum_contrast: MinimumContrast = NOT_SET
    bulk_edit_value: str = ""

    def __post_init__(self) -> None:
        colors = tuple(self.colors) or ("",)
        object.__setattr__(self, "colors", colors)
        object.__setattr__(
            self, "titles", MappingProxyType({k: v for k, v in dict(self.titles).items() if v})
        )
        object.__setattr__(self, "comparison", Comparison(self.comparison))

    def to_dict(self) -> dict:
        return {
            "colors": list(self.colors),
            "titles": dict(self.titles),
            "grayscale": self.grayscale,
            "comparison": self.comparison.value,
            "minimumContrast": self.minimum_contrast,
            "bulkEditValue": self.bulk_edit_value,
        }


# Update() accepts both the UI's camelCase names and the attribute names.
UPDATABLE_FIELDS: dict[str, str] = {
    "minimumContrast": "minimum_contrast",
    "minimum_contrast": "minimum_contrast",
    "comparison": "comparison",
    "grayscale": "grayscale",
    "bulkEditValue": "bulk_edit_value",
    "bulk_edit_value": "bulk_edit_value",
}


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AddColor:
    type: ClassVar[str] = "addColor"


@dataclass(frozen=True)
class RemoveColor:
    index: int
    type: ClassVar[str] = "removeColor"


@dataclass(frozen=True)
class EditColor:
    index: int
    value: str
    type: ClassVar[str] = "editColor"


@dataclass(frozen=True)
class PasteColor:
    """Clipboard paste into a color field; bare hex gets a ``#`` prefix."""

    index: int
    text: str
    type: ClassVar[str] = "pasteColor"


@dataclass(frozen=True)
class BulkEditExistingColors:
    type: ClassVar[str] = "bulk-edit-existing-colors"


@dataclass(frozen=True)
class BulkAddColors:
    type: ClassVar[str] = "bulk-add-colors"


@dataclass(frozen=True)
class Update:
    field: str
    value: Any
    type: ClassVar[str] = "update"


Action = Union[
    AddColor,
    RemoveColor,
    EditColor,
    PasteColor,
    BulkEditExistingColors,
    BulkAddColors,
    Update,
]

_ACTION_TYPES: dict[str, type] = {
    cls.type: cls
    for cls in (
        AddColor,
        RemoveColor,
        EditColor,
        PasteColor,
        BulkEditExistingColors,
        BulkAddColors,
        Update,
    )
}


def action_from_dict(payload: Mapping[str, Any]) -> Action:
    """Build an action from a UI-style ``{"type": ..., **fields}`` mapping.

    Raises:
        InvalidActionError: Unknown ``type`` or missing/extra fields.
    """
    data = dict(payload)
    tag = data.pop("type", None)
    cls = _ACTION_TYPES.get(tag)  # type: ignore[arg-type]
    if cls is None:
        raise InvalidActionError(f"Unknown action type: {tag!r}")
    try:
        return cls(**data)
    except TypeError as exc:
        raise InvalidActionError(f"Bad fields for {tag!r}: {exc}") from exc
