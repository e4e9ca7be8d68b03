"""Contrast Grid state management.

Subpackages / modules:
    models       — AppState snapshot, action records, threshold parsing
    reducer      — pure ``reducer(state, action)`` and ``initial_state``
    url_codec    — query-string encode/decode of colors, titles, grayscale
    palettes     — default palettes loaded from palettes.yaml
    persistence  — history port, coalescing writer, URL persistence
    store        — ContrastStore: dispatch + persistence + matrix
"""

from src.state.models import (
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
from src.state.persistence import InMemoryHistory, UrlPersistence
from src.state.reducer import initial_state, reducer
from src.state.store import ContrastStore
from src.state.url_codec import DecodedQuery, decode, encode

__all__ = [
    "Action",
    "AddColor",
    "AppState",
    "BulkAddColors",
    "BulkEditExistingColors",
    "EditColor",
    "InvalidActionError",
    "PasteColor",
    "RemoveColor",
    "Update",
    "action_from_dict",
    "parse_minimum_contrast",
    "InMemoryHistory",
    "UrlPersistence",
    "initial_state",
    "reducer",
    "ContrastStore",
    "DecodedQuery",
    "decode",
    "encode",
]
