"""Contrast Grid — entry point for the presentation layer.

The UI calls :func:`create_store` once with the page's query string and
then only dispatches actions and reads ``store.state`` / ``store.matrix()``.

    store = create_store(InMemoryHistory(location_search))
    store.dispatch({"type": "editColor", "index": 0, "value": "#ff00ff"})
"""

from __future__ import annotations

import logging
import sys

from src.colors.normalizer import ColorResolver
from src.config import Settings, get_settings
from src.state.palettes import default_palette, reload_palette_config
from src.state.persistence import HistoryPort, InMemoryHistory, UrlPersistence
from src.state.store import ContrastStore

logger = logging.getLogger("contrast_grid")


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)-8s %(name)s — %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
    )


def create_store(
    history: HistoryPort | None = None,
    settings: Settings | None = None,
    resolver: ColorResolver | None = None,
) -> ContrastStore:
    """Wire settings, palettes and URL persistence into a ready store.

    Args:
        history:  Location/history of the host page; an empty in-memory
                  history when omitted.
        settings: Overrides the environment-derived settings.
        resolver: Color resolution engine; coloraide-backed by default.
    """
    s = settings or get_settings()
    configure_logging(s.log_level)
    if s.palette_config_path is not None:
        reload_palette_config(s.palette_config_path)

    persistence = UrlPersistence(
        history if history is not None else InMemoryHistory(pathname=s.history_path),
        interval=s.history_interval_seconds,
        path=s.history_path if history is None else None,
        default_colors=default_palette(s.palette),
    )
    store = ContrastStore(persistence, resolver=resolver)
    logger.info(
        "%s v%s ready with %d color(s)",
        s.app_name,
        s.app_version,
        len(store.state.colors),
    )
    return store
