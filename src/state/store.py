"""Single-writer holder of the current :class:`AppState`.

``dispatch`` runs the reducer synchronously, swaps in the new snapshot,
and only then hands it to the persistence port.  Persistence is deferred
by the port itself, so dispatch never blocks on it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from src.colors.matrix import Matrix, build_matrix
from src.colors.normalizer import ColorResolver
from src.state.models import Action, AppState
from src.state.persistence import PersistencePort
from src.state.reducer import colors_changed, initial_state, reducer

logger = logging.getLogger("contrast_grid.state.store")

Listener = Callable[[AppState], None]


class ContrastStore:
    """Own the state, apply actions, persist content changes.

    Usage::

        store = ContrastStore(UrlPersistence(InMemoryHistory(location_search)))
        store.dispatch(EditColor(index=0, value="#ff00ff"))
        matrix = store.matrix()
    """

    def __init__(
        self,
        persistence: PersistencePort,
        state: AppState | None = None,
        resolver: ColorResolver | None = None,
    ) -> None:
        self._persistence = persistence
        self._resolver = resolver
        self._state = state if state is not None else initial_state(persistence.load())
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call *listener* with every new snapshot; returns an unsubscribe function."""
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def dispatch(self, action: Action | Mapping[str, Any]) -> AppState:
        previous = self._state
        self._state = reducer(previous, action)
        if self._state is previous:
            return self._state

        if colors_changed(previous, self._state):
            self._persistence.save(self._state)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def flush(self) -> None:
        """Force any coalesced URL write out now (e.g. before shutdown)."""
        flush = getattr(self._persistence, "flush", None)
        if flush is not None:
            flush()

    def matrix(self) -> Matrix:
        """Contrast matrix for the current snapshot; recomputed on every call."""
        state = self._state
        return build_matrix(
            state.colors,
            comparison=state.comparison,
            minimum_contrast=state.minimum_contrast,
            titles=state.titles,
            grayscale=state.grayscale,
            resolver=self._resolver,
        )
