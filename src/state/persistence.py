"""URL-history persistence for grid state.

The store hands every content-changing snapshot to a :class:`PersistencePort`.
:class:`UrlPersistence` is the real one: it encodes the state into the query
string and pushes a history entry, coalescing bursts of edits so typing a
color does not create one entry per keystroke.

Rate limiting (:class:`CoalescingWriter`):
    - the first write of a burst is scheduled immediately (delay 0), i.e.
      after the current event turn rather than inside it
    - later writes inside the window replace the pending payload
    - one trailing write at the end of the window persists the latest payload

The browser's ``window.history`` / ``location`` pair is abstracted as
:class:`HistoryPort`; :class:`InMemoryHistory` implements it for tests and
non-browser hosts.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Generic, Protocol, TypeVar
from urllib.parse import urlsplit

from src.state.models import AppState
from src.state.url_codec import DecodedQuery, decode, encode

logger = logging.getLogger("contrast_grid.state.persistence")

T = TypeVar("T")


class Cancellable(Protocol):
    def cancel(self) -> None: ...


# (delay_seconds, callback) -> handle
Scheduler = Callable[[float, Callable[[], None]], Cancellable]
Clock = Callable[[], float]


def timer_scheduler(delay: float, callback: Callable[[], None]) -> Cancellable:
    """Run *callback* once on a daemon timer thread after *delay* seconds."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()
    return timer


# ---------------------------------------------------------------------------
# Ports
# ---------------------------------------------------------------------------


class HistoryPort(Protocol):
    """The subset of browser location/history the persistence layer needs."""

    @property
    def pathname(self) -> str: ...

    @property
    def search(self) -> str: ...

    def push_state(self, url: str) -> None: ...


class PersistencePort(Protocol):
    def load(self) -> DecodedQuery: ...

    def save(self, state: AppState) -> None: ...


class InMemoryHistory:
    """History stack held in memory.

    Usage::

        history = InMemoryHistory("?colors=red|blue")
        history.search          # "?colors=red|blue"
        history.push_state("/?colors=red")
        history.entries         # ["/?colors=red|blue", "/?colors=red"]
    """

    def __init__(self, search: str = "", pathname: str = "/") -> None:
        query = search.lstrip("?")
        self._entries: list[str] = [f"{pathname}?{query}" if query else pathname]
        self._lock = threading.Lock()

    @property
    def entries(self) -> list[str]:
        with self._lock:
            return list(self._entries)

    @property
    def pathname(self) -> str:
        return urlsplit(self.entries[-1]).path or "/"

    @property
    def search(self) -> str:
        query = urlsplit(self.entries[-1]).query
        return f"?{query}" if query else ""

    def push_state(self, url: str) -> None:
        with self._lock:
            self._entries.append(url)


# ---------------------------------------------------------------------------
# Coalescing
# ---------------------------------------------------------------------------


class CoalescingWriter(Generic[T]):
    """Deferred, rate-limited writer with leading and trailing edges.

    At most one write happens per *interval*; the most recent payload is
    always written eventually.

    Args:
        write:    Callback receiving the payload to persist.
        interval: Minimum seconds between two writes.
        clock:    Monotonic time source.
        schedule: Deferred-call primitive; defaults to :func:`timer_scheduler`.
    """

    def __init__(
        self,
        write: Callable[[T], None],
        interval: float,
        *,
        clock: Clock = time.monotonic,
        schedule: Scheduler = timer_scheduler,
    ) -> None:
        self._write = write
        self._interval = interval
        self._clock = clock
        self._schedule = schedule
        self._lock = threading.Lock()
        self._pending: T | None = None
        self._has_pending = False
        self._handle: Cancellable | None = None
        self._last_write: float | None = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._has_pending

    def submit(self, payload: T) -> None:
        """Queue *payload*; it supersedes any payload not yet written."""
        with self._lock:
            self._pending = payload
            self._has_pending = True
            if self._handle is not None:
                return
            now = self._clock()
            if self._last_write is None or now - self._last_write >= self._interval:
                delay = 0.0
            else:
                delay = self._interval - (now - self._last_write)
            self._handle = self._schedule(delay, self._fire)

    def flush(self) -> None:
        """Write the pending payload now instead of waiting for the timer."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
        self._fire()

    def cancel(self) -> None:
        """Drop the pending payload and any scheduled write."""
        with self._lock:
            if self._handle is not None:
                self._handle.cancel()
            self._handle = None
            self._pending = None
            self._has_pending = False

    def _fire(self) -> None:
        with self._lock:
            self._handle = None
            if not self._has_pending:
                return
            payload = self._pending
            self._pending = None
            self._has_pending = False
            self._last_write = self._clock()
        try:
            self._write(payload)  # type: ignore[arg-type]
        except Exception:
            logger.exception("Deferred write failed")


# ---------------------------------------------------------------------------
# URL persistence
# ---------------------------------------------------------------------------


class UrlPersistence:
    """Persist grid state into the query string of a :class:`HistoryPort`.

    Usage::

        persistence = UrlPersistence(InMemoryHistory(), interval=1.0)
        store = ContrastStore(persistence)
    """

    def __init__(
        self,
        history: HistoryPort,
        *,
        interval: float = 1.0,
        path: str | None = None,
        default_colors: tuple[str, ...] | None = None,
        clock: Clock = time.monotonic,
        schedule: Scheduler = timer_scheduler,
    ) -> None:
        self._history = history
        self._path = path
        self._default_colors = default_colors
        self._writer: CoalescingWriter[AppState] = CoalescingWriter(
            self._push, interval, clock=clock, schedule=schedule
        )

    def load(self) -> DecodedQuery:
        decoded = decode(self._history.search, self._default_colors)
        logger.info(
            "Loaded %d color(s), returning session: %s",
            len(decoded.colors),
            decoded.from_session,
        )
        return decoded

    def save(self, state: AppState) -> None:
        self._writer.submit(state)

    def flush(self) -> None:
        self._writer.flush()

    def _push(self, state: AppState) -> None:
        query = encode(
            state.colors,
            state.titles,
            grayscale=state.grayscale,
            base_query=self._history.search,
        )
        url = f"{self._path or self._history.pathname}?{query}"
        self._history.push_state(url)
        logger.info("Pushed history entry with %d color(s)", len(state.colors))
