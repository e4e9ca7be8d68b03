"""Shared fixtures for reducer, codec, persistence and store tests."""

from __future__ import annotations

from typing import Callable

import pytest

from src.state.models import AppState
from src.state.url_codec import DecodedQuery

SEYCHELLES = ("blue", "yellow", "red", "white", "green")


# ---------------------------------------------------------------------------
# Deterministic time
# ---------------------------------------------------------------------------


class ManualClock:
    def __init__(self, start: float = 100.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ScheduledCall:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False
        self.ran = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Records deferred calls; ``run_pending()`` executes them in order."""

    def __init__(self) -> None:
        self.calls: list[ScheduledCall] = []

    def __call__(self, delay: float, callback: Callable[[], None]) -> ScheduledCall:
        call = ScheduledCall(delay, callback)
        self.calls.append(call)
        return call

    @property
    def delays(self) -> list[float]:
        return [c.delay for c in self.calls]

    def run_pending(self) -> int:
        ran = 0
        for call in list(self.calls):
            if call.cancelled or call.ran:
                continue
            call.ran = True
            call.callback()
            ran += 1
        return ran


class FakePersistence:
    """In-memory persistence port capturing every saved snapshot."""

    def __init__(self, decoded: DecodedQuery | None = None) -> None:
        self.decoded = decoded or DecodedQuery(colors=SEYCHELLES)
        self.saved: list[AppState] = []
        self.flushed = 0

    def load(self) -> DecodedQuery:
        return self.decoded

    def save(self, state: AppState) -> None:
        self.saved.append(state)

    def flush(self) -> None:
        self.flushed += 1


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def fake_persistence() -> FakePersistence:
    return FakePersistence()


@pytest.fixture
def three_colors() -> AppState:
    return AppState(colors=("#000", "", "#fff"), bulk_edit_value="draft")
