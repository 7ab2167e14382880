"""Polling refresh loop for the latest-rates stream.

The controller is single-flight: starting a fetch cancels the one in flight,
and every state mutation is fenced by a generation counter so a superseded
fetch can never overwrite what a later fetch committed, whatever order the
underlying responses arrive in. All methods must be called from inside the
running event loop.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Protocol

from fxlive.core.exceptions.base import AbortedOperation, FxLiveError
from fxlive.core.exceptions.codes import ErrorCode
from fxlive.core.formatting import StalenessLevel, seconds_since, staleness_level
from fxlive.core.logging import get_logger, log_context
from fxlive.core.models.market import normalize_codes, validate_code
from fxlive.core.models.rates import RateSnapshot
from fxlive.core.patterns.cancellation import CancellationToken

log = get_logger(__name__)

DEFAULT_INTERVAL_SECONDS = 30.0
MIN_INTERVAL_SECONDS = 15.0


class SyncState(str, Enum):
    IDLE = "idle"
    SYNCING = "syncing"
    LOADED = "loaded"
    DEGRADED = "degraded"


class LatestRatesSource(Protocol):
    async def fetch_latest(
        self,
        base: str,
        symbols: list[str] | tuple[str, ...],
        cancel_token: CancellationToken | None = None,
    ) -> RateSnapshot: ...


@dataclass(frozen=True, slots=True)
class RefreshStatus:
    """Read-only view of a refresh stream."""

    state: SyncState
    snapshot: RateSnapshot | None
    error_message: str | None
    is_syncing: bool
    symbols: tuple[str, ...]
    auto_refresh: bool
    interval_seconds: float
    last_success_at: datetime | None
    last_failure_at: datetime | None
    seconds_since_success: int | None
    staleness: StalenessLevel

    @property
    def is_stale(self) -> bool:
        """True while an older snapshot is shown after a failed refresh."""
        return self.state is SyncState.DEGRADED and self.snapshot is not None


StatusListener = Callable[[RefreshStatus], None]


class RefreshController:
    """Owns the latest snapshot of one tracked symbol set."""

    def __init__(
        self,
        client: LatestRatesSource,
        base: str,
        *,
        auto_refresh: bool = True,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        min_interval_seconds: float = MIN_INTERVAL_SECONDS,
        max_symbols: int = 20,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._client = client
        self._base = validate_code(base)
        self._min_interval = min_interval_seconds
        self._interval = max(interval_seconds, min_interval_seconds)
        self._auto_refresh = auto_refresh
        self._max_symbols = max_symbols
        self._clock = clock or (lambda: datetime.now(UTC))

        self._symbols: tuple[str, ...] = ()
        self._state = SyncState.IDLE
        self._snapshot: RateSnapshot | None = None
        self._error: str | None = None
        self._syncing = False
        self._last_success_at: datetime | None = None
        self._last_failure_at: datetime | None = None

        self._generation = 0
        self._token: CancellationToken | None = None
        self._tasks: set[asyncio.Task] = set()
        self._timer: asyncio.Task | None = None
        self._listeners: list[StatusListener] = []

    @property
    def base(self) -> str:
        return self._base

    @property
    def state(self) -> SyncState:
        return self._state

    @property
    def snapshot(self) -> RateSnapshot | None:
        return self._snapshot

    @property
    def error_message(self) -> str | None:
        return self._error

    @property
    def is_syncing(self) -> bool:
        return self._syncing

    @property
    def symbols(self) -> tuple[str, ...]:
        return self._symbols

    @property
    def auto_refresh(self) -> bool:
        return self._auto_refresh

    @property
    def interval_seconds(self) -> float:
        return self._interval

    @property
    def last_success_at(self) -> datetime | None:
        return self._last_success_at

    @property
    def last_failure_at(self) -> datetime | None:
        return self._last_failure_at

    def status(self) -> RefreshStatus:
        elapsed = seconds_since(self._last_success_at, self._clock())
        return RefreshStatus(
            state=self._state,
            snapshot=self._snapshot,
            error_message=self._error,
            is_syncing=self._syncing,
            symbols=self._symbols,
            auto_refresh=self._auto_refresh,
            interval_seconds=self._interval,
            last_success_at=self._last_success_at,
            last_failure_at=self._last_failure_at,
            seconds_since_success=elapsed,
            staleness=staleness_level(elapsed),
        )

    def add_listener(self, listener: StatusListener) -> None:
        self._listeners.append(listener)

    def remove_listener(self, listener: StatusListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def set_tracked_symbols(self, codes: list[str] | tuple[str, ...]) -> asyncio.Task | None:
        """Replace the tracked symbol set.

        A changed non-empty set fetches immediately and restarts the timer
        cadence from now; an empty set returns the stream to ``IDLE``. Order
        is kept for display but does not count as a change.

        Raises:
            DataValidationError: if any code is not 3-5 letters.
        """
        symbols = tuple(validate_code(code) for code in normalize_codes(list(codes)))[: self._max_symbols]
        if set(symbols) == set(self._symbols):
            # same set in a new order: keep the data and the timer
            self._symbols = symbols
            return None
        self._symbols = symbols

        if not symbols:
            self._go_idle()
            return None

        log.info("Tracked symbols changed", symbols=list(symbols))
        task = self._start_fetch("symbols")
        self._restart_timer()
        return task

    def trigger_refresh(self) -> asyncio.Task | None:
        """Start a fetch now, cancelling any fetch already in flight."""
        return self._start_fetch("manual")

    def set_auto_refresh(self, enabled: bool, interval_seconds: float | None = None) -> None:
        """Enable or disable scheduled ticks.

        Disabling stops future ticks but leaves an in-flight fetch alone.
        """
        if interval_seconds is not None:
            self._interval = max(interval_seconds, self._min_interval)
        self._auto_refresh = enabled
        if enabled:
            self._restart_timer()
        else:
            self._stop_timer()
        self._notify()

    async def aclose(self) -> None:
        """Stop the timer and abandon any in-flight fetch."""
        self._stop_timer()
        self._cancel_inflight("closed")
        self._generation += 1
        self._syncing = False
        pending = list(self._tasks)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)

    def _start_fetch(self, reason: str) -> asyncio.Task | None:
        if not self._symbols:
            return None

        self._cancel_inflight("superseded")
        self._generation += 1
        generation = self._generation
        token = CancellationToken()
        self._token = token

        self._syncing = True
        if self._snapshot is None and self._state is SyncState.IDLE:
            self._transition(SyncState.SYNCING)
        self._notify()

        log.debug("Starting fetch", reason=reason, generation=generation)
        task = asyncio.get_running_loop().create_task(
            self._run_fetch(generation, token, self._symbols)
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _run_fetch(
        self,
        generation: int,
        token: CancellationToken,
        symbols: tuple[str, ...],
    ) -> None:
        with log_context(operation="refresh", generation=generation):
            try:
                snapshot = await self._client.fetch_latest(self._base, symbols, cancel_token=token)
            except AbortedOperation:
                log.debug("Fetch aborted")
                return
            except FxLiveError as exc:
                self._commit_failure(generation, token, exc.message, exc.error_code)
                return
            except Exception as exc:
                log.exception("Unexpected fetch failure")
                self._commit_failure(generation, token, str(exc) or "Unknown error", ErrorCode.SYSTEM_ERROR.value)
                return
            self._commit_success(generation, token, snapshot)

    def _commit_success(self, generation: int, token: CancellationToken, snapshot: RateSnapshot) -> None:
        if not self._is_current(generation, token):
            log.debug("Discarding superseded result")
            return

        self._snapshot = snapshot
        self._error = None
        self._syncing = False
        self._last_success_at = self._clock()
        self._token = None
        self._transition(SyncState.LOADED)
        self._notify()

    def _commit_failure(self, generation: int, token: CancellationToken, message: str, error_code: str) -> None:
        if not self._is_current(generation, token):
            log.debug("Discarding superseded failure")
            return
        log.warning("Refresh failed", reason=message, error_code=error_code, stale=self._snapshot is not None)
        self._error = message
        self._syncing = False
        self._last_failure_at = self._clock()
        self._token = None
        self._transition(SyncState.DEGRADED)
        self._notify()

    def _is_current(self, generation: int, token: CancellationToken) -> bool:
        return generation == self._generation and not token.cancelled

    def _cancel_inflight(self, reason: str) -> None:
        if self._token is not None:
            self._token.cancel(reason)
            self._token = None

    def _go_idle(self) -> None:
        self._cancel_inflight("symbols cleared")
        self._generation += 1
        self._stop_timer()
        self._snapshot = None
        self._error = None
        self._syncing = False
        self._transition(SyncState.IDLE)
        self._notify()

    def _restart_timer(self) -> None:
        self._stop_timer()
        if self._auto_refresh and self._symbols:
            self._timer = asyncio.get_running_loop().create_task(self._tick_loop(self._interval))

    def _stop_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    async def _tick_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            log.debug("Auto-refresh tick", interval=interval)
            self._start_fetch("tick")

    def _transition(self, state: SyncState) -> None:
        if state is not self._state:
            log.info(f"Refresh state {self._state.value} -> {state.value}")
            self._state = state

    def _notify(self) -> None:
        if not self._listeners:
            return
        status = self.status()
        for listener in list(self._listeners):
            try:
                listener(status)
            except Exception:
                log.exception("Refresh listener failed")


__all__ = [
    "DEFAULT_INTERVAL_SECONDS",
    "MIN_INTERVAL_SECONDS",
    "LatestRatesSource",
    "RefreshController",
    "RefreshStatus",
    "StatusListener",
    "SyncState",
]
