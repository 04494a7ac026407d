"""Live update scheduling: tick the roster on a fixed cadence.

The cadence runs on APScheduler's background thread. Ticks and refreshes
share the roster lock, so a tick never observes a half-applied refresh.
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta, timezone

from apscheduler.schedulers.background import BackgroundScheduler

from globetrack.core.engine import PositionSample
from globetrack.core.roster import Roster, RosterDiff
from globetrack.core.tle import ElementRecord
from globetrack.utils.config import DEFAULT_CONFIG

logger = logging.getLogger(__name__)

TICK_JOB_ID = "globetrack-tick"


class SimulationClock:
    """A shared clock that only moves forward.

    ``now()`` is ``start + rate * (monotonic seconds since construction)``,
    so it is unaffected by wall-clock adjustments and can run faster or
    slower than real time.

    Args:
        start: Simulated instant at construction. Defaults to now (UTC).
        rate: Simulated seconds per real second. Must be positive.
        monotonic: Source of monotonic seconds.
    """

    def __init__(
        self,
        start: datetime | None = None,
        rate: float = 1.0,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        if rate <= 0:
            raise ValueError(f"rate must be positive, got {rate}")
        self.start = start or datetime.now(timezone.utc)
        self.rate = rate
        self._monotonic = monotonic
        self._origin = monotonic()
        self._last = self.start
        self._lock = threading.Lock()

    def now(self) -> datetime:
        elapsed = (self._monotonic() - self._origin) * self.rate
        with self._lock:
            candidate = self.start + timedelta(seconds=elapsed)
            if candidate > self._last:
                self._last = candidate
            return self._last


class LiveUpdateScheduler:
    """Drive ``Roster.tick`` on a fixed cadence once the roster is populated.

    Args:
        roster: The roster to drive.
        clock: Time source for refreshes and ticks. Real time by default.
        interval_seconds: Tick cadence. Defaults to the configured value.
        on_tick: Called with the samples of every completed tick.
        on_refresh: Called with the diff of every completed refresh.
    """

    def __init__(
        self,
        roster: Roster,
        clock: SimulationClock | None = None,
        interval_seconds: float | None = None,
        on_tick: Callable[[list[PositionSample]], None] | None = None,
        on_refresh: Callable[[RosterDiff], None] | None = None,
    ) -> None:
        self.roster = roster
        self.clock = clock or SimulationClock()
        self.interval_seconds = interval_seconds or DEFAULT_CONFIG.tick_interval_seconds
        self.on_tick = on_tick
        self.on_refresh = on_refresh
        self._scheduler: BackgroundScheduler | None = None
        self._stopped = False
        self.tick_count = 0

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running

    def refresh(self, records: Iterable[ElementRecord]) -> RosterDiff:
        """Refresh the roster at the clock's current instant."""
        diff = self.roster.refresh(records, self.clock.now())
        if self.on_refresh is not None:
            self.on_refresh(diff)
        return diff

    def run_once(self) -> list[PositionSample] | None:
        """Run one tick now.

        Returns:
            The tick's samples, or None if the tick was skipped because no
            refresh has completed yet or the scheduler has been shut down.
        """
        if self._stopped:
            return None
        if not self.roster.has_refreshed:
            logger.debug("Skipping tick: roster not populated yet")
            return None

        with self.roster.lock:
            if self._stopped:
                return None
            samples = self.roster.tick(self.clock.now())
            self.tick_count += 1

        if self.on_tick is not None:
            self.on_tick(samples)
        return samples

    def start(self) -> None:
        """Start the cadence. Calling it twice is a no-op."""
        if self._stopped:
            raise RuntimeError("scheduler has been shut down")
        if self.running:
            return

        scheduler = BackgroundScheduler(daemon=True)
        scheduler.add_job(
            self.run_once,
            "interval",
            seconds=self.interval_seconds,
            id=TICK_JOB_ID,
            max_instances=1,
            coalesce=True,
        )
        scheduler.start()
        self._scheduler = scheduler
        logger.info("Live updates started every %.3gs", self.interval_seconds)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the cadence; no tick starts after this returns."""
        with self.roster.lock:
            self._stopped = True
        if self._scheduler is not None:
            if self._scheduler.running:
                self._scheduler.shutdown(wait=wait)
            self._scheduler = None
            logger.info("Live updates stopped after %d ticks", self.tick_count)

    def __enter__(self) -> LiveUpdateScheduler:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
