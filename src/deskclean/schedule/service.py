"""Interval and end-of-day triggers that drive automatic cleans."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Literal, Optional

from deskclean.cleaner import DesktopCleaner
from deskclean.config.models import Preferences
from deskclean.errors import CleanerBusyError, DeskCleanError
from deskclean.organization import OrganizeReport

LOGGER = logging.getLogger(__name__)

Trigger = Literal["interval", "end_of_day"]

# Upper bound on a single wait so preference changes are noticed.
_MAX_WAIT_SECONDS = 60.0


def _local_now() -> datetime:
    return datetime.now().astimezone()


def next_interval_run(last: datetime, minutes: int) -> datetime:
    return last + timedelta(minutes=minutes)


def next_end_of_day_run(now: datetime, hour: int, minute: int) -> datetime:
    """Return today's run at ``hour:minute``, or tomorrow's if that time has passed."""
    target = now.replace(hour=hour, minute=minute, second=0, microsecond=0)
    if target <= now:
        target += timedelta(days=1)
    return target


@dataclass(slots=True)
class ScheduledRun:
    """Outcome of a trigger firing.

    Attributes:
        triggers: Triggers that were due; one pass serves all of them.
        started_at: Time the pass was started.
        report: Result of the pass, when it ran.
        error: Reason the pass did not complete.
    """

    triggers: list[Trigger]
    started_at: datetime
    report: Optional[OrganizeReport] = None
    error: Optional[str] = None


class CleanScheduler:
    """Fire organize passes on a repeating interval and once a day."""

    def __init__(
        self,
        cleaner: DesktopCleaner,
        preferences_loader: Callable[[], Preferences],
        *,
        clock: Callable[[], datetime] = _local_now,
        on_run: Optional[Callable[[ScheduledRun], None]] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            cleaner: Facade that performs the passes.
            preferences_loader: Returns current preferences; called on every tick.
            clock: Source of the current, timezone-aware local time.
            on_run: Optional callback invoked after every fired trigger.
        """
        self._cleaner = cleaner
        self._preferences_loader = preferences_loader
        self._clock = clock
        self._on_run = on_run
        self._next_interval: Optional[datetime] = None
        self._interval_minutes: Optional[int] = None
        self._next_end_of_day: Optional[datetime] = None
        self._end_of_day_time: Optional[str] = None

    @property
    def next_interval(self) -> Optional[datetime]:
        return self._next_interval

    @property
    def next_end_of_day(self) -> Optional[datetime]:
        return self._next_end_of_day

    def next_due(self) -> Optional[datetime]:
        pending = [due for due in (self._next_interval, self._next_end_of_day) if due is not None]
        return min(pending) if pending else None

    def tick(self, now: Optional[datetime] = None) -> Optional[ScheduledRun]:
        """Sync with current preferences and run a pass if any trigger is due.

        When preferences cannot be loaded the existing schedule is kept and
        nothing fires.

        Returns:
            ScheduledRun | None: Outcome when a pass was attempted.
        """
        current = now or self._clock()
        try:
            preferences = self._preferences_loader()
        except DeskCleanError as exc:
            LOGGER.error("Keeping the previous schedule; preferences could not be loaded: %s", exc)
            return None
        self._sync(current, preferences)

        due: list[Trigger] = []
        if self._next_interval is not None and self._next_interval <= current:
            due.append("interval")
            self._next_interval = next_interval_run(current, preferences.auto_clean_interval)
        if self._next_end_of_day is not None and self._next_end_of_day <= current:
            due.append("end_of_day")
            hour, minute = preferences.end_of_day_components()
            self._next_end_of_day = next_end_of_day_run(current, hour, minute)
        if not due:
            return None

        outcome = self._fire(due, current)
        if self._on_run is not None:
            self._on_run(outcome)
        return outcome

    def run(self, stop_event: threading.Event) -> None:
        """Tick until ``stop_event`` is set, sleeping until the next due trigger."""
        LOGGER.info("Scheduler started.")
        while not stop_event.is_set():
            self.tick()
            due = self.next_due()
            timeout = _MAX_WAIT_SECONDS
            if due is not None:
                remaining = (due - self._clock()).total_seconds()
                timeout = min(_MAX_WAIT_SECONDS, max(0.5, remaining))
            stop_event.wait(timeout)
        LOGGER.info("Scheduler stopped.")

    def _sync(self, now: datetime, preferences: Preferences) -> None:
        if not preferences.auto_clean_enabled:
            self._next_interval = None
            self._interval_minutes = None
        elif self._next_interval is None or self._interval_minutes != preferences.auto_clean_interval:
            self._interval_minutes = preferences.auto_clean_interval
            self._next_interval = next_interval_run(now, preferences.auto_clean_interval)

        if not preferences.clean_at_end_of_day:
            self._next_end_of_day = None
            self._end_of_day_time = None
        elif self._next_end_of_day is None or self._end_of_day_time != preferences.end_of_day_time:
            self._end_of_day_time = preferences.end_of_day_time
            hour, minute = preferences.end_of_day_components()
            self._next_end_of_day = next_end_of_day_run(now, hour, minute)

    def _fire(self, triggers: list[Trigger], now: datetime) -> ScheduledRun:
        outcome = ScheduledRun(triggers=triggers, started_at=now)
        try:
            outcome.report = self._cleaner.clean(now=now)
        except CleanerBusyError as exc:
            LOGGER.info("Skipping scheduled clean: %s", exc)
            outcome.error = str(exc)
        except DeskCleanError as exc:
            LOGGER.error("Scheduled clean failed: %s", exc)
            outcome.error = str(exc)
        return outcome


__all__ = [
    "CleanScheduler",
    "ScheduledRun",
    "next_end_of_day_run",
    "next_interval_run",
]
