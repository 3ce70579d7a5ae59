"""Automatic clean scheduling."""

from .service import CleanScheduler, ScheduledRun, next_end_of_day_run, next_interval_run

__all__ = ["CleanScheduler", "ScheduledRun", "next_end_of_day_run", "next_interval_run"]
