"""Refresh timer for Solar Dial."""

from datetime import datetime
from typing import Callable, Optional

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from solardial.config import RefreshConfig
from solardial.logger import get_logger

logger = get_logger(__name__)


class SchedulerError(Exception):
    """Exception raised for scheduler-related errors."""

    pass


class RefreshScheduler:
    """Periodic refresh ticks using APScheduler.

    Ticks never overlap: a single job instance runs at a time and missed
    ticks are coalesced.
    """

    def __init__(
        self,
        config: RefreshConfig,
        on_tick: Callable[[], None],
    ):
        """Initialize the scheduler.

        Args:
            config: Refresh configuration.
            on_tick: Callback executed on every tick.
        """
        if config.interval_seconds <= 0:
            raise SchedulerError(
                f"Invalid refresh interval: {config.interval_seconds}. "
                "Expected a positive number of seconds."
            )
        self.config = config
        self.on_tick = on_tick
        self._scheduler: Optional[BackgroundScheduler] = None
        self._job_id = "dial_refresh"

    def start(self) -> None:
        """Start the scheduler."""
        if self._scheduler is not None and self._scheduler.running:
            logger.warning("Scheduler already running")
            return

        self._scheduler = BackgroundScheduler()
        self._scheduler.add_job(
            self._tick_wrapper,
            trigger=IntervalTrigger(seconds=self.config.interval_seconds),
            id=self._job_id,
            name="Dial Refresh",
            max_instances=1,
            coalesce=True,
            replace_existing=True,
        )
        self._scheduler.start()

        logger.info(
            f"Scheduler started, refreshing every {self.config.interval_seconds:g}s"
        )

    def stop(self) -> None:
        """Stop the scheduler gracefully."""
        if self._scheduler is not None:
            self._scheduler.shutdown(wait=True)
            self._scheduler = None
            logger.info("Scheduler stopped")

    def _tick_wrapper(self) -> None:
        """Run one tick, logging failures so the timer keeps going."""
        try:
            self.on_tick()
        except Exception as e:
            logger.error(f"Refresh failed: {e}")

    def get_next_tick_time(self) -> Optional[datetime]:
        """Get the next scheduled tick, or None if not running."""
        if self._scheduler is None or not self._scheduler.running:
            return None

        job = self._scheduler.get_job(self._job_id)
        if job is None:
            return None

        return job.next_run_time

    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._scheduler is not None and self._scheduler.running

    def get_status(self) -> dict:
        """Get scheduler status information."""
        next_tick = self.get_next_tick_time()

        return {
            "running": self.is_running(),
            "interval_seconds": self.config.interval_seconds,
            "next_tick": next_tick.isoformat() if next_tick else None,
        }
