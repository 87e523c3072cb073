"""Main module for Solar Dial.

This module ties location, DST and table building into the refresh
cycle and hands snapshots to a renderer.
"""

import signal
import sys
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from solardial.config import Config
from solardial.dst import effective_timezone
from solardial.locations import LocationResolver
from solardial.logger import get_logger
from solardial.models import DialSnapshot, Location
from solardial.scheduler import RefreshScheduler
from solardial.solar import DegenerateGeometryError
from solardial.table import build_daily_table

logger = get_logger(__name__)

Renderer = Callable[[DialSnapshot], None]


def resolve_location(
    config: Config, resolver: Optional[LocationResolver] = None
) -> Location:
    """Location from explicit coordinates if configured, else by name.

    Raises:
        ConfigurationError: If the location cannot be resolved.
    """
    loc = config.location
    if loc.has_coordinates:
        return LocationResolver.from_coordinates(
            loc.latitude, loc.longitude, loc.timezone
        )
    if resolver is None:
        resolver = LocationResolver.default(loc.dataset)
    return resolver.resolve(loc.name)


def local_time(
    location: Location, now: datetime, home_timezone: Optional[float] = None
) -> tuple:
    """Location's civil time and effective timezone for a host clock reading.

    With a home timezone the host time is shifted by the difference between
    the location's effective timezone and the home timezone.
    """
    tz = effective_timezone(location, now, home_timezone)
    shift = 0.0 if home_timezone is None else tz - home_timezone
    return now + timedelta(hours=shift), tz


class SolarDialEngine:
    """Owns the location and the latest snapshot, and runs refresh cycles."""

    def __init__(
        self,
        location: Location,
        home_timezone: Optional[float] = None,
        renderer: Optional[Renderer] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the engine.

        Args:
            location: Resolved location.
            home_timezone: UTC offset of the host clock in hours. None means
                the host clock shows the location's civil time.
            renderer: Called with every new snapshot.
            clock: Source of the host time.
        """
        self.location = location
        self.home_timezone = home_timezone
        self.renderer = renderer
        self.clock = clock
        self.scheduler: Optional[RefreshScheduler] = None
        self._snapshot: Optional[DialSnapshot] = None
        self._running = False
        self._failures = 0

    @classmethod
    def from_config(
        cls, config: Config, renderer: Optional[Renderer] = None
    ) -> "SolarDialEngine":
        """Create an engine for the configured location.

        Raises:
            ConfigurationError: If the location cannot be resolved.
        """
        return cls(
            resolve_location(config),
            home_timezone=config.location.home_timezone,
            renderer=renderer,
        )

    @property
    def snapshot(self) -> Optional[DialSnapshot]:
        """Latest complete snapshot, or None before the first good refresh."""
        return self._snapshot

    def refresh(self, now: Optional[datetime] = None) -> DialSnapshot:
        """Run one refresh cycle.

        Recomputes the effective timezone, rebuilds the daily table for the
        location's current date and picks the current minute's sample.

        Raises:
            DegenerateGeometryError: If the table cannot be built. The
                previous snapshot is kept.
        """
        if now is None:
            now = self.clock()

        local, tz = local_time(self.location, now, self.home_timezone)
        minute = local.hour * 60 + local.minute

        table = build_daily_table(
            local.date(), self.location.latitude, self.location.longitude, tz
        )
        snapshot = DialSnapshot(
            location=self.location,
            timezone=tz,
            date=local.date(),
            minute=minute,
            current=table.sample(minute),
            table=table,
            refreshed_at=now,
        )
        self._snapshot = snapshot
        logger.debug(
            f"Refreshed {self.location.name} {local:%Y-%m-%d %H:%M} UTC{tz:+g}: "
            f"elevation {snapshot.current.corrected_elevation_deg:+.1f}, "
            f"azimuth {snapshot.current.azimuth_deg:.0f}"
        )

        if self.renderer is not None:
            self.renderer(snapshot)
        return snapshot

    def tick(self) -> Optional[DialSnapshot]:
        """Scheduled refresh. Degenerate geometry keeps the last good snapshot."""
        try:
            snapshot = self.refresh()
        except DegenerateGeometryError as e:
            self._failures += 1
            logger.error(f"Solar geometry undefined, keeping previous table: {e}")
            return None
        self._failures = 0
        return snapshot

    def run_daemon(self, config: Config) -> None:
        """Refresh on the configured interval until stopped."""
        logger.info(f"Starting Solar Dial for {self.location.name}")

        def signal_handler(signum, frame):
            logger.info(f"Received signal {signum}, shutting down...")
            self.stop()
            sys.exit(0)

        signal.signal(signal.SIGTERM, signal_handler)
        signal.signal(signal.SIGINT, signal_handler)

        self.tick()

        self.scheduler = RefreshScheduler(config=config.refresh, on_tick=self.tick)
        self.scheduler.start()
        self._running = True

        try:
            while self._running:
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
        finally:
            self.stop()

    def stop(self) -> None:
        """Stop the refresh timer."""
        self._running = False
        if self.scheduler is not None:
            self.scheduler.stop()
            self.scheduler = None
        logger.info("Solar Dial stopped")

    def get_status(self) -> dict:
        """Get current engine status."""
        snapshot = self._snapshot
        return {
            "location": {
                "name": self.location.name,
                "latitude": self.location.latitude,
                "longitude": self.location.longitude,
                "timezone": self.location.timezone,
                "dst_rule": self.location.dst_rule.value,
            },
            "home_timezone": self.home_timezone,
            "schedule": (
                self.scheduler.get_status() if self.scheduler else {"running": False}
            ),
            "consecutive_failures": self._failures,
            "last_refresh": snapshot.refreshed_at.isoformat() if snapshot else None,
        }
