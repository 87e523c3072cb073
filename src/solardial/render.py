"""Console stand-in for the dial renderer."""

from typing import Callable, Optional

import click

from solardial.models import MINUTES_PER_DAY, DialSnapshot


def format_clock(minutes: float) -> str:
    """Minutes of day as HH:MM, wrapping into 00:00..23:59."""
    whole = int(minutes // 1) % MINUTES_PER_DAY
    return f"{whole // 60:02d}:{whole % 60:02d}"


def format_day_fraction(fraction: Optional[float]) -> str:
    if fraction is None:
        return "--:--"
    return format_clock(fraction * MINUTES_PER_DAY)


def format_readout(snapshot: DialSnapshot) -> str:
    """One-line readout: wall clock, solar time, elevation, azimuth, longitude."""
    current = snapshot.current
    line = (
        f"{snapshot.location.name} UTC{snapshot.timezone:+g}  "
        f"clock {format_clock(snapshot.minute)}  "
        f"solar {format_clock(current.solar_time_minutes)}  "
        f"elevation {current.corrected_elevation_deg:+5.1f}"
    )
    if abs(current.corrected_elevation_deg - current.elevation_deg) > 0.1:
        line += f" ({current.elevation_deg:+5.1f} geometric)"
    line += (
        f"  azimuth {current.azimuth_deg:3.0f}"
        f"  longitude {current.apparent_longitude_deg % 360:3.0f}"
        f"  [{current.phase.value}]"
    )
    return line


class TextDialRenderer:
    """Prints a readout for every snapshot."""

    def __init__(self, echo: Callable[[str], None] = click.echo):
        self.echo = echo
        self.last: Optional[DialSnapshot] = None

    def __call__(self, snapshot: DialSnapshot) -> None:
        self.last = snapshot
        self.echo(format_readout(snapshot))
