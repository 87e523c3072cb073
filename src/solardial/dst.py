"""Daylight saving time adjustment.

The EU rule is evaluated at whole-hour precision on the location's wall
clock: the adjustment switches once the hour is past 3 on the last
Sunday of March and of October.
"""

from datetime import date, datetime, timedelta
from typing import Optional

from solardial.models import DstRule, Location

SUNDAY = 6
TRANSITION_HOUR = 3


def last_sunday(year: int, month: int) -> date:
    """Last Sunday of a 31-day month, searching back from the 31st."""
    day = 31
    while date(year, month, day).weekday() != SUNDAY:
        day -= 1
    return date(year, month, day)


def eu_dst_offset(today: date, hour: int) -> int:
    """EU daylight saving offset in hours (0 or 1) for a local date and hour."""
    march = last_sunday(today.year, 3)
    october = last_sunday(today.year, 10)

    offset = 0
    if today == march and hour > TRANSITION_HOUR:
        offset = 1
    if today > march:
        offset = 1
    if today == october and hour > TRANSITION_HOUR:
        offset = 0
    if today > october:
        offset = 0
    return offset


def local_hour(now: datetime, shift_hours: float) -> int:
    """Hour of ``now`` moved by ``shift_hours``, wrapped within the day."""
    return (now + timedelta(hours=shift_hours)).hour


def dst_offset(
    rule: DstRule,
    now: datetime,
    base_timezone: float,
    home_timezone: Optional[float] = None,
) -> int:
    """DST adjustment for a rule at the host time ``now``.

    ``home_timezone`` is the zone of the host clock; when None the host
    clock is taken to be the location's clock. The calendar date is the
    host's date.
    """
    if rule is DstRule.NONE:
        return 0
    home = base_timezone if home_timezone is None else home_timezone
    return eu_dst_offset(now.date(), local_hour(now, base_timezone - home))


def effective_timezone(
    location: Location, now: datetime, home_timezone: Optional[float] = None
) -> float:
    """Base UTC offset of a location plus the DST adjustment at ``now``."""
    return location.timezone + dst_offset(
        location.dst_rule, now, location.timezone, home_timezone
    )
