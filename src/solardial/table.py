"""Per-minute solar tables for one civil day."""

from datetime import date

import numpy as np

from solardial.logger import get_logger
from solardial.models import MINUTES_PER_DAY, DailyTable
from solardial.solar import DegenerateGeometryError, serial_day, solar_position

logger = get_logger(__name__)


def build_daily_table(
    day: date,
    latitude: float,
    longitude: float,
    timezone: float,
) -> DailyTable:
    """Compute the solar position for every minute of a civil day.

    Args:
        day: Civil date at the location.
        latitude: Decimal degrees.
        longitude: Decimal degrees, positive east.
        timezone: Effective UTC offset in hours, DST included.

    Returns:
        A complete DailyTable.

    Raises:
        DegenerateGeometryError: If any minute is undefined. No partial
            table is returned.
    """
    serial = serial_day(day)
    columns = np.empty((5, MINUTES_PER_DAY), dtype=np.float64)

    for minute in range(MINUTES_PER_DAY):
        try:
            sample = solar_position(
                serial, minute / MINUTES_PER_DAY, latitude, longitude, timezone
            )
        except DegenerateGeometryError as e:
            raise DegenerateGeometryError(
                f"{day.isoformat()} minute {minute}: {e}"
            ) from e
        columns[:, minute] = (
            sample.solar_time_minutes,
            sample.elevation_deg,
            sample.corrected_elevation_deg,
            sample.azimuth_deg,
            sample.apparent_longitude_deg,
        )

    logger.debug(
        f"Built table for {day.isoformat()} at ({latitude}, {longitude}) UTC{timezone:+g}"
    )
    return DailyTable(day, *(columns[i].copy() for i in range(5)))
