"""Data types shared by the solar dial engine."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

import numpy as np

MINUTES_PER_DAY = 1440


class DstRule(str, Enum):
    """Daylight saving rule attached to a location."""

    NONE = "none"
    EU = "EU"

    @classmethod
    def from_tag(cls, tag: Optional[str]) -> "DstRule":
        """Map a dataset tag to a rule. Only the literal ``EU`` enables DST."""
        if tag is not None and tag.upper() == "EU":
            return cls.EU
        return cls.NONE


class TwilightPhase(str, Enum):
    """Sky phase by refraction-corrected solar elevation."""

    DAY = "day"
    GOLDEN = "golden"
    CIVIL = "civil"
    NAUTICAL = "nautical"
    ASTRONOMICAL = "astronomical"
    NIGHT = "night"


def classify_twilight(corrected_elevation: float) -> TwilightPhase:
    """Classify a corrected elevation (degrees) into a twilight phase."""
    if corrected_elevation >= 3.0:
        return TwilightPhase.DAY
    if corrected_elevation >= 0.0:
        return TwilightPhase.GOLDEN
    if corrected_elevation >= -6.0:
        return TwilightPhase.CIVIL
    if corrected_elevation >= -12.0:
        return TwilightPhase.NAUTICAL
    if corrected_elevation >= -18.0:
        return TwilightPhase.ASTRONOMICAL
    return TwilightPhase.NIGHT


@dataclass(frozen=True)
class Location:
    """A resolved geographic location.

    Latitude and longitude are decimal degrees, longitude positive east.
    ``timezone`` is the base UTC offset in hours and excludes DST.
    """

    name: str
    latitude: float
    longitude: float
    timezone: float
    dst_rule: DstRule = DstRule.NONE

    def __post_init__(self) -> None:
        """Validate coordinate ranges."""
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"latitude must be between -90 and 90, got {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(
                f"longitude must be between -180 and 180, got {self.longitude}"
            )


@dataclass(frozen=True)
class SolarEphemeris:
    """Intermediate NOAA quantities for one Julian moment (degrees unless noted)."""

    julian_day: float
    julian_century: float
    geom_mean_longitude: float
    geom_mean_anomaly: float
    eccentricity: float
    equation_of_center: float
    true_longitude: float
    true_anomaly: float
    radius_vector_au: float
    apparent_longitude: float
    mean_obliquity: float
    corrected_obliquity: float
    right_ascension: float
    declination: float
    equation_of_time: float  # minutes


@dataclass(frozen=True)
class SolarPositionSample:
    """Solar position for one minute of a civil day."""

    solar_time_minutes: float
    elevation_deg: float
    corrected_elevation_deg: float
    azimuth_deg: float
    apparent_longitude_deg: float

    @property
    def phase(self) -> TwilightPhase:
        return classify_twilight(self.corrected_elevation_deg)


@dataclass(frozen=True)
class Daylight:
    """Sunrise, solar noon and sunset as fractions of the civil day.

    ``sunrise``/``sunset`` are None when the Sun does not cross the
    horizon; ``polar`` is then ``"day"`` or ``"night"``.
    """

    solar_noon: float
    sunrise: Optional[float]
    sunset: Optional[float]
    duration_minutes: float
    polar: Optional[str] = None


@dataclass(frozen=True, eq=False)
class DailyTable:
    """Five parallel per-minute sequences for one civil day.

    Index ``i`` is minute ``i`` of the civil day. Arrays are read-only.
    """

    date: date
    solar_time_minutes: np.ndarray
    elevation_deg: np.ndarray
    corrected_elevation_deg: np.ndarray
    azimuth_deg: np.ndarray
    apparent_longitude_deg: np.ndarray

    def __post_init__(self) -> None:
        """Check lengths and freeze the arrays."""
        for name in self.field_names():
            array = getattr(self, name)
            if array.shape != (MINUTES_PER_DAY,):
                raise ValueError(
                    f"{name} must have {MINUTES_PER_DAY} entries, got {array.shape}"
                )
            array.setflags(write=False)

    @staticmethod
    def field_names() -> tuple:
        return (
            "solar_time_minutes",
            "elevation_deg",
            "corrected_elevation_deg",
            "azimuth_deg",
            "apparent_longitude_deg",
        )

    def __len__(self) -> int:
        return MINUTES_PER_DAY

    def sample(self, minute: int) -> SolarPositionSample:
        """Return the stored sample for a civil minute."""
        if not 0 <= minute < MINUTES_PER_DAY:
            raise IndexError(f"minute out of range: {minute}")
        return SolarPositionSample(
            *(float(getattr(self, name)[minute]) for name in self.field_names())
        )

    def solar_noon_index(self) -> int:
        """Minute with the highest elevation."""
        return int(np.argmax(self.elevation_deg))

    def phases(self) -> list:
        return [classify_twilight(float(e)) for e in self.corrected_elevation_deg]

    def to_dict(self, step: int = 1) -> dict:
        """Convert the table to a dictionary for JSON export."""
        minutes = list(range(0, MINUTES_PER_DAY, step))
        return {
            "date": self.date.isoformat(),
            "minutes": minutes,
            **{
                name: [round(float(getattr(self, name)[i]), 6) for i in minutes]
                for name in self.field_names()
            },
        }


@dataclass(frozen=True)
class DialSnapshot:
    """Everything the renderer needs for one paint pass."""

    location: Location
    timezone: float  # effective offset, DST included
    date: date
    minute: int
    current: SolarPositionSample
    table: DailyTable
    refreshed_at: datetime

    @property
    def time_fraction(self) -> float:
        """Civil time of day as a fraction of a full day."""
        return self.minute / MINUTES_PER_DAY

    @property
    def pointer_fraction(self) -> float:
        """Dial pointer angle: current solar time as a fraction of a day."""
        return self.current.solar_time_minutes / MINUTES_PER_DAY
