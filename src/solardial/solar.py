"""NOAA solar position equations.

Converts a civil date, a time-of-day fraction, a location and a
timezone offset into the Sun's apparent position. All angles are in
degrees unless noted.
"""

import math
from datetime import date

from solardial.angles import to_degrees, to_radians
from solardial.models import Daylight, SolarEphemeris, SolarPositionSample

SERIAL_EPOCH = date(1900, 1, 1)
JULIAN_OFFSET = 2415018.5
J2000 = 2451545.0
DAYS_PER_CENTURY = 36525.0
SUNRISE_ZENITH = 90.833

# Divisors smaller than this are treated as zero.
DEGENERATE_EPSILON = 1e-12
# Rounding slack accepted on acos arguments before they count as out of domain.
DOMAIN_TOLERANCE = 1e-9


class DegenerateGeometryError(ArithmeticError):
    """Raised when the geometry is undefined, e.g. azimuth at a pole."""

    pass


def serial_day(day: date) -> int:
    """Spreadsheet serial day number for a calendar date.

    Days since 1900-01-01 plus 2, so 2000-01-01 is 36526.
    """
    return (day - SERIAL_EPOCH).days + 2


def julian_day(serial: float, time_fraction: float, timezone: float) -> float:
    """Julian day for a local civil moment."""
    return serial + JULIAN_OFFSET + time_fraction - timezone / 24.0


def _sin(deg: float) -> float:
    return math.sin(to_radians(deg))


def _cos(deg: float) -> float:
    return math.cos(to_radians(deg))


def _tan(deg: float) -> float:
    return math.tan(to_radians(deg))


def _acos_deg(value: float, what: str) -> float:
    """acos in degrees, clamping rounding noise and rejecting real overflow."""
    if not math.isfinite(value) or abs(value) > 1.0 + DOMAIN_TOLERANCE:
        raise DegenerateGeometryError(f"{what} undefined (acos argument {value})")
    return to_degrees(math.acos(max(-1.0, min(1.0, value))))


def solar_ephemeris(jday: float) -> SolarEphemeris:
    """Compute the location-independent solar quantities for a Julian day."""
    jcen = (jday - J2000) / DAYS_PER_CENTURY

    gmlong = math.fmod(280.46646 + jcen * (36000.76983 + jcen * 0.0003032), 360.0)
    gmanom = 357.52911 + jcen * (35999.05029 - 0.0001537 * jcen)
    eccent = 0.016708634 - jcen * (0.000042037 + 0.0000001267 * jcen)

    eqofctr = (
        _sin(gmanom) * (1.914602 - jcen * (0.004817 + 0.000014 * jcen))
        + _sin(2 * gmanom) * (0.019993 - 0.000101 * jcen)
        + _sin(3 * gmanom) * 0.000289
    )
    truelong = gmlong + eqofctr
    trueanom = gmanom + eqofctr
    radvect = (1.000001018 * (1 - eccent * eccent)) / (1 + eccent * _cos(trueanom))

    omega = 125.04 - 1934.136 * jcen
    applong = truelong - 0.00569 - 0.00478 * _sin(omega)

    moe = 23 + (
        26 + (21.448 - jcen * (46.815 + jcen * (0.00059 - jcen * 0.001813))) / 60
    ) / 60
    ocorr = moe + 0.00256 * _cos(omega)

    rtasc = to_degrees(math.atan2(_cos(ocorr) * _sin(applong), _cos(applong)))
    decl = to_degrees(math.asin(_sin(ocorr) * _sin(applong)))

    var_y = _tan(ocorr / 2) ** 2
    eqoftime = 4 * to_degrees(
        var_y * _sin(2 * gmlong)
        - 2 * eccent * _sin(gmanom)
        + 4 * eccent * var_y * _sin(gmanom) * _cos(2 * gmlong)
        - 0.5 * var_y * var_y * _sin(4 * gmlong)
        - 1.25 * eccent * eccent * _sin(2 * gmanom)
    )

    return SolarEphemeris(
        julian_day=jday,
        julian_century=jcen,
        geom_mean_longitude=gmlong,
        geom_mean_anomaly=gmanom,
        eccentricity=eccent,
        equation_of_center=eqofctr,
        true_longitude=truelong,
        true_anomaly=trueanom,
        radius_vector_au=radvect,
        apparent_longitude=applong,
        mean_obliquity=moe,
        corrected_obliquity=ocorr,
        right_ascension=rtasc,
        declination=decl,
        equation_of_time=eqoftime,
    )


def solar_time(
    time_fraction: float, eqoftime: float, longitude: float, timezone: float
) -> float:
    """True solar time in minutes. Keeps the sign of the dividend like C fmod."""
    return math.fmod(
        time_fraction * 1440 + eqoftime + 4 * longitude - 60 * timezone, 1440.0
    )


def hour_angle(soltime: float) -> float:
    """Hour angle in degrees from solar time in minutes."""
    if soltime / 4 < 0:
        return soltime / 4 + 180
    return soltime / 4 - 180


def refraction(elevation: float) -> float:
    """Atmospheric refraction correction in degrees for an elevation."""
    if elevation > 85:
        arcsec = 0.0
    elif elevation > 5:
        tan_e = _tan(elevation)
        arcsec = 58.1 / tan_e - 0.07 / tan_e ** 3 + 0.000086 / tan_e ** 5
    elif elevation > -0.575:
        arcsec = 1735 + elevation * (
            -518.2 + elevation * (103.4 + elevation * (-12.79 + elevation * 0.711))
        )
    else:
        arcsec = -20.772 / _tan(elevation)
    return arcsec / 3600


def azimuth(latitude: float, declination: float, zenith: float, hrangle: float) -> float:
    """Azimuth in degrees clockwise from north.

    Raises:
        DegenerateGeometryError: At a pole or with the Sun at the zenith
            or nadir, where the azimuth is undefined.
    """
    divisor = _cos(latitude) * _sin(zenith)
    if abs(divisor) < DEGENERATE_EPSILON:
        raise DegenerateGeometryError(
            f"azimuth undefined at latitude {latitude} with zenith angle {zenith}"
        )
    angle = _acos_deg(
        ((_sin(latitude) * _cos(zenith)) - _sin(declination)) / divisor, "azimuth"
    )
    if hrangle > 0:
        return math.fmod(angle + 180, 360.0)
    return math.fmod(540 - angle, 360.0)


def solar_position(
    serial: float,
    time_fraction: float,
    latitude: float,
    longitude: float,
    timezone: float,
) -> SolarPositionSample:
    """Compute the Sun's position at a civil moment.

    Args:
        serial: Calendar date as a serial day (see ``serial_day``).
        time_fraction: Fraction of the civil day elapsed, in [0, 1).
        latitude: Decimal degrees.
        longitude: Decimal degrees, positive east.
        timezone: Effective UTC offset in hours, DST included.

    Returns:
        SolarPositionSample for the moment.

    Raises:
        DegenerateGeometryError: If the azimuth is undefined.
    """
    eph = solar_ephemeris(julian_day(serial, time_fraction, timezone))

    soltime = solar_time(time_fraction, eph.equation_of_time, longitude, timezone)
    hrangle = hour_angle(soltime)

    zenith = _acos_deg(
        _sin(latitude) * _sin(eph.declination)
        + _cos(latitude) * _cos(eph.declination) * _cos(hrangle),
        "zenith angle",
    )
    elevation = 90 - zenith

    return SolarPositionSample(
        solar_time_minutes=soltime,
        elevation_deg=elevation,
        corrected_elevation_deg=elevation + refraction(elevation),
        azimuth_deg=azimuth(latitude, eph.declination, zenith, hrangle),
        apparent_longitude_deg=eph.apparent_longitude,
    )


def daylight(day: date, latitude: float, longitude: float, timezone: float) -> Daylight:
    """Sunrise, solar noon and sunset for a date, as local day fractions.

    Polar day and polar night are reported through ``Daylight.polar``.

    Raises:
        DegenerateGeometryError: At an exact pole.
    """
    eph = solar_ephemeris(julian_day(serial_day(day), 0.5, timezone))
    divisor = _cos(latitude) * _cos(eph.declination)
    if abs(divisor) < DEGENERATE_EPSILON:
        raise DegenerateGeometryError(f"sunrise undefined at latitude {latitude}")

    noon = (720 - 4 * longitude - eph.equation_of_time + timezone * 60) / 1440
    cos_ha = _cos(SUNRISE_ZENITH) / divisor - _tan(latitude) * _tan(eph.declination)
    if cos_ha > 1.0:
        return Daylight(
            solar_noon=noon, sunrise=None, sunset=None, duration_minutes=0.0, polar="night"
        )
    if cos_ha < -1.0:
        return Daylight(
            solar_noon=noon, sunrise=None, sunset=None, duration_minutes=1440.0, polar="day"
        )

    ha_rise = to_degrees(math.acos(cos_ha))
    return Daylight(
        solar_noon=noon,
        sunrise=noon - ha_rise * 4 / 1440,
        sunset=noon + ha_rise * 4 / 1440,
        duration_minutes=8 * ha_rise,
    )
