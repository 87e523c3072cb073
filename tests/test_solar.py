"""Tests for the NOAA solar position equations."""

import math
from datetime import date

import pytest

from solardial.solar import (
    DegenerateGeometryError,
    azimuth,
    daylight,
    hour_angle,
    julian_day,
    refraction,
    serial_day,
    solar_ephemeris,
    solar_position,
    solar_time,
)

HELSINKI_LAT = 60.16
HELSINKI_LON = 24.83


class TestCalendar:
    """Tests for serial and Julian days."""

    def test_serial_day(self):
        assert serial_day(date(2000, 1, 1)) == 36526
        assert serial_day(date(1900, 3, 1)) == 61

    def test_julian_day_at_j2000(self):
        assert julian_day(36526, 0.5, 0.0) == 2451545.0

    def test_timezone_moves_julian_day_back(self):
        assert julian_day(36526, 0.5, 2.0) == pytest.approx(2451545.0 - 2 / 24)


class TestEphemeris:
    """Tests for solar_ephemeris at J2000.0 (2000-01-01 12:00 UTC)."""

    @pytest.fixture
    def eph(self):
        return solar_ephemeris(2451545.0)

    def test_mean_elements(self, eph):
        assert eph.julian_century == 0.0
        assert eph.geom_mean_longitude == pytest.approx(280.46646)
        assert eph.geom_mean_anomaly == pytest.approx(357.52911)
        assert eph.eccentricity == pytest.approx(0.016708634)
        assert eph.mean_obliquity == pytest.approx(23.4392911, abs=1e-6)

    def test_apparent_position(self, eph):
        assert 280.2 < eph.apparent_longitude < 280.5
        assert -23.2 < eph.declination < -22.9
        assert 280.8 < eph.right_ascension % 360 < 281.7

    def test_radius_vector_near_perihelion(self, eph):
        assert 0.982 < eph.radius_vector_au < 0.985

    def test_equation_of_time(self, eph):
        assert -4.0 < eph.equation_of_time < -2.5


class TestSolarTime:
    """Tests for solar time and hour angle."""

    def test_solar_time_keeps_sign(self):
        assert solar_time(0.0, 0.0, -10.0, 0.0) == -40.0

    def test_solar_time_wraps(self):
        assert solar_time(0.99, 0.0, 20.0, 0.0) == pytest.approx(1425.6 + 80 - 1440)

    @pytest.mark.parametrize(
        "soltime, expected",
        [
            (720.0, 0.0),
            (0.0, -180.0),
            (1000.0, 70.0),
            (-100.0, 155.0),
        ],
    )
    def test_hour_angle(self, soltime, expected):
        assert hour_angle(soltime) == pytest.approx(expected)


class TestRefraction:
    """Tests for the piecewise refraction correction."""

    def test_none_near_zenith(self):
        assert refraction(85.5) == 0.0
        assert refraction(90.0) == 0.0

    def test_high_sun_branch(self):
        tan_e = math.tan(math.radians(10))
        expected = (58.1 / tan_e - 0.07 / tan_e ** 3 + 0.000086 / tan_e ** 5) / 3600
        assert refraction(10.0) == pytest.approx(expected)

    def test_horizon_branch(self):
        assert refraction(0.0) == pytest.approx(1735 / 3600)

    def test_below_horizon_branch(self):
        expected = -20.772 / math.tan(math.radians(-10)) / 3600
        assert refraction(-10.0) == pytest.approx(expected)
        assert refraction(-10.0) > 0

    def test_positive_up_to_85_degrees(self):
        for tenth in range(-900, 851):
            assert refraction(tenth / 10) > 0


class TestAzimuth:
    """Tests for the azimuth quadrant handling."""

    def test_pole_is_degenerate(self):
        with pytest.raises(DegenerateGeometryError):
            azimuth(90.0, 10.0, 80.0, 5.0)

    def test_zenith_sun_is_degenerate(self):
        with pytest.raises(DegenerateGeometryError):
            azimuth(45.0, 45.0, 0.0, 0.0)

    def test_morning_is_east(self):
        assert 0 < azimuth(45.0, 0.0, 60.0, -40.0) < 180

    def test_afternoon_is_west(self):
        assert 180 < azimuth(45.0, 0.0, 60.0, 40.0) < 360


class TestSolarPosition:
    """Tests for solar_position."""

    def test_deterministic(self):
        serial = serial_day(date(2016, 6, 21))
        first = solar_position(serial, 0.37, HELSINKI_LAT, HELSINKI_LON, 3.0)
        second = solar_position(serial, 0.37, HELSINKI_LAT, HELSINKI_LON, 3.0)
        assert first == second

    def test_local_noon_in_helsinki(self):
        """At local mean noon the Sun is near its highest and due south."""
        serial = serial_day(date(2016, 6, 13))
        tz = HELSINKI_LON / 15
        noon = solar_position(serial, 0.5, HELSINKI_LAT, HELSINKI_LON, tz)
        before = solar_position(serial, 0.45, HELSINKI_LAT, HELSINKI_LON, tz)
        after = solar_position(serial, 0.55, HELSINKI_LAT, HELSINKI_LON, tz)

        assert noon.azimuth_deg == pytest.approx(180.0, abs=1.0)
        assert 52.5 < noon.elevation_deg < 53.5
        assert noon.elevation_deg > before.elevation_deg
        assert noon.elevation_deg > after.elevation_deg

    def test_local_noon_southern_hemisphere_is_north(self):
        serial = serial_day(date(2016, 6, 13))
        sample = solar_position(serial, 0.5, -33.869, 151.209, 151.209 / 15)
        assert sample.azimuth_deg < 2.0 or sample.azimuth_deg > 358.0

    def test_no_refraction_near_zenith(self):
        serial = serial_day(date(2016, 6, 21))
        sample = solar_position(serial, 0.5, 23.0, 0.0, 0.0)
        assert sample.elevation_deg > 85
        assert sample.corrected_elevation_deg == sample.elevation_deg

    def test_apparent_longitude_matches_ephemeris(self):
        serial = serial_day(date(2016, 3, 20))
        sample = solar_position(serial, 0.25, HELSINKI_LAT, HELSINKI_LON, 2.0)
        eph = solar_ephemeris(julian_day(serial, 0.25, 2.0))
        assert sample.apparent_longitude_deg == eph.apparent_longitude

    def test_pole_raises(self):
        with pytest.raises(DegenerateGeometryError):
            solar_position(serial_day(date(2016, 6, 21)), 0.5, 90.0, 0.0, 0.0)


class TestDaylight:
    """Tests for sunrise, solar noon and sunset."""

    def test_helsinki_midsummer(self):
        info = daylight(date(2016, 6, 21), HELSINKI_LAT, HELSINKI_LON, 3.0)
        assert info.polar is None
        assert info.sunrise < info.solar_noon < info.sunset
        assert 0.54 < info.solar_noon < 0.565
        assert 18.5 * 60 < info.duration_minutes < 19.2 * 60
        assert info.sunset - info.sunrise == pytest.approx(info.duration_minutes / 1440)

    def test_polar_day(self):
        info = daylight(date(2016, 6, 21), 78.22, 15.65, 2.0)
        assert info.polar == "day"
        assert info.sunrise is None and info.sunset is None
        assert info.duration_minutes == 1440.0

    def test_polar_night(self):
        info = daylight(date(2016, 12, 21), 78.22, 15.65, 1.0)
        assert info.polar == "night"
        assert info.duration_minutes == 0.0

    def test_pole_raises(self):
        with pytest.raises(DegenerateGeometryError):
            daylight(date(2016, 6, 21), 90.0, 0.0, 0.0)
