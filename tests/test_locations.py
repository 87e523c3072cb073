"""Tests for location lookup."""

import pytest

from solardial.locations import (
    BuiltinLocationProvider,
    ConfigurationError,
    DatasetLocationProvider,
    LocationResolver,
    parse_location_line,
)
from solardial.models import DstRule

DATASET = """\
Helsinki   60.0   25.0   2   EU

Espoo      60.205 24.652 2   EU
espoo      10.0   10.0   0
Mumbai     19.076 72.878 5.5
Lisbon     38.722 -9.139 0   us
Broken     north  24.0   2   EU
*
Atlantis   0.0    0.0    0   EU
"""


@pytest.fixture
def dataset_path(tmp_path):
    """Write a location dataset."""
    path = tmp_path / "locations.cnf"
    path.write_text(DATASET, encoding="utf-8")
    return path


@pytest.fixture
def resolver(dataset_path):
    return LocationResolver.default(dataset_path)


class TestParseLocationLine:
    """Tests for parse_location_line."""

    def test_full_record(self):
        loc = parse_location_line("Roma 41.895 12.482 1 EU")
        assert loc.name == "Roma"
        assert (loc.latitude, loc.longitude, loc.timezone) == (41.895, 12.482, 1.0)
        assert loc.dst_rule is DstRule.EU

    def test_missing_or_other_tag_means_no_dst(self):
        assert parse_location_line("Tokyo 35.683 139.767 9").dst_rule is DstRule.NONE
        assert parse_location_line("X 1 2 3 US").dst_rule is DstRule.NONE

    def test_lowercase_tag(self):
        assert parse_location_line("X 1 2 3 eu").dst_rule is DstRule.EU

    @pytest.mark.parametrize("line", ["Roma 41.9 12.5", "Roma a b c", "Roma 95 0 0"])
    def test_malformed(self, line):
        with pytest.raises(ValueError):
            parse_location_line(line)


class TestBuiltinLocationProvider:
    """Tests for the built-in table."""

    def test_case_insensitive(self):
        provider = BuiltinLocationProvider()
        results = {provider.resolve(n) for n in ("LONDON", "london", "London")}
        assert len(results) == 1
        london = results.pop()
        assert (london.latitude, london.longitude, london.timezone) == (51.5, -0.126, 0.0)
        assert london.dst_rule is DstRule.EU

    def test_aliases(self):
        provider = BuiltinLocationProvider()
        assert provider.resolve("Tukholma") == provider.resolve("stockholm")
        assert provider.resolve("RIIHIMÄKI").name == "Riihimäki"

    def test_fractional_timezone_without_dst(self):
        tehran = BuiltinLocationProvider().resolve("teheran")
        assert tehran.timezone == 3.5
        assert tehran.dst_rule is DstRule.NONE

    def test_unknown(self):
        assert BuiltinLocationProvider().resolve("Atlantis") is None


class TestDatasetLocationProvider:
    """Tests for the dataset provider."""

    def test_first_match_wins(self, dataset_path):
        espoo = DatasetLocationProvider(dataset_path).resolve("ESPOO")
        assert espoo.latitude == 60.205

    def test_end_marker_stops_scan(self, dataset_path):
        assert DatasetLocationProvider(dataset_path).resolve("Atlantis") is None

    def test_dst_tags(self, dataset_path):
        provider = DatasetLocationProvider(dataset_path)
        assert provider.resolve("Mumbai").timezone == 5.5
        assert provider.resolve("Mumbai").dst_rule is DstRule.NONE
        assert provider.resolve("Lisbon").dst_rule is DstRule.NONE

    def test_malformed_record_skipped(self, dataset_path, caplog):
        assert DatasetLocationProvider(dataset_path).resolve("Broken") is None
        assert "malformed" in caplog.text

    def test_missing_file(self, tmp_path):
        provider = DatasetLocationProvider(tmp_path / "missing.cnf")
        assert not provider.available
        assert provider.resolve("Helsinki") is None
        assert provider.names() == []

    def test_names(self, dataset_path):
        names = DatasetLocationProvider(dataset_path).names()
        assert names == ["Helsinki", "Espoo", "espoo", "Mumbai", "Lisbon", "Broken"]


class TestLocationResolver:
    """Tests for LocationResolver."""

    def test_dataset_before_builtin(self, resolver):
        assert resolver.resolve("helsinki").latitude == 60.0

    def test_falls_back_to_builtin(self, resolver):
        assert resolver.resolve("Tokyo").timezone == 9.0

    def test_missing_dataset_falls_back(self, tmp_path):
        resolver = LocationResolver.default(tmp_path / "missing.cnf")
        assert resolver.resolve("Helsinki").latitude == 60.16

    def test_unknown_location(self, resolver):
        with pytest.raises(ConfigurationError, match="Atlantis") as excinfo:
            resolver.resolve("Atlantis")
        assert "Mumbai" in excinfo.value.known
        assert "Tokyo" in excinfo.value.known

    def test_known_names(self, resolver):
        names = resolver.known_names()
        assert names[:5] == ["Helsinki", "Espoo", "Mumbai", "Lisbon", "Broken"]
        assert names.count("Helsinki") == 1
        assert "Tukholma" in names
        assert "Atlantis" not in names

    def test_from_coordinates(self):
        loc = LocationResolver.from_coordinates(64.135, -21.895, 0.0)
        assert loc.latitude == 64.135
        assert loc.dst_rule is DstRule.NONE

    def test_from_coordinates_out_of_range(self):
        with pytest.raises(ConfigurationError, match="latitude"):
            LocationResolver.from_coordinates(91.0, 0.0, 0.0)
