"""Location lookup.

A location name is resolved by trying a list of providers in order: the
plain-text location dataset first, then the built-in table.

Dataset format, one record per line::

    name latitude longitude timezone [dst]

Fields are whitespace-separated, longitude is positive east, ``dst`` is
``EU`` for the EU rule and anything else (or nothing) for no DST. Blank
lines are skipped and a line containing ``*`` ends the table.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterator, Optional, Sequence

from solardial.logger import get_logger
from solardial.models import DstRule, Location

logger = get_logger(__name__)

END_MARKER = "*"


class ConfigurationError(Exception):
    """Raised when a location cannot be resolved or is invalid."""

    def __init__(self, message: str, known: Optional[Sequence[str]] = None):
        super().__init__(message)
        self.known = list(known or [])


def parse_location_line(line: str) -> Location:
    """Parse one dataset record.

    Raises:
        ValueError: If the record is malformed or out of range.
    """
    fields = line.split()
    if len(fields) < 4:
        raise ValueError(f"expected at least 4 fields, got {len(fields)}")
    name, lat, lon, tz = fields[:4]
    tag = fields[4] if len(fields) > 4 else None
    return Location(
        name=name,
        latitude=float(lat),
        longitude=float(lon),
        timezone=float(tz),
        dst_rule=DstRule.from_tag(tag),
    )


class LocationProvider(ABC):
    """A source of named locations."""

    @abstractmethod
    def resolve(self, name: str) -> Optional[Location]:
        """Return the location for a name (case-insensitive), or None."""

    @abstractmethod
    def names(self) -> list:
        """Names this provider knows, in source order."""


class DatasetLocationProvider(LocationProvider):
    """Linear scan of a plain-text location dataset.

    A missing file is not an error: the provider simply resolves nothing.
    """

    def __init__(self, path: Path):
        self.path = Path(path)

    @property
    def available(self) -> bool:
        return self.path.is_file()

    def _records(self) -> Iterator[tuple]:
        """Yield (line number, stripped line) up to the end marker."""
        if not self.available:
            logger.debug(f"Location dataset {self.path} not found")
            return
        with open(self.path, "r", encoding="utf-8") as f:
            for number, line in enumerate(f, start=1):
                if END_MARKER in line:
                    break
                line = line.strip()
                if not line:
                    continue
                yield number, line

    def resolve(self, name: str) -> Optional[Location]:
        key = name.casefold()
        for number, line in self._records():
            if line.split()[0].casefold() != key:
                continue
            try:
                return parse_location_line(line)
            except ValueError as e:
                logger.warning(f"{self.path}:{number}: skipping malformed record: {e}")
        return None

    def names(self) -> list:
        return [line.split()[0] for _, line in self._records()]


# name, aliases, latitude, longitude, timezone, dst rule
BUILTIN_LOCATIONS = [
    ("Helsinki", (), 60.16, 24.83, 2.0, DstRule.EU),
    ("Riihimäki", (), 60.739, 24.772, 2.0, DstRule.EU),
    ("Tampere", (), 61.498, 23.761, 2.0, DstRule.EU),
    ("Ylöjärvi", (), 61.55, 23.583, 2.0, DstRule.EU),
    ("Rovaniemi", (), 66.5, 25.733, 2.0, DstRule.EU),
    ("Inari", (), 68.905, 27.03, 2.0, DstRule.EU),
    ("Utsjoki", (), 69.9, 27.017, 2.0, DstRule.EU),
    ("Stockholm", ("Tukholma",), 59.329, 18.069, 1.0, DstRule.EU),
    ("Vargön", (), 58.35, 12.4, 1.0, DstRule.EU),
    ("Reykjavik", (), 64.135, -21.895, 0.0, DstRule.NONE),
    ("Longyearbyen", (), 78.22, 15.65, 1.0, DstRule.EU),
    ("Tallinn", ("Tallinna",), 59.437, 24.745, 2.0, DstRule.EU),
    ("Moscow", ("Moskova",), 55.75, 37.617, 3.0, DstRule.NONE),
    ("London", ("Lontoo",), 51.5, -0.126, 0.0, DstRule.EU),
    ("Hamburg", ("Hampuri",), 53.553, 9.992, 1.0, DstRule.EU),
    ("Roma", ("Rooma", "Rome"), 41.895, 12.482, 1.0, DstRule.EU),
    ("Tokyo", ("Tokio",), 35.683, 139.767, 9.0, DstRule.NONE),
    ("Tehran", ("Teheran",), 35.696, 51.423, 3.5, DstRule.NONE),
]


class BuiltinLocationProvider(LocationProvider):
    """Hard-coded fallback locations, with aliases."""

    def __init__(self, entries=BUILTIN_LOCATIONS):
        self._by_key = {}
        self._names = []
        for name, aliases, lat, lon, tz, rule in entries:
            location = Location(name, lat, lon, tz, rule)
            for alias in (name, *aliases):
                self._by_key[alias.casefold()] = location
                self._names.append(alias)

    def resolve(self, name: str) -> Optional[Location]:
        return self._by_key.get(name.casefold())

    def names(self) -> list:
        return list(self._names)


class LocationResolver:
    """Resolve location names through a prioritized list of providers."""

    def __init__(self, providers: Sequence[LocationProvider]):
        self.providers = list(providers)

    @classmethod
    def default(cls, dataset: Optional[Path] = None) -> "LocationResolver":
        """Dataset file (if given) first, then the built-in table."""
        providers: list = []
        if dataset is not None:
            providers.append(DatasetLocationProvider(dataset))
        providers.append(BuiltinLocationProvider())
        return cls(providers)

    def resolve(self, name: str) -> Location:
        """Resolve a name.

        Raises:
            ConfigurationError: If no provider knows the name.
        """
        for provider in self.providers:
            location = provider.resolve(name)
            if location is not None:
                logger.debug(f"Resolved '{name}' via {type(provider).__name__}")
                return location
        raise ConfigurationError(f"'{name}' is an unknown location", self.known_names())

    def known_names(self) -> list:
        """All provider names in priority order, without case-insensitive duplicates."""
        seen = set()
        names = []
        for provider in self.providers:
            for name in provider.names():
                if name.casefold() not in seen:
                    seen.add(name.casefold())
                    names.append(name)
        return names

    @staticmethod
    def from_coordinates(
        latitude: float, longitude: float, timezone: float
    ) -> Location:
        """Location from explicit coordinates. The timezone must include DST.

        Raises:
            ConfigurationError: If the coordinates are out of range.
        """
        try:
            return Location(
                name=f"{latitude:g},{longitude:g}",
                latitude=latitude,
                longitude=longitude,
                timezone=timezone,
            )
        except ValueError as e:
            raise ConfigurationError(str(e)) from e
