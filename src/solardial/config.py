"""Configuration management module for Solar Dial."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
import yaml


@dataclass
class LocationConfig:
    """Location configuration settings."""

    name: str = "Helsinki"
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    timezone: Optional[float] = None  # hours, DST included
    home_timezone: Optional[float] = None  # host clock zone, hours
    dataset: Path = field(default_factory=lambda: Path("config/locations.cnf"))

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if isinstance(self.dataset, str):
            self.dataset = Path(self.dataset)
        if self.latitude is not None and not -90 <= self.latitude <= 90:
            raise ValueError("latitude must be between -90 and 90")
        if self.longitude is not None and not -180 <= self.longitude <= 180:
            raise ValueError("longitude must be between -180 and 180")
        for name in ("timezone", "home_timezone"):
            value = getattr(self, name)
            if value is not None and not -14 <= value <= 14:
                raise ValueError(f"{name} must be between -14 and 14 hours")

    @property
    def has_coordinates(self) -> bool:
        """True when explicit coordinates replace the location name."""
        return None not in (self.latitude, self.longitude, self.timezone)


@dataclass
class RefreshConfig:
    """Refresh timer settings."""

    interval_seconds: float = 5.0

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")


@dataclass
class LoggingConfig:
    """Logging configuration settings."""

    level: str = "INFO"
    file: Optional[Path] = None
    max_size_mb: int = 10
    backup_count: int = 5

    def __post_init__(self) -> None:
        """Validate and convert configuration values."""
        if isinstance(self.file, str):
            self.file = Path(self.file)
        valid_levels = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
        if self.level.upper() not in valid_levels:
            raise ValueError(f"level must be one of {valid_levels}")
        self.level = self.level.upper()


@dataclass
class Config:
    """Main configuration container."""

    location: LocationConfig = field(default_factory=LocationConfig)
    refresh: RefreshConfig = field(default_factory=RefreshConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "Config":
        """Create Config from dictionary."""
        location_data = data.get("location", {})
        refresh_data = data.get("refresh", {})
        logging_data = data.get("logging", {})

        return cls(
            location=LocationConfig(**location_data),
            refresh=RefreshConfig(**refresh_data),
            logging=LoggingConfig(**logging_data),
        )

    def to_dict(self) -> dict:
        """Convert Config to dictionary."""
        return {
            "location": {
                "name": self.location.name,
                "latitude": self.location.latitude,
                "longitude": self.location.longitude,
                "timezone": self.location.timezone,
                "home_timezone": self.location.home_timezone,
                "dataset": str(self.location.dataset),
            },
            "refresh": {
                "interval_seconds": self.refresh.interval_seconds,
            },
            "logging": {
                "level": self.logging.level,
                "file": str(self.logging.file) if self.logging.file else None,
                "max_size_mb": self.logging.max_size_mb,
                "backup_count": self.logging.backup_count,
            },
        }


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from YAML file.

    Args:
        config_path: Path to configuration file. If None, uses default path.

    Returns:
        Config object with loaded or default values.
    """
    if config_path is None:
        default_paths = [
            Path("config/config.yaml"),
            Path("/etc/solardial/config.yaml"),
            Path.home() / ".config" / "solardial" / "config.yaml",
        ]
        for path in default_paths:
            if path.exists():
                config_path = path
                break

    if config_path is None or not config_path.exists():
        return Config()

    with open(config_path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f)

    if data is None:
        return Config()

    return Config.from_dict(data)


def save_config(config: Config, config_path: Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Config object to save.
        config_path: Path to save configuration file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, allow_unicode=True)
