"""Centralized configuration using Pydantic Settings.

Configuration can be overridden via environment variables:
- AIRNET_DATA_DATA_DIR=/path/to/dataset
- AIRNET_DATA_FLIGHTS_FILE=flights_2023.csv
- AIRNET_LOG_LEVEL=DEBUG
- etc.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class DataConfig(BaseSettings):
    """Dataset location.

    Environment variables prefixed with AIRNET_DATA_.
    """

    model_config = SettingsConfigDict(env_prefix="AIRNET_DATA_")

    data_dir: Path = Field(
        default_factory=lambda: Path(__file__).resolve().parent.parent / "data"
    )
    airports_file: str = "airports.csv"
    airlines_file: str = "airlines.csv"
    flights_file: str = "flights.csv"

    @property
    def airports_path(self) -> Path:
        """Full path to airports CSV file."""
        return self.data_dir / self.airports_file

    @property
    def airlines_path(self) -> Path:
        """Full path to airlines CSV file."""
        return self.data_dir / self.airlines_file

    @property
    def flights_path(self) -> Path:
        """Full path to flights CSV file."""
        return self.data_dir / self.flights_file


class ReportConfig(BaseSettings):
    """Report and map output.

    Environment variables prefixed with AIRNET_REPORT_.
    """

    model_config = SettingsConfigDict(env_prefix="AIRNET_REPORT_")

    output_dir: Path = Field(default_factory=Path.cwd)
    report_file: str = "airports_report.txt"
    map_file: str = "trip_map.html"
    map_zoom_start: int = 4

    @property
    def report_path(self) -> Path:
        return self.output_dir / self.report_file

    @property
    def map_path(self) -> Path:
        return self.output_dir / self.map_file


class ObservabilityConfig(BaseSettings):
    """Logging configuration.

    Environment variables prefixed with AIRNET_LOG_.
    """

    model_config = SettingsConfigDict(env_prefix="AIRNET_LOG_")

    level: str = "INFO"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseSettings):
    """Main application configuration aggregating all sub-configs.

        config = get_config()
        print(config.data.flights_path)

    Environment variables prefixed with AIRNET_.
    """

    model_config = SettingsConfigDict(env_prefix="AIRNET_")

    data: DataConfig = Field(default_factory=DataConfig)
    report: ReportConfig = Field(default_factory=ReportConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)

    @property
    def project_root(self) -> Path:
        """Return the project root directory."""
        return Path(__file__).resolve().parent.parent


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    """Get the singleton application configuration.

    Configuration is loaded once and cached. To reload configuration
    (e.g., in tests), use reset_config() first.
    """
    return AppConfig()


def reset_config() -> None:
    """Reset the configuration cache."""
    get_config.cache_clear()
