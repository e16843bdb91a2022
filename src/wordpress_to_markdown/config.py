"""Settings and configuration loading for the converter."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

import yaml

DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class LoggingSettings:
    """Logging configuration."""

    level: str = "INFO"
    file: str | None = None
    format: str = DEFAULT_LOG_FORMAT


@dataclass
class DownloadSettings:
    """Image download configuration."""

    max_concurrent: int = 8
    timeout: float = 30.0
    chunk_size: int = 65536


@dataclass
class OutputSettings:
    """Output layout and formatting configuration."""

    duplicate_slugs: Literal["suffix", "error"] = "suffix"
    escape_quotes: bool = True


@dataclass
class Settings:
    """Main settings container for the converter."""

    input_file: Path = field(default_factory=lambda: Path("export.xml"))
    output_dir: Path = field(default_factory=lambda: Path("output"))
    logging: LoggingSettings = field(default_factory=LoggingSettings)
    download: DownloadSettings = field(default_factory=DownloadSettings)
    output: OutputSettings = field(default_factory=OutputSettings)

    @classmethod
    def load(cls, path: str | Path) -> "Settings":
        """Load settings from a YAML file.

        Args:
            path: Path to the settings YAML file.

        Returns:
            Settings instance populated from the file.

        Raises:
            FileNotFoundError: If the settings file doesn't exist.
            yaml.YAMLError: If the file contains invalid YAML.
            ValueError: If a setting has an unsupported value.
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Settings file not found: {path}")

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls._from_dict(data)

    @classmethod
    def _from_dict(cls, data: dict) -> "Settings":
        """Create Settings from a dictionary."""
        logging_data = data.get("logging", {})
        logging_settings = LoggingSettings(
            level=logging_data.get("level", "INFO"),
            file=logging_data.get("file"),
            format=logging_data.get("format", DEFAULT_LOG_FORMAT),
        )

        download_data = data.get("download", {})
        download_settings = DownloadSettings(
            max_concurrent=int(download_data.get("max_concurrent", 8)),
            timeout=float(download_data.get("timeout", 30.0)),
            chunk_size=int(download_data.get("chunk_size", 65536)),
        )
        if download_settings.max_concurrent < 1:
            raise ValueError("download.max_concurrent must be at least 1")

        output_data = data.get("output", {})
        output_settings = OutputSettings(
            duplicate_slugs=output_data.get("duplicate_slugs", "suffix"),
            escape_quotes=output_data.get("escape_quotes", True),
        )
        if output_settings.duplicate_slugs not in ("suffix", "error"):
            raise ValueError(
                f"Unsupported output.duplicate_slugs: {output_settings.duplicate_slugs!r}"
            )

        return cls(
            input_file=Path(data.get("input_file", "export.xml")),
            output_dir=Path(data.get("output_dir", "output")),
            logging=logging_settings,
            download=download_settings,
            output=output_settings,
        )

    @classmethod
    def default(cls) -> "Settings":
        """Create Settings with default values."""
        return cls()
