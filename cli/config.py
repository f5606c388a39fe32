"""Configuration management for the largefill CLI."""

import json
import os
import shutil
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from common.constants import DEFAULT_POLL_INTERVAL, MAX_CHUNK_SIZE
from common.logging_config import get_logger
from filler.types import FillPolicy, SizeUnit

logger = get_logger(__name__)

CONFIG_ENV_VAR = "LARGEFILL_CONFIG"


def default_config_path() -> Path:
    """
    Get the config file location.

    Returns:
        Path from the LARGEFILL_CONFIG env var, or ~/.largefill/config.json
    """
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override)
    return Path.home() / '.largefill' / 'config.json'


class FillerSettings(BaseModel):
    """Validated contents of the config file."""
    default_size: int = Field(default=1, gt=0)
    default_unit: SizeUnit = SizeUnit.GB
    default_fill: FillPolicy = FillPolicy.NULL
    chunk_size: int = Field(default=MAX_CHUNK_SIZE, gt=0, le=MAX_CHUNK_SIZE)
    poll_interval: float = Field(default=DEFAULT_POLL_INTERVAL, gt=0)
    staging_dir: Optional[str] = None

    @field_validator('default_unit', mode='before')
    @classmethod
    def _parse_unit(cls, value):
        if isinstance(value, str):
            unit = SizeUnit.parse(value)
            if unit is None:
                raise ValueError(f"unknown unit: {value}")
            return unit
        return value

    @field_validator('default_fill', mode='before')
    @classmethod
    def _parse_fill(cls, value):
        if isinstance(value, str):
            fill = FillPolicy.parse(value)
            if fill is None:
                raise ValueError(f"unknown fill: {value}")
            return fill
        return value

    def to_json_dict(self) -> dict:
        """Serialize with enums stored by name."""
        data = self.model_dump()
        data['default_unit'] = self.default_unit.name
        data['default_fill'] = self.default_fill.value
        return data


class Config:
    """Manages CLI configuration stored in JSON file."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to config JSON file (default: ~/.largefill/config.json)
        """
        self.config_path = Path(config_path) if config_path is not None else default_config_path()
        self.settings = self._load()

    def _load(self) -> FillerSettings:
        """
        Load configuration from file, creating defaults if necessary.

        Returns:
            Validated settings
        """
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Cannot create config directory {self.config_path.parent}: {e}")
            return FillerSettings()

        if not self.config_path.exists():
            settings = FillerSettings()
            self._write(settings)
            return settings

        try:
            with open(self.config_path, 'r') as f:
                data = json.load(f)
            return FillerSettings.model_validate(data)
        except (json.JSONDecodeError, ValidationError, OSError) as e:
            logger.warning(f"Invalid config file {self.config_path}, using defaults: {e}")
            backup_path = self.config_path.with_suffix('.json.bak')
            try:
                shutil.copy(self.config_path, backup_path)
            except OSError as copy_error:
                logger.warning(f"Failed to back up config file: {copy_error}")
            return FillerSettings()

    def _write(self, settings: FillerSettings) -> None:
        """Write settings to the config file, logging on failure."""
        try:
            with open(self.config_path, 'w') as f:
                json.dump(settings.to_json_dict(), f, indent=2)
        except OSError as e:
            logger.warning(f"Failed to write config file {self.config_path}: {e}")

    def get_defaults(self) -> FillerSettings:
        """
        Get the settings used to fill in missing command-line values.

        Returns:
            FillerSettings instance
        """
        return self.settings

    def get_chunk_size(self) -> int:
        """
        Get the maximum characters written per chunk.

        Returns:
            Chunk size
        """
        return self.settings.chunk_size

    def get_poll_interval(self) -> float:
        """
        Get the delay between cancellation checks.

        Returns:
            Poll interval in seconds
        """
        return self.settings.poll_interval

    def get_staging_dir(self) -> Optional[Path]:
        """
        Get the configured staging directory.

        Returns:
            Path, or None to stage next to the target file
        """
        if not self.settings.staging_dir:
            return None
        return Path(self.settings.staging_dir).expanduser()
