"""Engine configuration for focuscoach.

This is the ambient configuration of the engine itself (where data lives,
which storage backend to use, logging level). User-facing timer settings
are a separate record, ``ProductivitySettings``, persisted through the
blob store like any other record.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, Field, ValidationError, field_validator

from focuscoach.exceptions import ConfigError

StorageBackend = Literal["sqlite", "json", "memory"]


def _default_data_dir() -> str:
    return str(Path(user_data_dir("focuscoach")))


class EngineConfig(BaseModel):
    """Engine configuration."""

    storage_backend: StorageBackend = Field(default="sqlite")
    data_dir: str = Field(default_factory=_default_data_dir)
    auto_start_delay: float = Field(default=2.0)
    log_level: str = Field(default="INFO")

    @field_validator("auto_start_delay")
    @classmethod
    def validate_auto_start_delay(cls, v: float) -> float:
        """Auto-start grace delay cannot be negative."""
        if v < 0:
            raise ValueError("auto_start_delay must be >= 0")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Normalise and check the log level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir)


class ConfigService:
    """Loads and saves the engine configuration file.

    The file lives at ``<user_config_dir>/config.json``. A default config is
    written on first use.
    """

    def __init__(self, config_dir: Path | None = None):
        self.config_dir = config_dir or Path(user_config_dir("focuscoach"))
        self.config_path = self.config_dir / "config.json"
        self._config: EngineConfig | None = None

    @property
    def config(self) -> EngineConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    def load_config(self) -> EngineConfig:
        """Load configuration from disk, creating the default on first run."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = EngineConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = EngineConfig()
            self.save_config()
        except (OSError, ValidationError) as e:
            raise ConfigError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Write the current configuration to disk."""
        if self._config is None:
            raise ConfigError("No configuration to save")

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise ConfigError(f"Failed to save config: {e}") from e

    def update(self, **changes) -> EngineConfig:
        """Apply field changes, validate them and persist the result."""
        current = self.config.model_dump()
        current.update(changes)
        try:
            self._config = EngineConfig.model_validate(current)
        except ValidationError as e:
            raise ConfigError(f"Invalid config value: {e}") from e
        self.save_config()
        return self._config

    def reset_config(self) -> EngineConfig:
        """Reset configuration to defaults."""
        self._config = EngineConfig()
        self.save_config()
        return self._config
