from typing import List, Optional
from pathlib import Path
import yaml
from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from .exceptions import ConfigurationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class AppConfig(BaseSettings):
    """
    Runtime settings. Values come from (highest priority first) explicit
    keyword arguments, KVPROBE_* environment variables, then defaults.
    A YAML file is loaded through from_yaml().
    """
    model_config = SettingsConfigDict(env_prefix="KVPROBE_")

    targets: List[str] = []
    interval_ms: int = Field(default=1000, gt=0)
    output_dir: Path = Path("Results")
    log_level: str = "INFO"
    max_ticks: Optional[int] = Field(default=None, gt=0)

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @classmethod
    def from_yaml(cls, config_path: Path) -> "AppConfig":
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        try:
            with open(config_path, "r") as f:
                raw_config = yaml.safe_load(f) or {}
            if not isinstance(raw_config, dict):
                raise ConfigurationError(f"Invalid configuration format: expected a mapping in {config_path}")
            return cls(**raw_config)
        except (ValidationError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration format: {e}")

    def with_overrides(self, **overrides) -> "AppConfig":
        """
        Returns a copy with CLI values applied. None means "not given".
        """
        values = self.model_dump()
        for key, value in overrides.items():
            if value is None:
                continue
            if key == "targets" and not value:
                continue
            values[key] = value
        try:
            return AppConfig(**values)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid option: {e}")
