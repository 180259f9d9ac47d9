"""
Configuration management for the Sakata pattern engine.
"""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

from .patterns.pattern_config import PatternDetectionConfig, MeasurementConfig


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO")
    file_path: Optional[str] = Field(default=None)
    max_size: str = Field(default="10MB")
    backup_count: int = Field(default=5, ge=0)

    @field_validator('level')
    @classmethod
    def validate_level(cls, v: str) -> str:
        level = v.upper().strip()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level: {v}")
        return level


class EngineConfig(BaseModel):
    """Pattern engine configuration."""

    pattern_config_path: Optional[str] = Field(default=None)
    body_avg_period: Optional[int] = Field(default=None, ge=1)
    default_timeframe: str = Field(default="1h")


class Config(BaseModel):
    """Main configuration class."""

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    engine: EngineConfig = Field(default_factory=EngineConfig)

    @classmethod
    def load_from_env(cls, env_file: Optional[str] = None) -> "Config":
        """Load configuration from environment variables."""
        if env_file:
            load_dotenv(env_file)
        else:
            # Try to load from .env file in current directory
            env_path = Path(".env")
            if env_path.exists():
                load_dotenv(env_path)

        logging = LoggingConfig(
            level=os.getenv("LOG_LEVEL", "INFO"),
            file_path=os.getenv("LOG_FILE_PATH") or None,
            max_size=os.getenv("LOG_MAX_SIZE", "10MB"),
            backup_count=int(os.getenv("LOG_BACKUP_COUNT", "5"))
        )

        period = os.getenv("BODY_AVG_PERIOD")
        engine = EngineConfig(
            pattern_config_path=os.getenv("PATTERN_CONFIG_PATH") or None,
            body_avg_period=int(period) if period else None,
            default_timeframe=os.getenv("DEFAULT_TIMEFRAME", "1h")
        )

        return cls(logging=logging, engine=engine)

    def build_pattern_config(self) -> PatternDetectionConfig:
        """
        Build the detector configuration for this environment.

        Loads the JSON file named by ``engine.pattern_config_path`` when set,
        then applies the ``body_avg_period`` override.
        """
        if self.engine.pattern_config_path:
            pattern_config = PatternDetectionConfig.load_from_file(Path(self.engine.pattern_config_path))
        else:
            pattern_config = PatternDetectionConfig()

        if self.engine.body_avg_period is not None:
            measurement = pattern_config.measurement
            pattern_config.measurement = MeasurementConfig(
                body_avg_period=self.engine.body_avg_period,
                doji_body_percent=measurement.doji_body_percent,
                shadow_body_percent=measurement.shadow_body_percent
            )

        return pattern_config
