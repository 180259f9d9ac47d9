"""
Pattern Configuration Manager

This module provides utilities for managing pattern detection configuration
files: loading a user file, creating one from defaults, backups, restores and
validation.
"""

import logging
import shutil
from pathlib import Path
from typing import Optional, Dict, Any, Union

from ..exceptions import PatternConfigError
from ..models.signals import PatternType
from .pattern_config import PatternDetectionConfig

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = "pattern_config.json"


class PatternConfigManager:
    """Manager for pattern detection configuration files."""

    def __init__(self, user_config_path: Optional[Union[str, Path]] = None):
        if user_config_path is None:
            user_config_path = Path.cwd() / DEFAULT_CONFIG_FILENAME
        self.user_config_path = Path(user_config_path)

    def load_default_config(self) -> PatternDetectionConfig:
        """Load the built-in default configuration."""
        return PatternDetectionConfig()

    def load_user_config(self) -> Optional[PatternDetectionConfig]:
        """Load user configuration if it exists."""
        if self.user_config_path.exists():
            return PatternDetectionConfig.load_from_file(self.user_config_path)
        return None

    def save_user_config(self, config: PatternDetectionConfig):
        """Save configuration to user config file."""
        self.user_config_path.parent.mkdir(parents=True, exist_ok=True)
        config.save_to_file(self.user_config_path)

    def create_user_config_from_default(self) -> PatternDetectionConfig:
        """Create a user config file from the default configuration."""
        default_config = self.load_default_config()
        self.save_user_config(default_config)
        logger.info(f"Created user configuration file: {self.user_config_path}")
        return default_config

    def initialize_config(self) -> PatternDetectionConfig:
        """
        Load the user config if available, otherwise the defaults.

        A user file that fails validation raises PatternConfigError rather
        than silently falling back.
        """
        config = self.load_user_config()

        if config is None:
            config = self.load_default_config()
            logger.info("Using default pattern configuration")
        else:
            logger.info(f"Loaded user pattern configuration from: {self.user_config_path}")

        return config

    def backup_user_config(self) -> Optional[Path]:
        """Create a backup of the current user config."""
        if not self.user_config_path.exists():
            return None

        backup_path = self.user_config_path.with_suffix('.json.backup')

        # Find next available backup name
        counter = 1
        while backup_path.exists():
            backup_path = self.user_config_path.with_suffix(f'.json.backup.{counter}')
            counter += 1

        shutil.copy2(self.user_config_path, backup_path)
        logger.info(f"Backed up configuration to: {backup_path}")
        return backup_path

    def restore_config_from_backup(self, backup_path: Path) -> PatternDetectionConfig:
        """Restore configuration from a backup file."""
        backup_path = Path(backup_path)
        if not backup_path.exists():
            raise FileNotFoundError(f"Backup file not found: {backup_path}")

        # Refuse to restore a broken file over a working one
        PatternDetectionConfig.load_from_file(backup_path)

        shutil.copy2(backup_path, self.user_config_path)
        logger.info(f"Restored configuration from: {backup_path}")
        return self.initialize_config()

    def reset_to_default(self) -> PatternDetectionConfig:
        """Reset user configuration to default values, keeping a backup."""
        if self.user_config_path.exists():
            self.backup_user_config()

        config = self.create_user_config_from_default()
        logger.info("Configuration reset to default values")
        return config

    def get_config_info(self) -> Dict[str, Any]:
        """Get information about the managed configuration."""
        return {
            "user_config_path": str(self.user_config_path),
            "user_config_exists": self.user_config_path.exists(),
            "sections": list(PatternDetectionConfig().to_dict().keys()),
            "available_patterns": [p.value for p in PatternType],
        }

    def validate_config(self, config_path: Optional[Path] = None) -> bool:
        """Validate a configuration file."""
        if config_path is None:
            config_path = self.user_config_path
        config_path = Path(config_path)

        if not config_path.exists():
            logger.warning(f"Config file does not exist: {config_path}")
            return False

        try:
            PatternDetectionConfig.load_from_file(config_path)
        except PatternConfigError as e:
            logger.warning(f"Configuration validation failed: {e}")
            return False

        logger.info(f"Configuration file is valid: {config_path}")
        return True
