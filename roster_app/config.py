"""
Configuration loader for Roster Cost App.

Loads settings from roster_config.yaml and provides typed access
to all configuration sections.
"""
import logging
import os
from pathlib import Path
from typing import Any, List, Optional
from functools import lru_cache

import yaml


# Default config ships inside the package
DEFAULT_CONFIG_PATH = Path(__file__).parent / "roster_config.yaml"

CYCLE_DETECTION_MODES = ("full_graph", "reciprocal")


class ConfigurationError(Exception):
    """Raised when the config file is missing, unparsable or inconsistent."""
    pass


class RosterConfig:
    """
    Typed view over roster_config.yaml.

    Every property falls back to a built-in default when its key is absent,
    so a partial file is valid. Obtain the shared instance via get_config().
    """

    def __init__(self, config_path: Optional[Path] = None):
        self._config_path = config_path or DEFAULT_CONFIG_PATH
        self._config: dict = {}
        self._load()

    def _load(self) -> None:
        """Parse the YAML file and validate the cost sharing mode."""
        if not self._config_path.exists():
            raise ConfigurationError(f"Config file not found: {self._config_path}")

        try:
            with open(self._config_path, 'r', encoding='utf-8') as f:
                self._config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML in config file: {e}")

        if not isinstance(self._config, dict):
            raise ConfigurationError("Config file must contain a YAML mapping")

        mode = self.cycle_detection
        if mode not in CYCLE_DETECTION_MODES:
            raise ConfigurationError(
                f"Unknown cost_sharing.cycle_detection '{mode}', "
                f"expected one of {', '.join(CYCLE_DETECTION_MODES)}"
            )

    @property
    def version(self) -> str:
        return self._config.get("version", "unknown")

    # =========================================================================
    # Database
    # =========================================================================

    @property
    def database(self) -> dict:
        """Database configuration."""
        return self._config.get("database", {})

    @property
    def database_url(self) -> str:
        """SQLAlchemy URL; ROSTER_DATABASE_URL wins over the file value."""
        return os.environ.get(
            "ROSTER_DATABASE_URL",
            self.database.get("url", "sqlite:///./roster.db")
        )

    # =========================================================================
    # Logging
    # =========================================================================

    @property
    def logging_settings(self) -> dict:
        """Logging configuration."""
        return self._config.get("logging", {})

    @property
    def log_level(self) -> str:
        return str(self.logging_settings.get("level", "INFO")).upper()

    @property
    def log_format(self) -> str:
        return self.logging_settings.get(
            "format", "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )

    # =========================================================================
    # Shift Classification
    # =========================================================================

    @property
    def shift_classifier(self) -> dict:
        """Shift classifier configuration."""
        return self._config.get("shift_classifier", {})

    @property
    def fallback_work_codes(self) -> List[str]:
        """Working shift codes used when no shift types are stored."""
        return [str(c) for c in self.shift_classifier.get(
            "fallback_work_codes", ["1", "2", "3", "ดึก"]
        )]

    # =========================================================================
    # Attendance
    # =========================================================================

    @property
    def attendance(self) -> dict:
        """Attendance code aliases."""
        return self._config.get("attendance", {})

    def get_attendance_codes(self, category: str) -> List[str]:
        """
        Get shift code aliases for an attendance category.

        Args:
            category: One of 'absent', 'sick_leave', 'personal_leave', 'vacation'
        """
        defaults = {
            "absent": ["ขาด", "ข"],
            "sick_leave": ["ป่วย", "ป"],
            "personal_leave": ["กิจ", "ก"],
            "vacation": ["ลา", "พ"],
        }
        codes = self.attendance.get(f"{category}_codes", defaults.get(category, []))
        return [str(c) for c in codes]

    # =========================================================================
    # Cost Sharing
    # =========================================================================

    @property
    def cost_sharing(self) -> dict:
        """Cost sharing configuration."""
        return self._config.get("cost_sharing", {})

    @property
    def cycle_detection(self) -> str:
        """Cycle detection mode: 'full_graph' or 'reciprocal'."""
        return self.cost_sharing.get("cycle_detection", "full_graph")

    @property
    def max_percentage(self) -> int:
        return self.cost_sharing.get("max_percentage", 100)

    # =========================================================================
    # Roster Editing
    # =========================================================================

    @property
    def roster(self) -> dict:
        """Roster editing configuration."""
        return self._config.get("roster", {})

    @property
    def default_edit_cutoff_day(self) -> int:
        return int(self.roster.get("default_edit_cutoff_day", 5))

    @property
    def default_edit_cutoff_next_month(self) -> bool:
        return bool(self.roster.get("default_edit_cutoff_next_month", True))

    @property
    def default_shift_types(self) -> List[dict]:
        """Seed shift types created by init-db."""
        return self._config.get("default_shift_types", [])

    # =========================================================================
    # Raw Access
    # =========================================================================

    def get(self, key: str, default: Any = None) -> Any:
        """Top-level section by name, or default."""
        return self._config.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._config[key]

    def __contains__(self, key: str) -> bool:
        return key in self._config


@lru_cache(maxsize=1)
def get_config(config_path: Optional[str] = None) -> RosterConfig:
    """
    Get the singleton configuration instance.

    Args:
        config_path: Optional path to config file. Only used on first call.
            Falls back to ROSTER_CONFIG_PATH, then the packaged default.

    Returns:
        RosterConfig singleton instance
    """
    config_path = config_path or os.environ.get("ROSTER_CONFIG_PATH")
    path = Path(config_path) if config_path else None
    return RosterConfig(path)


def reload_config() -> RosterConfig:
    """Drop the cached instance and read the file again."""
    get_config.cache_clear()
    return get_config()


def configure_logging(config: Optional[RosterConfig] = None) -> None:
    """Configure root logging from the logging section."""
    config = config or get_config()
    logging.basicConfig(level=config.log_level, format=config.log_format)
