"""Configuration for retrocalc.

Settings live in <project>/.retrocalc/config.json. Every field is optional;
a missing or unreadable file gives the defaults.
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = ".retrocalc"
CONFIG_FILE = "config.json"


@dataclass
class CalcConfig:
    """Calculator configuration options."""

    project_path: str = "."
    storage_file: str = f"{CONFIG_DIR}/storage.json"
    storage_key: str = "calculationHistory"
    history_limit: int = 10
    max_stored: int = 0  # 0 = unlimited
    animation_interval: float = 1.5  # seconds per animation step
    cursor_blink_interval: float = 0.5

    @property
    def storage_path(self) -> Path:
        """Resolve the storage file against the project path."""
        path = Path(self.storage_file).expanduser()
        if path.is_absolute():
            return path
        return Path(self.project_path).resolve() / path


def load_config(project_path: str = ".") -> CalcConfig:
    """Load configuration from the project config file.

    Args:
        project_path: Path to project root.

    Returns:
        CalcConfig with settings from config.json or defaults.
    """
    config_file = Path(project_path) / CONFIG_DIR / CONFIG_FILE
    defaults = CalcConfig(project_path=str(project_path))

    if not config_file.exists():
        return defaults

    try:
        with open(config_file) as f:
            data = json.load(f)
        return CalcConfig(
            project_path=str(project_path),
            storage_file=data.get("storage_file", defaults.storage_file),
            storage_key=data.get("storage_key", defaults.storage_key),
            history_limit=int(data.get("history_limit", defaults.history_limit)),
            max_stored=int(data.get("max_stored", defaults.max_stored)),
            animation_interval=float(
                data.get("animation_interval", defaults.animation_interval)
            ),
            cursor_blink_interval=float(
                data.get("cursor_blink_interval", defaults.cursor_blink_interval)
            ),
        )
    except (json.JSONDecodeError, IOError, AttributeError, TypeError, ValueError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_file, e)
        return defaults
