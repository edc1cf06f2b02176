"""
Site configuration.

Optional JSON file controlling how the static site is built and how the
CLI logs. Every key is optional; missing or unreadable files fall back
to defaults.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = Path("pglearn.json")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


def normalize_base_path(value: str) -> str:
    """Return `value` with exactly one leading and trailing slash."""
    stripped = value.strip().strip("/")
    return f"/{stripped}/" if stripped else "/"


@dataclass
class SiteConfig:
    """Static site build settings."""

    site_title: str = ""  # Empty = curriculum site_title
    base_path: str = "/"
    theme: str = "monokai"  # Pygments style name used for code samples
    output_dir: str = "site"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        self.base_path = normalize_base_path(self.base_path)
        self.log_level = self.log_level.upper()
        if self.log_level not in LOG_LEVELS:
            logger.warning(f"Unknown log level {self.log_level!r}, using WARNING")
            self.log_level = "WARNING"

    @classmethod
    def load(cls, path: Path | None = None) -> SiteConfig:
        """Load configuration from file"""
        config_path = path or DEFAULT_CONFIG_FILE

        if not config_path.exists():
            logger.info(f"No site config at {config_path}, using defaults")
            return cls()

        try:
            data = json.loads(config_path.read_text(encoding="utf-8"))
            if not isinstance(data, dict):
                raise ValueError("config root must be a JSON object")
            known = {field.name for field in fields(cls)}
            ignored = sorted(set(data) - known)
            if ignored:
                logger.warning(f"Ignoring unknown config keys: {', '.join(ignored)}")
            values = {key: str(value) for key, value in data.items() if key in known and value is not None}
            config = cls(**values)
            logger.info(f"Loaded site config from {config_path}")
            return config

        except (OSError, ValueError) as e:
            logger.error(f"Failed to load site config: {e}")
            return cls()

