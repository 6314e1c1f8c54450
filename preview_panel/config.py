"""
Configuration module for loading and validating environment variables.
"""

import os
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv

from preview_panel.errors import ConfigError


DEFAULT_URL = "https://codesandbox.io/"
DEFAULT_LOG_CAPACITY = 1000
DEFAULT_NAV_ACK_TIMEOUT = 5.0

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


class Config:
    """Panel configuration loaded from environment variables."""

    def __init__(self):
        # Load .env file from project root
        env_path = Path(__file__).parent.parent / ".env"
        load_dotenv(dotenv_path=env_path)

        self.default_url = os.getenv("PREVIEW_DEFAULT_URL", DEFAULT_URL)
        self.log_level = os.getenv("PREVIEW_LOG_LEVEL", "WARNING").upper()

        self._raw_capacity = os.getenv("PREVIEW_LOG_CAPACITY", str(DEFAULT_LOG_CAPACITY))
        self._raw_timeout = os.getenv("PREVIEW_NAV_ACK_TIMEOUT", str(DEFAULT_NAV_ACK_TIMEOUT))
        self._raw_show_console = os.getenv("PREVIEW_SHOW_CONSOLE", "true")
        self._raw_confirm_same_url = os.getenv("PREVIEW_NAV_CONFIRM_SAME_URL", "false")

        # Validate and convert settings
        self._validate()

    def _validate(self):
        """Validate settings and convert them to their typed form."""
        problems = []

        if not self.default_url:
            problems.append("PREVIEW_DEFAULT_URL must not be empty")

        if self.log_level not in LOG_LEVELS:
            problems.append(f"PREVIEW_LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        try:
            capacity = int(self._raw_capacity)
            if capacity < 0:
                raise ValueError(capacity)
            # 0 keeps every entry
            self.log_capacity: Optional[int] = capacity or None
        except ValueError:
            problems.append("PREVIEW_LOG_CAPACITY must be a non-negative integer")

        try:
            timeout = float(self._raw_timeout)
            if timeout < 0:
                raise ValueError(timeout)
            self.nav_ack_timeout: Optional[float] = timeout or None
        except ValueError:
            problems.append("PREVIEW_NAV_ACK_TIMEOUT must be a non-negative number of seconds")

        flag = self._raw_show_console.strip().lower()
        if flag in _TRUE_VALUES:
            self.show_console = True
        elif flag in _FALSE_VALUES:
            self.show_console = False
        else:
            problems.append("PREVIEW_SHOW_CONSOLE must be true or false")

        flag = self._raw_confirm_same_url.strip().lower()
        if flag in _TRUE_VALUES:
            self.nav_confirm_same_url = True
        elif flag in _FALSE_VALUES:
            self.nav_confirm_same_url = False
        else:
            problems.append("PREVIEW_NAV_CONFIRM_SAME_URL must be true or false")

        if problems:
            raise ConfigError(
                "Invalid preview panel configuration:\n- " + "\n- ".join(problems) + "\n"
                "Please fix the .env file or the environment. See .env.example for reference."
            )


# Global config instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config
