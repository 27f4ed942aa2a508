"""
Configuration errors. All of them are fatal at startup.
"""

from typing import List


class ConfigError(Exception):
    """Base exception for configuration failures."""

    pass


class ConfigNotFoundError(ConfigError):
    """No configuration file at the resolved path."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Configuration file not found: {path}")


class InvalidConfigError(ConfigError):
    """The configuration file is not valid JSON or fails validation."""

    def __init__(self, path: str, problems: List[str]):
        self.path = path
        self.problems = list(problems)
        detail = "; ".join(self.problems)
        super().__init__(f"Invalid configuration in {path}: {detail}")
