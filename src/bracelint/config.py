"""
Linter Configuration

Loads configuration from a YAML file and environment variables.

Precedence (later wins): built-in defaults, config file, environment,
then whatever the CLI passes explicitly.
"""

import logging
import os
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from bracelint.tools.lint import LintOptions

logger = logging.getLogger(__name__)


# Default configuration file locations (checked in order)
CONFIG_SEARCH_PATHS = [
    Path(".bracelint.yaml"),
    Path.home() / ".bracelint" / "config.yaml",
]


DEFAULT_CONFIG: Dict[str, Any] = {
    "fix": False,
    "only_checks": [],
    "disabled_checks": [],
    "file_pattern": "*.pp",
    "log_level": "WARNING",
}

TRUE_VALUES = {"1", "true", "yes", "on"}


class ConfigError(Exception):
    """A configuration file could not be read or has the wrong shape."""
    def __init__(self, path: Path, message: str):
        self.path = path
        super().__init__(f"Invalid config {path}: {message}")


class LintConfig:
    """Configuration for a lint run."""

    def __init__(self, config_path: Optional[Path] = None,
                 search_paths: Optional[List[Path]] = None):
        self._config: Dict[str, Any] = dict(DEFAULT_CONFIG)
        self._config_path: Optional[Path] = None

        self._load_config(config_path, search_paths)
        self._apply_env_overrides()

    def _load_config(self, explicit_path: Optional[Path],
                     search_paths: Optional[List[Path]]) -> None:
        """Load configuration from YAML file."""
        if explicit_path is not None:
            self._config.update(self._read(explicit_path))
            self._config_path = explicit_path
            return

        for config_path in search_paths if search_paths is not None else CONFIG_SEARCH_PATHS:
            if config_path.exists():
                try:
                    self._config.update(self._read(config_path))
                except ConfigError as e:
                    logger.warning(f"Ignoring config: {e}")
                    continue
                self._config_path = config_path
                return

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(path, str(e)) from e
        except yaml.YAMLError as e:
            raise ConfigError(path, f"malformed YAML: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(path, "top level must be a mapping")
        unknown = set(data) - set(DEFAULT_CONFIG)
        if unknown:
            raise ConfigError(path, f"unknown keys {sorted(unknown)}")
        for key in ("only_checks", "disabled_checks"):
            if key in data and not isinstance(data[key], list):
                raise ConfigError(path, f"'{key}' must be a list")
        # A quoted "false" would otherwise turn fix mode on
        if "fix" in data and not isinstance(data["fix"], bool):
            raise ConfigError(path, "'fix' must be true or false")
        return data

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides."""
        if "BRACELINT_FIX" in os.environ:
            self._config["fix"] = os.environ["BRACELINT_FIX"].strip().lower() in TRUE_VALUES
        if "BRACELINT_LOG_LEVEL" in os.environ:
            self._config["log_level"] = os.environ["BRACELINT_LOG_LEVEL"]

    @property
    def config_path(self) -> Optional[Path]:
        """Path to loaded config file, or None if using defaults."""
        return self._config_path

    @property
    def fix(self) -> bool:
        return bool(self._config["fix"])

    @property
    def only_checks(self) -> List[str]:
        return list(self._config["only_checks"])

    @property
    def disabled_checks(self) -> List[str]:
        return list(self._config["disabled_checks"])

    @property
    def file_pattern(self) -> str:
        return self._config["file_pattern"]

    @property
    def log_level(self) -> str:
        return str(self._config["log_level"]).upper()

    def to_options(self, **overrides) -> LintOptions:
        """Build run options; keyword overrides (e.g. from the CLI) win."""
        options = LintOptions(
            fix=self.fix,
            only=tuple(self.only_checks),
            disabled=tuple(self.disabled_checks),
            file_pattern=self.file_pattern,
        )
        return replace(options, **overrides)

    def to_dict(self) -> Dict[str, Any]:
        """Export current configuration as dict."""
        return {
            "fix": self.fix,
            "only_checks": self.only_checks,
            "disabled_checks": self.disabled_checks,
            "file_pattern": self.file_pattern,
            "log_level": self.log_level,
            "config_file": str(self._config_path) if self._config_path else None,
        }
