"""Settings for `sha256_cli.py`, optionally read from a YAML file.

Example file:

    format: yaml
    trace: true
    skip_invalid: false
    log_level: INFO

Command-line flags override values from the file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import yaml


FORMATS = ("text", "yaml")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(ValueError):
    """Raised for an unreadable or malformed settings file."""


@dataclass(frozen=True)
class Settings:
    format: str = "text"
    trace: bool = False
    skip_invalid: bool = False
    log_level: str = "WARNING"

    @property
    def log_level_number(self) -> int:
        return getattr(logging, self.log_level)


def _validate(values: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name: f for f in fields(Settings)}
    unknown = sorted(set(values) - set(known))
    if unknown:
        raise ConfigError(f"Unknown setting(s): {', '.join(unknown)}")

    for name, value in values.items():
        expected = type(getattr(Settings, name))
        if not isinstance(value, expected):
            raise ConfigError(
                f"Setting '{name}' must be {expected.__name__}, got {type(value).__name__}"
            )

    if "format" in values and values["format"] not in FORMATS:
        raise ConfigError(f"format must be one of {', '.join(FORMATS)}, got {values['format']!r}")
    if "log_level" in values:
        values["log_level"] = values["log_level"].upper()
        if values["log_level"] not in LOG_LEVELS:
            raise ConfigError(
                f"log_level must be one of {', '.join(LOG_LEVELS)}, got {values['log_level']!r}"
            )
    return values


def load_settings(path: Optional[str] = None, **overrides: Any) -> Settings:
    """Build `Settings` from defaults, an optional YAML file, then overrides.

    Overrides whose value is None are ignored, so unset command-line flags
    fall through to the file or the defaults.
    """
    settings = Settings()

    if path is not None:
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise ConfigError(f"Error reading config file '{path}': {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Error parsing config file '{path}': {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError(f"Config file '{path}' must contain a mapping")
        settings = replace(settings, **_validate(dict(data)))

    given = {name: value for name, value in overrides.items() if value is not None}
    return replace(settings, **_validate(given))
