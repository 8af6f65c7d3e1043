"""Configuration loader for contractorcli.

Loads config from a single file (INI by default, YAML when the file name ends
in .yaml/.yml), then applies CONTRACTOR_* environment variable overrides.
"""

from __future__ import annotations

import configparser
import os
from pathlib import Path
from typing import Any, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError

from contractorcli.core.exceptions import ConfigError

DEFAULT_CONFIG_NAME = ".contractorcli.ini"

# env var -> (section, key)
_ENV_OVERRIDES = {
    "CONTRACTOR_HOST": ("contractor", "host"),
    "CONTRACTOR_PROXY": ("contractor", "proxy"),
    "CONTRACTOR_USERNAME": ("contractor", "username"),
    "CONTRACTOR_PASSWORD": ("contractor", "password"),
    "CONTRACTOR_TIMEOUT": ("contractor", "timeout_seconds"),
    "CONTRACTOR_LOG_LEVEL": ("logging", "level"),
}


# ---------------------------------------------------------------------------
# Config schema
# ---------------------------------------------------------------------------

class ContractorConfig(BaseModel):
    host: str = "http://contractor"
    proxy: str = ""
    username: str = ""
    password: str = ""
    timeout_seconds: float = 30.0

    @property
    def base_url(self) -> str:
        return self.host.rstrip("/")


class LoggingConfig(BaseModel):
    level: str = "WARNING"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class AppConfig(BaseModel):
    contractor: ContractorConfig = Field(default_factory=ContractorConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


# ---------------------------------------------------------------------------
# Loader
# ---------------------------------------------------------------------------

def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge override into base, returning a new dict."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def _load_yaml(path: Path) -> dict[str, Any]:
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Error reading config file '{path}': {exc}") from exc
    return data if isinstance(data, dict) else {}


def _load_ini(path: Path) -> dict[str, Any]:
    parser = configparser.ConfigParser(interpolation=None)
    try:
        parser.read(path)
    except configparser.Error as exc:
        raise ConfigError(f"Error reading config file '{path}': {exc}") from exc
    return {section: dict(parser.items(section)) for section in parser.sections()}


def default_config_path() -> Path:
    return Path.home() / DEFAULT_CONFIG_NAME


def _env_overrides(environ: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    for var, (section, key) in _ENV_OVERRIDES.items():
        value = environ.get(var)
        if value:
            overrides.setdefault(section, {})[key] = value
    return overrides


def load_config(
    path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """Load application config.

    Order: config file -> CONTRACTOR_* environment variables.

    A missing file at the default location means "use defaults"; a missing
    file that was asked for explicitly is an error.
    """
    if environ is None:
        environ = os.environ

    merged: dict[str, Any] = {}
    if path is not None:
        path = Path(path).expanduser()
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}")
    else:
        path = default_config_path()

    if path.exists():
        if path.suffix.lower() in {".yaml", ".yml"}:
            merged = _load_yaml(path)
        else:
            merged = _load_ini(path)

    merged = _deep_merge(merged, _env_overrides(environ))

    try:
        return AppConfig(**merged)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration: {exc}") from exc
