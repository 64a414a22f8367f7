"""
Configuration management and loading.

Reads the API key from the environment and optional defaults from a YAML
file. The result is built once at startup and never re-read.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from ..core.errors import ConfigError, MissingApiKeyError
from ..core.models import Model
from ..sdk.openai_client import DEFAULT_API_URL

API_KEY_ENV = "OPENAI_API_KEY"
CONFIG_PATH_ENV = "HELPTABLE_CONFIG"
API_KEY_HELP_URL = "https://help.openai.com/en/articles/5112595-best-practices-for-api-key-safety"


@dataclass(frozen=True)
class FileConfig:
    """Defaults read from the YAML config file."""
    model: Optional[Model] = None
    api_url: Optional[str] = None
    timeout: Optional[float] = None


@dataclass(frozen=True)
class AppConfig:
    """Complete startup configuration."""
    api_key: str
    api_url: str = DEFAULT_API_URL
    model: Optional[Model] = None
    timeout: Optional[float] = None

    def __repr__(self) -> str:
        # Keep the key out of logs and tracebacks
        return (
            f"AppConfig(api_key='***', api_url={self.api_url!r}, "
            f"model={self.model!r}, timeout={self.timeout!r})"
        )


def load_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> AppConfig:
    """Build the startup configuration.

    The API key is checked first so a missing key is reported before the
    config file is touched.

    Args:
        path: Optional YAML config file
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Validated AppConfig

    Raises:
        MissingApiKeyError: If OPENAI_API_KEY is unset or blank
        ConfigError: If the config file is missing or invalid
    """
    if environ is None:
        environ = os.environ

    api_key = environ.get(API_KEY_ENV, "").strip()
    if not api_key:
        raise MissingApiKeyError(f"{API_KEY_ENV} not set.")

    file_config = load_file_config(path) if path else FileConfig()

    return AppConfig(
        api_key=api_key,
        api_url=file_config.api_url or DEFAULT_API_URL,
        model=file_config.model,
        timeout=file_config.timeout,
    )


def load_file_config(path: str) -> FileConfig:
    """Load and validate the YAML config file.

    Unknown keys and wrong types are rejected rather than ignored.

    Args:
        path: Path to YAML configuration file

    Returns:
        Validated FileConfig

    Raises:
        ConfigError: If the file doesn't exist or is invalid
    """
    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        try:
            raw_config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file {path}: {e}") from e

    # An empty file means "no overrides"
    if raw_config is None:
        return FileConfig()

    if not isinstance(raw_config, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")

    allowed_keys = {'model', 'api_url', 'timeout'}
    unknown_keys = set(raw_config.keys()) - allowed_keys
    if unknown_keys:
        raise ConfigError(f"Unknown configuration keys: {sorted(unknown_keys)}")

    return FileConfig(
        model=_parse_model(raw_config),
        api_url=_parse_api_url(raw_config),
        timeout=_parse_timeout(raw_config),
    )


def _parse_model(data: Dict[str, Any]) -> Optional[Model]:
    if data.get('model') is None:
        return None

    name = data['model']
    if not isinstance(name, str):
        raise ConfigError("'model' must be a string")

    try:
        return Model.from_wire_name(name)
    except ValueError:
        valid_models = [model.wire_name for model in Model]
        raise ConfigError(f"'model' must be one of: {valid_models}") from None


def _parse_api_url(data: Dict[str, Any]) -> Optional[str]:
    if data.get('api_url') is None:
        return None

    url = data['api_url']
    if not isinstance(url, str) or not url.startswith(("http://", "https://")):
        raise ConfigError("'api_url' must be an http(s) URL")
    return url


def _parse_timeout(data: Dict[str, Any]) -> Optional[float]:
    if data.get('timeout') is None:
        return None

    timeout = data['timeout']
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigError("'timeout' must be > 0")
    return float(timeout)
