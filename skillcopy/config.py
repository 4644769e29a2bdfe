"""Configuration for skillcopy.

Settings come from an optional TOML file and environment variables, with
environment variables taking precedence:

    [registry]
    url = "https://skills.sh"
    timeout = 30.0

    [lock]
    path = "~/.agents/.skill-lock.json"
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import tomli

from skillcopy.exceptions import ConfigParseError

CONFIG_ENV = "SKILLCOPY_CONFIG"
REGISTRY_URL_ENV = "SKILLCOPY_REGISTRY_URL"
LOCK_PATH_ENV = "SKILLCOPY_LOCK_PATH"

DEFAULT_CONFIG_PATH = "~/.config/skillcopy/config.toml"
DEFAULT_REGISTRY_URL = "https://skills.sh"
DEFAULT_LOCK_PATH = "~/.agents/.skill-lock.json"
DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True)
class Settings:
    """Resolved skillcopy settings."""

    registry_url: str = DEFAULT_REGISTRY_URL
    timeout: float = DEFAULT_TIMEOUT
    lock_path: Path = Path(DEFAULT_LOCK_PATH).expanduser()


def get_config_path() -> Path:
    """Get the config file path, honoring $SKILLCOPY_CONFIG."""
    return Path(os.environ.get(CONFIG_ENV) or DEFAULT_CONFIG_PATH).expanduser()


def _read_table(data: dict[str, Any], name: str, path: Path) -> dict[str, Any]:
    table = data.get(name, {})
    if not isinstance(table, dict):
        raise ConfigParseError(f"[{name}] in {path} must be a table, got {type(table).__name__}")
    return table


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from the config file and environment.

    Args:
        path: Config file to read (defaults to get_config_path())

    Returns:
        Resolved Settings; defaults are used for anything not configured

    Raises:
        ConfigParseError: If the file exists but is not valid TOML or has wrong types
    """
    if path is None:
        path = get_config_path()

    data: dict[str, Any] = {}
    if path.exists():
        try:
            with open(path, "rb") as f:
                data = tomli.load(f)
        except tomli.TOMLDecodeError as e:
            raise ConfigParseError(f"Failed to parse {path}: {e}")

    registry = _read_table(data, "registry", path)
    lock = _read_table(data, "lock", path)

    registry_url = registry.get("url", DEFAULT_REGISTRY_URL)
    timeout = registry.get("timeout", DEFAULT_TIMEOUT)
    lock_path = lock.get("path", DEFAULT_LOCK_PATH)

    if not isinstance(registry_url, str):
        raise ConfigParseError(f"registry.url in {path} must be a string")
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
        raise ConfigParseError(f"registry.timeout in {path} must be a number")
    if not isinstance(lock_path, str):
        raise ConfigParseError(f"lock.path in {path} must be a string")

    registry_url = os.environ.get(REGISTRY_URL_ENV) or registry_url
    lock_path = os.environ.get(LOCK_PATH_ENV) or lock_path

    return Settings(
        registry_url=registry_url.rstrip("/"),
        timeout=float(timeout),
        lock_path=Path(lock_path).expanduser(),
    )
