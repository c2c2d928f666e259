"""Library settings resolved from ``RECORDCONFIG_`` environment variables."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional
import os

ENV_PREFIX = "RECORDCONFIG_"
DEFAULT_CONFIG_DIR = ".recordconfig"
DEFAULT_CONFIG_FILE = "config.json"


@dataclass(frozen=True)
class RecordConfigSettings:
    """Where records are stored and how the library logs."""

    config_file: Path
    log_level: str = "INFO"
    log_file: Optional[str] = None


_settings: Optional[RecordConfigSettings] = None


def _env_values() -> Dict[str, str]:
    return {
        key[len(ENV_PREFIX):]: value
        for key, value in os.environ.items()
        if key.startswith(ENV_PREFIX)
    }


def default_config_path() -> Path:
    return Path.cwd() / DEFAULT_CONFIG_DIR / DEFAULT_CONFIG_FILE


def load_settings() -> RecordConfigSettings:
    """Build settings from the environment, falling back to defaults."""
    env = _env_values()
    config_file = env.get("FILE")
    return RecordConfigSettings(
        config_file=Path(config_file).expanduser() if config_file else default_config_path(),
        log_level=(env.get("LOG_LEVEL") or "INFO").upper(),
        log_file=env.get("LOG_FILE") or None,
    )


def get_settings() -> RecordConfigSettings:
    """Return the cached settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Forget cached settings so the environment is read again."""
    global _settings
    _settings = None
