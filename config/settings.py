"""
Application settings.

Settings are read from settings.yaml, falling back to the committed
settings.yaml.example template. Environment variables (a .env file is
loaded by main.py) override individual values:

- TRANSACTIONS_FILE -> transactions_file
- WORD_API_URL      -> word_api_url
- LOG_LEVEL         -> log_level
"""

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent

ENV_OVERRIDES = {
    'TRANSACTIONS_FILE': 'transactions_file',
    'WORD_API_URL': 'word_api_url',
    'LOG_LEVEL': 'log_level',
}


@dataclass(frozen=True)
class Settings:
    """Resolved settings with their defaults."""
    transactions_file: str = "data/transactions.json"
    word_api_url: str = "https://random-word-api.herokuapp.com/word"
    poll_interval_seconds: float = 60.0
    request_timeout_seconds: float = 10.0
    max_retries: int = 3
    retry_base_delay_seconds: float = 2.0
    log_level: str = "INFO"


def _get_config_file(config_dir: Path = CONFIG_DIR) -> Path:
    """
    Determine which settings file to use.

    Priority:
    1. settings.yaml (local config, gitignored)
    2. settings.yaml.example (template/fallback)

    Raises:
        FileNotFoundError: If no settings file exists
    """
    custom_config = config_dir / "settings.yaml"
    if custom_config.exists():
        return custom_config

    example_config = config_dir / "settings.yaml.example"
    if example_config.exists():
        logger.warning(
            "Using settings.yaml.example - copy it to settings.yaml to customize"
        )
        return example_config

    raise FileNotFoundError(
        "No settings configuration found.\n"
        "Please copy config/settings.yaml.example to config/settings.yaml"
    )


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    with open(config_file, 'r', encoding='utf-8') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"{config_file.name} must contain a mapping, got {type(data).__name__}")
    return data


def _coerce(key: str, value: Any, field_type: type) -> Any:
    """Convert a YAML/env value to the field's type; ints must be whole numbers."""
    try:
        if field_type is int:
            number = float(value)
            if isinstance(value, bool) or not number.is_integer():
                raise ValueError(value)
            return int(number)
        return field_type(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid value for '{key}': {value!r}")


def load_settings(
    config_file: Optional[Path] = None,
    environ: Optional[Dict[str, str]] = None,
) -> Settings:
    """
    Load settings from YAML and apply environment overrides.

    Args:
        config_file: Explicit YAML path (defaults to _get_config_file())
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Settings instance

    Raises:
        FileNotFoundError: If no settings file exists
        ValueError: If the file has unknown keys or bad values
    """
    if config_file is None:
        config_file = _get_config_file()
    if environ is None:
        environ = dict(os.environ)

    data = _read_yaml(config_file)

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings in {config_file.name}: {unknown}")

    for env_var, key in ENV_OVERRIDES.items():
        if environ.get(env_var):
            data[key] = environ[env_var]

    values: Dict[str, Any] = {}
    for key, value in data.items():
        values[key] = _coerce(key, value, type(getattr(Settings, key)))

    settings = Settings(**values)
    if settings.poll_interval_seconds <= 0:
        raise ValueError("poll_interval_seconds must be positive")
    if settings.max_retries < 1:
        raise ValueError("max_retries must be at least 1")
    if not isinstance(logging.getLevelName(settings.log_level.upper()), int):
        raise ValueError(f"Unknown log_level: {settings.log_level!r}")

    logger.info(f"Loaded settings from {config_file.name}")
    return settings
