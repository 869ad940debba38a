"""Persistent preferences (``~/.config/reclaim/config.toml``).

Only a fixed set of keys is understood. Unknown keys and values that fail
validation are skipped with a warning, so a hand-edited file can never put
the wizard into an invalid configuration.
"""

from __future__ import annotations

import argparse
import json
import os
import tomllib
from pathlib import Path
from typing import Any, Callable

from loguru import logger

from .errors import ConfigurationError
from .gateway import DEFAULT_API_URL, DEFAULT_TIMEOUT
from .log import LOG_LEVELS

_CONFIG_DIR = Path.home() / ".config" / "reclaim"
_CONFIG_FILE = _CONFIG_DIR / "config.toml"

ENV_API_URL = "RECLAIM_API_URL"

DEFAULTS: dict[str, Any] = {
    "api_url": DEFAULT_API_URL,
    "timeout": DEFAULT_TIMEOUT,
    "store_path": str(Path.home() / ".local" / "share" / "reclaim" / "store.json"),
    "log_level": "WARNING",
    "log_file": "",
    "redirect_delay": 2.0,
}


def _url(value: Any) -> str | None:
    if isinstance(value, str) and value.startswith(("http://", "https://")):
        return value.rstrip("/")
    return None


def _positive(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
        return float(value)
    return None


def _non_negative(value: Any) -> float | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool) and value >= 0:
        return float(value)
    return None


def _level(value: Any) -> str | None:
    if isinstance(value, str) and value.upper() in LOG_LEVELS:
        return value.upper()
    return None


def _path(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    return None


_VALIDATORS: dict[str, Callable[[Any], Any]] = {
    "api_url": _url,
    "timeout": _positive,
    "store_path": _path,
    "log_level": _level,
    "log_file": _path,
    "redirect_delay": _non_negative,
}


def _clean(raw: dict[str, Any]) -> dict[str, Any]:
    cleaned: dict[str, Any] = {}
    for key, value in raw.items():
        validator = _VALIDATORS.get(key)
        if validator is None:
            logger.warning("Ignoring unknown config key {!r}", key)
            continue
        checked = validator(value)
        if checked is None:
            logger.warning("Ignoring invalid value for {!r}: {!r}", key, value)
            continue
        cleaned[key] = checked
    return cleaned


def validate_settings(settings: dict[str, Any]) -> dict[str, Any]:
    """Strict counterpart of the file loader for values typed on the command line."""
    checked: dict[str, Any] = {}
    for key, value in settings.items():
        validator = _VALIDATORS.get(key)
        if validator is None:
            raise ConfigurationError(f"Unknown setting {key!r}")
        result = validator(value)
        if result is None:
            raise ConfigurationError(f"Invalid value for {key}: {value!r}")
        checked[key] = result
    return checked


def load_config() -> dict[str, Any]:
    """Read preferences from disk. Missing or unparsable file -> ``{}``."""
    if not _CONFIG_FILE.is_file():
        return {}
    try:
        with open(_CONFIG_FILE, "rb") as fh:
            raw = tomllib.load(fh)
    except tomllib.TOMLDecodeError as exc:
        logger.warning("Ignoring unreadable config {}: {}", _CONFIG_FILE, exc)
        return {}
    return _clean(raw)


def save_config(settings: dict[str, Any]) -> Path:
    """Write the known, valid keys of ``settings`` with owner-only permissions."""
    cleaned = _clean({k: v for k, v in settings.items() if v is not None})
    _CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)
    lines = ["# RECLAIM preferences"]
    for key in _VALIDATORS:
        if key not in cleaned:
            continue
        value = cleaned[key]
        rendered = json.dumps(value) if isinstance(value, str) else repr(value)
        lines.append(f"{key} = {rendered}")
    fd = os.open(_CONFIG_FILE, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, 0o600)
    with os.fdopen(fd, "w") as fh:
        fh.write("\n".join(lines) + "\n")
    os.chmod(_CONFIG_FILE, 0o600)
    return _CONFIG_FILE


def effective_config() -> dict[str, Any]:
    """Defaults, then the config file, then the environment."""
    merged = dict(DEFAULTS)
    merged.update(load_config())
    env_url = _url(os.environ.get(ENV_API_URL, ""))
    if env_url:
        merged["api_url"] = env_url
    return merged


def apply_config_defaults(args: argparse.Namespace, config: dict[str, Any]) -> None:
    """Fill options the user did not pass on the command line.

    CLI options default to ``None``; an explicit flag always wins over the
    config file, which wins over the built-in default.
    """
    for key, default in DEFAULTS.items():
        if getattr(args, key, None) is not None:
            continue
        setattr(args, key, config.get(key, default))
