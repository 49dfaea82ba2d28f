"""Application settings management for Gocket."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml


DEFAULT_SETTINGS_PATH = Path(__file__).resolve().parent.parent.parent / "config" / "settings.yaml"
ENV_SETTINGS_PATH = "GOCKET_SETTINGS"

DEFAULT_TIMEOUT_SECONDS = 30
DEFAULT_USER_AGENT = "Gocket/1.0"
DEFAULT_MAX_BODY_BYTES = 10 * 1024 * 1024
DEFAULT_CHUNK_SIZE = 64 * 1024


@dataclass(frozen=True)
class FetcherSettings:
    """Configuration for retrieving article HTML."""

    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    user_agent: str = DEFAULT_USER_AGENT
    max_body_bytes: int = DEFAULT_MAX_BODY_BYTES
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass(frozen=True)
class AppSettings:
    """Top-level application settings loaded from YAML."""

    fetcher: FetcherSettings = field(default_factory=FetcherSettings)
    metrics_port: Optional[int] = None


class SettingsError(RuntimeError):
    """Raised when there is an issue loading settings."""


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise SettingsError(f"Settings file not found at {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise SettingsError(f"Settings file {path} is not valid YAML: {exc}") from exc
    if not isinstance(data, dict):
        raise SettingsError("Settings file must define a mapping at the root level")
    return data


def _positive(value: Any, name: str, cast=int):
    try:
        parsed = cast(value)
    except (TypeError, ValueError) as exc:
        raise SettingsError(f"'{name}' must be a number, got {value!r}") from exc
    if parsed <= 0:
        raise SettingsError(f"'{name}' must be greater than zero")
    return parsed


def _parse_fetcher(entry: Dict[str, Any]) -> FetcherSettings:
    if not isinstance(entry, dict):
        raise SettingsError("'fetcher' must be a mapping of configuration values")

    user_agent = str(entry.get("user_agent") or DEFAULT_USER_AGENT)
    return FetcherSettings(
        timeout_seconds=_positive(
            entry.get("timeout_seconds", DEFAULT_TIMEOUT_SECONDS), "fetcher.timeout_seconds", float
        ),
        user_agent=user_agent,
        max_body_bytes=_positive(
            entry.get("max_body_bytes", DEFAULT_MAX_BODY_BYTES), "fetcher.max_body_bytes"
        ),
        chunk_size=_positive(entry.get("chunk_size", DEFAULT_CHUNK_SIZE), "fetcher.chunk_size"),
    )


def load_settings(path: Optional[Path] = None) -> AppSettings:
    """Load application settings from YAML into ``AppSettings``.

    ``path`` defaults to the value of the ``GOCKET_SETTINGS`` environment variable
    and falls back to ``config/settings.yaml`` relative to the project root. Only
    the fallback file may be absent, in which case the built-in defaults apply.
    """

    if path is None:
        env_path = os.environ.get(ENV_SETTINGS_PATH)
        if env_path:
            path = Path(env_path)
        elif DEFAULT_SETTINGS_PATH.exists():
            path = DEFAULT_SETTINGS_PATH
        else:
            return AppSettings()

    data = _load_yaml(Path(path))

    fetcher_raw = data.get("fetcher")
    fetcher_settings = FetcherSettings() if fetcher_raw is None else _parse_fetcher(fetcher_raw)

    metrics_port_value = data.get("metrics_port")
    metrics_port = (
        None
        if metrics_port_value in (None, "")
        else _positive(metrics_port_value, "metrics_port")
    )

    return AppSettings(fetcher=fetcher_settings, metrics_port=metrics_port)


__all__ = [
    "AppSettings",
    "FetcherSettings",
    "SettingsError",
    "load_settings",
]
