from __future__ import annotations

import os
from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import structlog
import yaml
from dotenv import load_dotenv

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

log = structlog.get_logger(__name__)

_SECTIONS: frozenset[str] = frozenset(
    {"http", "playwright", "logging", "cache", "search", "adapters"}
)
_TOP_LEVEL: tuple[str, ...] = ("app_name", "environment")

# Flat key (env var / CLI flag spelling) -> (section, key inside section).
_FLAT_KEYS: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "playwright_enabled": ("playwright", "enabled"),
    "playwright_headless": ("playwright", "headless"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "cache_max_entries": ("cache", "max_entries"),
    "cache_ttl_seconds": ("cache", "ttl_seconds"),
    "serverless": ("search", "serverless"),
    **{
        f"search_{name}": ("search", name)
        for name in (
            "timeout_seconds",
            "max_concurrent",
            "batch_cooldown_seconds",
            "request_deadline_seconds",
            "default_limit",
            "max_limit",
            "enrich",
        )
    },
}

# Serverless platforms set one of these in every function invocation.
_SERVERLESS_ENV_MARKERS: tuple[str, ...] = ("VERCEL", "AWS_LAMBDA_FUNCTION_NAME")


def _merge_into(target: dict[str, Any], layer: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *layer* into *target* in place; nested mappings merge, the rest is replaced."""
    for key, value in layer.items():
        current = target.get(key)
        if isinstance(current, dict) and isinstance(value, Mapping):
            _merge_into(current, value)
        elif isinstance(value, Mapping):
            target[key] = deepcopy(dict(value))
        else:
            target[key] = value
    return target


def _sectioned(data: Mapping[str, Any]) -> dict[str, Any]:
    """Bring one layer into the sectioned shape AppConfig validates.

    Layers may mix sectioned blocks (YAML) with flat keys (env, CLI);
    flat keys win over a sectioned value given in the same layer.
    """
    out: dict[str, Any] = {
        key: deepcopy(dict(data[key]))
        for key in _SECTIONS
        if isinstance(data.get(key), Mapping)
    }
    out.update({key: data[key] for key in _TOP_LEVEL if key in data})
    for flat_key, (section, name) in _FLAT_KEYS.items():
        if flat_key in data:
            out.setdefault(section, {})[name] = data[flat_key]
    return out


def _yaml_layer(config_path: Path) -> dict[str, Any]:
    if not config_path.exists():
        raise FileNotFoundError(config_path)
    parsed = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def _platform_layer() -> dict[str, Any]:
    """Serverless detection from the platform's own environment markers."""
    if any(os.environ.get(var) for var in _SERVERLESS_ENV_MARKERS):
        return {"serverless": True}
    return {}


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """
    Build the validated AppConfig from its layers, lowest precedence first:
    defaults, platform detection, YAML file, env vars (incl. .env), CLI.

    Never writes to the filesystem.

    Raises:
        FileNotFoundError: ``config_path`` or ``dotenv_path`` does not exist.
        ValueError: YAML top level is not a mapping.
        pydantic.ValidationError: Merged values are invalid.
    """
    # .env feeds os.environ, so it must be read before the env layer.
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        load_dotenv(dotenv_path, override=False)

    layers: list[Mapping[str, Any]] = [DEFAULT_CONFIG, _platform_layer()]
    if config_path is not None:
        layers.append(_yaml_layer(config_path))
    layers.append(EnvOverrides().to_update_dict())
    layers.append(cli_overrides or {})

    merged: dict[str, Any] = {}
    for layer in layers:
        _merge_into(merged, _sectioned(layer))

    config = AppConfig.model_validate(merged)
    log.debug(
        "config_loaded",
        config_path=str(config_path) if config_path else None,
        environment=config.environment,
        serverless=config.search.serverless,
    )
    return config
