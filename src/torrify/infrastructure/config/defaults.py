"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "torrify",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": None,  # Desktop Chrome UA from adapters/constants.py
    },
    "playwright": {
        "enabled": True,
        "headless": True,
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "cache": {
        "max_entries": 1000,
        "ttl_seconds": 900,
    },
    "search": {
        "timeout_seconds": None,  # 15s, or 25s when serverless
        "max_concurrent": 4,
        "batch_cooldown_seconds": 1.0,
        "request_deadline_seconds": 45.0,
        "default_limit": 50,
        "max_limit": 100,
        "per_adapter_limit": 100,
        "serverless": False,
        "enrich": True,
        "enrich_max_concurrent": 5,
        "enrich_timeout_seconds": 10.0,
    },
    "adapters": {},
}
