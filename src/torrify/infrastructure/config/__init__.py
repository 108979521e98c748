from __future__ import annotations

from .load import load_config
from .schema import AdapterOverride, AppConfig, EnvOverrides, SearchConfig

__all__ = [
    "AdapterOverride",
    "AppConfig",
    "EnvOverrides",
    "SearchConfig",
    "load_config",
]
