from .base import (
    AdapterInfo,
    AdapterProtocol,
    AdapterSettings,
    EnrichingAdapterProtocol,
    ScrapedRow,
)
from .exceptions import (
    AdapterConfigError,
    AdapterNotFoundError,
    AdapterRegistryError,
    DuplicateAdapterError,
)

__all__ = [
    "AdapterConfigError",
    "AdapterInfo",
    "AdapterNotFoundError",
    "AdapterProtocol",
    "AdapterRegistryError",
    "AdapterSettings",
    "DuplicateAdapterError",
    "EnrichingAdapterProtocol",
    "ScrapedRow",
]
