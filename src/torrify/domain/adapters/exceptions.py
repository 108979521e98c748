"""Adapter registry exceptions."""

from __future__ import annotations


class AdapterRegistryError(Exception):
    """Base class for all adapter-registry errors."""


class AdapterNotFoundError(AdapterRegistryError):
    """Raised when an adapter key is not known to the registry."""


class DuplicateAdapterError(AdapterRegistryError):
    """Raised when two adapters resolve to the same key."""


class AdapterConfigError(AdapterRegistryError):
    """Raised when adapter overrides reference an unknown adapter or bad value."""
