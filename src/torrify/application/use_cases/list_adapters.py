from __future__ import annotations

from torrify.domain.adapters.base import AdapterInfo
from torrify.domain.ports import AdapterRegistryPort


class ListAdaptersUseCase:
    """Lists every configured adapter, enabled or not, in registry order."""

    def __init__(self, registry: AdapterRegistryPort) -> None:
        self._registry = registry

    def execute(self, *, enabled_only: bool = False) -> list[AdapterInfo]:
        infos = self._registry.list_info()
        if enabled_only:
            infos = [i for i in infos if i.enabled]
        return infos
