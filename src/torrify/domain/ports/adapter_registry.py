from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from torrify.domain.adapters.base import AdapterInfo, AdapterProtocol


@runtime_checkable
class AdapterRegistryPort(Protocol):
    def all_enabled(self) -> list[AdapterProtocol]: ...

    def by_category(self, category: str | None) -> list[AdapterProtocol]: ...

    def by_names(self, names: Sequence[str]) -> list[AdapterProtocol]: ...

    def get(self, key: str) -> AdapterProtocol: ...

    def list_info(self) -> list[AdapterInfo]: ...
