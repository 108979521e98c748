from .search import (
    CATEGORIES,
    SORT_KEYS,
    SORT_ORDERS,
    AdapterError,
    AdapterParseError,
    AdapterResult,
    AdapterTimeout,
    AdapterTransportError,
    CanonicalResult,
    Category,
    InputError,
    NoAdaptersAvailable,
    PipelineError,
    SearchParams,
    SearchResponse,
    SortKey,
    SortOrder,
    TorrifyError,
)

__all__ = [
    "CATEGORIES",
    "SORT_KEYS",
    "SORT_ORDERS",
    "AdapterError",
    "AdapterParseError",
    "AdapterResult",
    "AdapterTimeout",
    "AdapterTransportError",
    "CanonicalResult",
    "Category",
    "InputError",
    "NoAdaptersAvailable",
    "PipelineError",
    "SearchParams",
    "SearchResponse",
    "SortKey",
    "SortOrder",
    "TorrifyError",
]
