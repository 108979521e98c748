from .adapter_registry import AdapterRegistryPort
from .cache import ResponseCachePort
from .clock import Clock, Sleeper, WallClock
from .orchestrator import SearchOrchestratorPort
from .page_fetcher import FetchedPage, PageFetcherPort

__all__ = [
    "AdapterRegistryPort",
    "Clock",
    "FetchedPage",
    "PageFetcherPort",
    "ResponseCachePort",
    "SearchOrchestratorPort",
    "Sleeper",
    "WallClock",
]
