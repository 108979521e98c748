from .normalizer import map_category, normalize
from .orchestrator import SearchOrchestrator

__all__ = ["SearchOrchestrator", "map_category", "normalize"]
