from .list_adapters import ListAdaptersUseCase
from .torrent_search import TorrentSearchUseCase

__all__ = ["ListAdaptersUseCase", "TorrentSearchUseCase"]
