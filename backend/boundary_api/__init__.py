"""boundary_api: boundary download, cache and serving for the environmental dashboard."""

from .boundary_service import BoundaryService
from .cache_service import CacheService
from .client import BoundaryClient
from .config import ServerConfig
from .data_service import DataService

__all__ = ["BoundaryClient", "BoundaryService", "CacheService", "DataService", "ServerConfig"]
