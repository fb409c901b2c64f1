"""Action catalog loading and indexing."""

from .catalog import ActionCatalog
from .index import ServiceIndex
from .source import CatalogSource

__all__ = ["ActionCatalog", "ServiceIndex", "CatalogSource"]
