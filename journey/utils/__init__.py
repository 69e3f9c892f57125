"""Small shared helpers."""

from .cache import CatalogCache

__all__ = ["CatalogCache"]
