"""Storage domain models."""
from .item import ItemType, StoredItem, FileMatch, DirectoryListing, ResolvedPath

__all__ = [
    'ItemType',
    'StoredItem',
    'FileMatch',
    'DirectoryListing',
    'ResolvedPath',
]
