"""Storage module: stored items and path resolution."""
from .models import ItemType, StoredItem, FileMatch, DirectoryListing, ResolvedPath
from .resolver import ItemResolver

__all__ = [
    'ItemType',
    'StoredItem',
    'FileMatch',
    'DirectoryListing',
    'ResolvedPath',
    'ItemResolver',
]
