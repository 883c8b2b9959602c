"""Stored item models and the path resolution result."""
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Any, Optional, Tuple, Union, Literal

from ...exceptions import DriveResponseError


class ItemType(str, Enum):
    """Kind of a stored item."""

    FILE = 'FILE'
    FOLDER = 'FOLDER'
    SYMLINK = 'SYMLINK'

    @classmethod
    def parse(cls, value: Any) -> 'ItemType':
        """Parse an item type, treating unknown values as FILE."""
        try:
            return cls(str(value or '').upper())
        except ValueError:
            return cls.FILE


@dataclass
class StoredItem:
    """
    A file, folder or link stored in a drive.

    Attributes:
        id: Item identifier
        name: Item name
        path: Full path inside the drive
        size: Size in bytes
        mime_type: Content type
        item_type: FILE, FOLDER or SYMLINK
        url: Download URL, when the platform provides one
        metadata: Free-form metadata
        raw: Payload the item was parsed from
    """
    id: Optional[str]
    name: str
    path: Optional[str] = None
    size: int = 0
    mime_type: Optional[str] = None
    item_type: ItemType = ItemType.FILE
    url: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_folder(self) -> bool:
        """Checks if item is a folder."""
        return self.item_type == ItemType.FOLDER

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StoredItem':
        """
        Create from an item payload.

        Raises:
            DriveResponseError: If the payload is not a mapping
        """
        if not isinstance(data, dict):
            raise DriveResponseError("Item payload must be an object", payload=data)

        item_id = data.get('id', data.get('_id'))
        metadata = data.get('metadata')
        return cls(
            id=str(item_id) if item_id is not None else None,
            name=data.get('name') or '',
            path=data.get('path'),
            size=int(data.get('size') or 0),
            mime_type=data.get('mime_type', data.get('mimeType')),
            item_type=ItemType.parse(data.get('item_type', data.get('itemType'))),
            url=data.get('url'),
            metadata=metadata if isinstance(metadata, dict) else {},
            raw=data,
        )


@dataclass(frozen=True)
class FileMatch:
    """A path that resolved to a single item."""
    item: StoredItem
    kind: Literal['file'] = 'file'


@dataclass(frozen=True)
class DirectoryListing:
    """A path that resolved to a directory; items keep platform order."""
    items: Tuple[StoredItem, ...] = ()
    kind: Literal['directory'] = 'directory'

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self):
        return iter(self.items)


ResolvedPath = Union[FileMatch, DirectoryListing]
