"""
Path-based item lookup.

The platform decides the answer's shape: a file path yields one item,
a directory path yields its contents.
"""
from typing import Any, Dict, Optional

from .models import StoredItem, FileMatch, DirectoryListing, ResolvedPath
from ..api.errors import DriveAPIError
from ..exceptions import DriveResponseError
from ..path import normalize_item_path, quote_item_path
from ..api.protocols import TransportProtocol, LoggerProtocol
from ..logging import get_logger


class ItemResolver:
    """
    Resolves drive paths to items.

    Example:
        >>> resolver = ItemResolver(client, '/drive/abc/item')
        >>> result = await resolver.find_by_path('/docs/report.pdf')
        >>> if result and result.kind == 'file':
        ...     print(result.item.size)
    """

    def __init__(
        self,
        transport: TransportProtocol,
        items_uri: str,
        logger: Optional[LoggerProtocol] = None
    ):
        self._transport = transport
        self._items_uri = items_uri.rstrip('/')
        self._logger = logger or get_logger('drivepy.storage.resolver')

    def lookup_path(self, normalized: str) -> str:
        """Request path for a normalized item path."""
        return f"{self._items_uri}/path/{quote_item_path(normalized)}"

    async def find_by_path(
        self,
        path: str,
        case_sensitive: bool = True
    ) -> Optional[ResolvedPath]:
        """
        Resolve a path to a file or a directory listing.

        Args:
            path: Item path, with or without a leading '/'
            case_sensitive: Set False for case-insensitive matching

        Returns:
            FileMatch, DirectoryListing (possibly empty) or None if nothing
            exists at the path

        Raises:
            DriveInputError: If the path is empty or blank (no request is sent)
            DriveAPIError: Transport errors other than not-found
            DriveResponseError: If the payload is neither an object nor a list
        """
        normalized = normalize_item_path(path)
        params: Dict[str, Any] = {}
        if not case_sensitive:
            params['case_sensitive'] = False

        try:
            payload = await self._transport.get(self.lookup_path(normalized), params or None)
        except DriveAPIError as e:
            if e.is_not_found:
                self._logger.debug(f"Nothing at {normalized!r}")
                return None
            raise

        return self._shape(payload)

    @staticmethod
    def _shape(payload: Any) -> ResolvedPath:
        if isinstance(payload, list):
            return DirectoryListing(items=tuple(StoredItem.from_dict(entry) for entry in payload))
        if isinstance(payload, dict):
            return FileMatch(item=StoredItem.from_dict(payload))
        raise DriveResponseError("Unexpected item lookup payload", payload=payload)
