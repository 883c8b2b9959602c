"""
DriveItems - the item collection of one drive.

Example:
    >>> async with DriveClient(config) as drive:
    ...     items = drive.items('drive-123')
    ...     result = await items.upload_one('report.pdf')
    ...     match = await items.find_by_path('/report.pdf')
"""
from typing import Callable, Optional, Sequence, Union

from .core.api.protocols import TransportProtocol
from .core.exceptions import DriveInputError
from .core.storage import ItemResolver, StoredItem, ResolvedPath
from .core.upload import (
    UploadFacade,
    UploadResult,
    UploadJob,
    FileFailureAck,
    UploadFileGrant,
    PlacementOptions,
)
from .core.upload.protocols import FileReaderProtocol
from .core.upload.request_builder import FileInput


class DriveItems:
    """
    Uploads and path lookups scoped to one drive.

    All methods are coroutines issuing a single request; none of them
    retries, schedules or polls on its own.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        drive_id: str,
        file_reader: Optional[FileReaderProtocol] = None,
        relative_path: Optional[Callable[[str], str]] = None
    ):
        """
        Initialize drive items.

        Args:
            transport: Authenticated transport
            drive_id: Drive identifier
            file_reader: Optional custom reader for path sources
            relative_path: Maps platform action URLs to transport paths

        Raises:
            DriveInputError: If drive_id is empty
        """
        if not drive_id or not str(drive_id).strip():
            raise DriveInputError("Drive ID is required", error_code='EMPTY_DRIVE_ID')
        self._drive_id = str(drive_id).strip()
        self._uploads = UploadFacade(
            transport,
            self.uri,
            file_reader=file_reader,
            relative_path=relative_path,
        )
        self._resolver = ItemResolver(transport, self.uri)

    @property
    def drive_id(self) -> str:
        return self._drive_id

    @property
    def uri(self) -> str:
        """Item collection path."""
        return f"/drive/{self._drive_id}/item"

    async def upload_one(
        self,
        file: FileInput,
        options: Optional[PlacementOptions] = None
    ) -> UploadResult:
        """Upload a single file as a batch of one."""
        return await self._uploads.upload_one(file, options)

    async def upload_many(
        self,
        files: Sequence[FileInput],
        options: Optional[PlacementOptions] = None
    ) -> Union[UploadResult, StoredItem]:
        """Submit files as one batch (metadata-only item when files is empty)."""
        return await self._uploads.upload_many(files, options)

    async def get_upload_status(self, job_id: str) -> UploadJob:
        """Fetch the current snapshot of an upload job."""
        return await self._uploads.get_upload_status(job_id)

    async def mark_upload_failed(
        self,
        file_id: str,
        error: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> FileFailureAck:
        """Report that a file's bytes never reached its upload target."""
        return await self._uploads.mark_upload_failed(
            file_id, error=error, error_message=error_message
        )

    async def report_failed_grant(
        self,
        grant: UploadFileGrant,
        error: Optional[str] = None
    ) -> FileFailureAck:
        """Report a failed transfer through the grant's own failure URL."""
        return await self._uploads.report_failed_grant(grant, error)

    async def find_by_path(
        self,
        path: str,
        case_sensitive: bool = True
    ) -> Optional[ResolvedPath]:
        """Resolve a path to a file, a directory listing or None."""
        return await self._resolver.find_by_path(path, case_sensitive=case_sensitive)
