"""
Upload facade.

Provides a simplified interface for batch uploads.
Follows Facade Pattern - hides the request builder, status poller and
failure reporter behind four calls.
"""
from datetime import datetime, timezone
from typing import Callable, Optional, Sequence, Union

from .models import (
    UploadResult,
    UploadJob,
    FileFailureAck,
    UploadFileGrant,
    PlacementOptions,
)
from .protocols import TransportProtocol, FileReaderProtocol, LoggerProtocol
from .request_builder import UploadRequestBuilder, UploadSubmission, FileInput
from .services import StatusPoller, FailureReporter
from ..storage.models import StoredItem
from ..logging import get_logger


class UploadFacade:
    """
    Batch uploads for one drive's item collection.

    The platform answers a submission with a job and one time-limited
    direct-upload grant per file. Moving the bytes to each grant's URL
    happens outside this class; failed transfers are reported back
    with mark_upload_failed.

    Example:
        >>> uploads = UploadFacade(client, '/drive/abc/item')
        >>> result = await uploads.upload_many(
        ...     ['a.txt', 'b.txt'],
        ...     PlacementOptions(path='/up')
        ... )
        >>> job = await uploads.get_upload_status(result.upload_job.id)
        >>> if job.has_errors:
        ...     print(job.error_summary)
    """

    def __init__(
        self,
        transport: TransportProtocol,
        items_uri: str,
        file_reader: Optional[FileReaderProtocol] = None,
        relative_path: Optional[Callable[[str], str]] = None,
        logger: Optional[LoggerProtocol] = None
    ):
        """
        Initialize upload facade.

        Args:
            transport: Authenticated transport
            items_uri: Item collection path ('/drive/{id}/item')
            file_reader: Optional custom reader for path sources
            relative_path: Maps platform action URLs to transport paths
            logger: Optional logger
        """
        self._transport = transport
        self._items_uri = items_uri.rstrip('/')
        self._logger = logger or get_logger('drivepy.upload')
        self._builder = UploadRequestBuilder(file_reader=file_reader, logger=self._logger)
        self._poller = StatusPoller(transport, self._items_uri)
        self._reporter = FailureReporter(transport, self._items_uri, relative_path=relative_path)

    @property
    def items_uri(self) -> str:
        """Item collection path."""
        return self._items_uri

    async def upload_one(
        self,
        file: FileInput,
        options: Optional[PlacementOptions] = None
    ) -> UploadResult:
        """
        Upload a single file as a batch of one.

        Args:
            file: Path, (filename, bytes) pair or UploadSource
            options: Placement options

        Returns:
            UploadResult with one grant
        """
        return await self.upload_many([file], options)

    async def upload_many(
        self,
        files: Sequence[FileInput],
        options: Optional[PlacementOptions] = None
    ) -> Union[UploadResult, StoredItem]:
        """
        Submit files as one batch.

        Exactly one request is sent regardless of the number of files.
        An empty file list creates a metadata-only item and returns it
        instead of a job.

        Args:
            files: Files in order; relative paths line up with this order
            options: Placement options

        Returns:
            UploadResult, or StoredItem for a metadata-only submission

        Raises:
            DriveInputError: If relative paths don't line up with the files
            FileNotFoundError: If a path source doesn't exist
            DriveAPIError: Transport errors, including quota and size limits
        """
        options = options or PlacementOptions()
        submission = await self._builder.build(files, options)

        if submission.is_metadata_only:
            self._logger.info(
                "No files in submission; creating a metadata-only item instead of an upload job"
            )
            payload = await self._transport.post(self._items_uri, submission.to_form_data())
            return StoredItem.from_dict(payload)

        issued_at = datetime.now(timezone.utc)
        payload = await self._transport.post(self._items_uri, submission.to_form_data())
        result = UploadResult.from_dict(payload, issued_at=issued_at)

        self._log_result(result, submission)
        return result

    async def get_upload_status(self, job_id: str) -> UploadJob:
        """
        Fetch the current snapshot of an upload job.

        Raises:
            DriveInputError: If job_id is empty
            DriveAPIError: Transport errors, including not-found for unknown jobs
        """
        return await self._poller.get_status(job_id)

    async def mark_upload_failed(
        self,
        file_id: str,
        error: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> FileFailureAck:
        """
        Report that a file's bytes never reached its upload target.

        Raises:
            DriveInputError: If file_id is empty (no request is sent)
            DriveAPIError: Transport errors
        """
        return await self._reporter.report(file_id, error=error, error_message=error_message)

    async def report_failed_grant(
        self,
        grant: UploadFileGrant,
        error: Optional[str] = None
    ) -> FileFailureAck:
        """Report a failed transfer through the grant's own failure URL."""
        return await self._reporter.report_grant(grant, error)

    def _log_result(self, result: UploadResult, submission: UploadSubmission) -> None:
        self._logger.info(
            f"Submitted {len(submission.files)} files; jobs={result.job_ids}"
        )
        if len(result.files) != len(submission.files):
            self._logger.warning(
                f"Manifest lists {len(result.files)} files for {len(submission.files)} submitted"
            )
        for grant, expected in zip(result.files, submission.expected_paths):
            if grant.path is not None and grant.path != expected:
                self._logger.warning(
                    f"{grant.filename}: stored path {grant.path!r} differs from expected {expected!r}"
                )
