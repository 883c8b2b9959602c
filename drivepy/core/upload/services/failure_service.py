"""
Failure reporting service.

Tells the platform that the bytes of a granted file never reached
their direct-upload target.
"""
from typing import Callable, Optional, Dict

from ..models import FileFailureAck, UploadFileGrant
from ..protocols import TransportProtocol, LoggerProtocol
from ...exceptions import DriveInputError
from ...logging import get_logger


DEFAULT_FAILURE_MESSAGE = 'Upload failed'


class FailureReporter:
    """
    Reports client-side transfer failures.

    A report forces the file into a terminal state on the platform; the
    parent job is only guaranteed consistent on the next poll. Report
    at most once per file.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        items_uri: str,
        relative_path: Optional[Callable[[str], str]] = None,
        logger: Optional[LoggerProtocol] = None
    ):
        """
        Initialize failure reporter.

        Args:
            transport: Authenticated transport
            items_uri: Item collection path ('/drive/{id}/item')
            relative_path: Maps platform-provided failure URLs to transport paths
            logger: Optional logger
        """
        self._transport = transport
        self._items_uri = items_uri.rstrip('/')
        self._relative_path = relative_path or (lambda target: target)
        self._logger = logger or get_logger('drivepy.upload.failure')

    def failure_path(self, file_id: str) -> str:
        """Request path for reporting a file's failure."""
        return f"{self._items_uri}/{file_id}/failed"

    @staticmethod
    def build_payload(
        error: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> Dict[str, str]:
        """
        Build the report body.

        `error` wins over `error_message`; with neither, a default text is sent.
        """
        if error:
            return {'error': error}
        if error_message:
            return {'errorMessage': error_message}
        return {'error': DEFAULT_FAILURE_MESSAGE}

    async def report(
        self,
        file_id: str,
        error: Optional[str] = None,
        error_message: Optional[str] = None
    ) -> FileFailureAck:
        """
        Report that a file's transfer failed.

        Args:
            file_id: File identifier from the upload manifest
            error: Error description
            error_message: Alternative field name accepted by the platform

        Returns:
            FileFailureAck

        Raises:
            DriveInputError: If file_id is empty (no request is sent)
            DriveAPIError: Transport errors
        """
        file_id = self._require_file_id(file_id)
        return await self._send(self.failure_path(file_id), file_id, error, error_message)

    async def report_grant(
        self,
        grant: UploadFileGrant,
        error: Optional[str] = None
    ) -> FileFailureAck:
        """
        Report a failed transfer for a manifest entry.

        Uses the grant's own failure URL when the platform provided one.
        """
        file_id = self._require_file_id(grant.file_id)
        if grant.failure_report_target:
            path = self._relative_path(grant.failure_report_target)
        else:
            path = self.failure_path(file_id)
        return await self._send(path, file_id, error, None)

    async def _send(
        self,
        path: str,
        file_id: str,
        error: Optional[str],
        error_message: Optional[str]
    ) -> FileFailureAck:
        payload = self.build_payload(error, error_message)
        self._logger.info(f"Reporting failed transfer of {file_id}")
        response = await self._transport.post(path, payload)
        return FileFailureAck.from_dict(response, file_id=file_id)

    @staticmethod
    def _require_file_id(file_id: Optional[str]) -> str:
        if file_id is None or not str(file_id).strip():
            raise DriveInputError("File ID is required", error_code='EMPTY_FILE_ID')
        return str(file_id).strip()
