"""
Upload job status service.

Point-in-time, read-only status fetches. Polling cadence, backoff and
timeouts are left to the caller.
"""
from typing import Optional
from urllib.parse import quote

from ..models import UploadJob
from ..protocols import TransportProtocol, LoggerProtocol
from ...exceptions import DriveInputError
from ...logging import get_logger


class StatusPoller:
    """
    Fetches upload job snapshots.

    Calls are idempotent and free of side effects. An unknown job id
    surfaces as the transport's not-found DriveAPIError.
    """

    def __init__(
        self,
        transport: TransportProtocol,
        items_uri: str,
        logger: Optional[LoggerProtocol] = None
    ):
        """
        Initialize status poller.

        Args:
            transport: Authenticated transport
            items_uri: Item collection path ('/drive/{id}/item')
            logger: Optional logger
        """
        self._transport = transport
        self._items_uri = items_uri.rstrip('/')
        self._logger = logger or get_logger('drivepy.upload.status')

    def status_path(self, job_id: str) -> str:
        """Request path for a job's status."""
        return f"{self._items_uri}/upload/{quote(str(job_id), safe='')}"

    async def get_status(self, job_id: str) -> UploadJob:
        """
        Fetch the current snapshot of a job.

        Args:
            job_id: Job identifier

        Returns:
            UploadJob snapshot

        Raises:
            DriveInputError: If job_id is empty
            DriveAPIError: Transport errors, including 404 for unknown jobs
        """
        if not job_id or not str(job_id).strip():
            raise DriveInputError("Job ID is required", error_code='EMPTY_JOB_ID')

        payload = await self._transport.get(self.status_path(job_id))
        job = UploadJob.from_dict(payload)

        self._logger.debug(
            f"Job {job.id}: {job.status.value} "
            f"{job.progress.processed}/{job.progress.total} processed"
        )
        for problem in job.check_invariants():
            self._logger.warning(f"Job {job.id} snapshot inconsistent: {problem}")

        return job
