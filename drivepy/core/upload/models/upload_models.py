"""
Data models for upload module.

Uses dataclasses for type-safe data structures. Parsers accept both
the camelCase and snake_case spellings the platform uses.
"""
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from pathlib import Path
from typing import Dict, Any, Optional, List, Sequence, Union
import json
import mimetypes

from ...exceptions import DriveInputError, DriveResponseError
from ...path import join_item_path


DEFAULT_MIME_TYPE = 'application/octet-stream'


def _pick(data: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present, non-None value among alternative keys."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse a platform timestamp.

    Accepts ISO-8601 strings (including a trailing 'Z'), epoch seconds
    or datetime objects. Naive values are taken as UTC.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, (int, float)):
        parsed = datetime.fromtimestamp(value, tz=timezone.utc)
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith('Z'):
            text = text[:-1] + '+00:00'
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise DriveResponseError(f"Invalid timestamp: {value!r}", payload=value) from e
    else:
        raise DriveResponseError(f"Invalid timestamp: {value!r}", payload=value)

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UploadJobStatus(str, Enum):
    """Lifecycle states of an upload job."""

    PENDING = 'PENDING'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'
    COMPLETED_WITH_ERRORS = 'COMPLETED_WITH_ERRORS'
    FAILED = 'FAILED'

    @property
    def is_terminal(self) -> bool:
        """True for states the platform never leaves."""
        return self in _TERMINAL_STATUSES

    @classmethod
    def parse(cls, value: Any) -> 'UploadJobStatus':
        """
        Parse a status string.

        Single-file jobs report UPLOADING and CANCELLED; they map onto
        IN_PROGRESS and FAILED.

        Raises:
            DriveResponseError: For unknown statuses
        """
        if isinstance(value, cls):
            return value
        text = str(value or '').strip().upper()
        text = _STATUS_ALIASES.get(text, text)
        try:
            return cls(text)
        except ValueError as e:
            raise DriveResponseError(f"Unknown upload job status: {value!r}", payload=value) from e


_TERMINAL_STATUSES = frozenset({
    UploadJobStatus.COMPLETED,
    UploadJobStatus.COMPLETED_WITH_ERRORS,
    UploadJobStatus.FAILED,
})

_STATUS_ALIASES = {
    'UPLOADING': 'IN_PROGRESS',
    'CANCELLED': 'FAILED',
}


@dataclass(frozen=True)
class JobProgress:
    """
    File-count progress of a job.

    Attributes:
        total: Files in the batch
        processed: Files with a final outcome
        successful: Files stored
        failed: Files that failed
        percentage: Platform-computed completion percentage
    """
    total: int = 0
    processed: int = 0
    successful: int = 0
    failed: int = 0
    percentage: float = 0.0

    @property
    def is_consistent(self) -> bool:
        """processed == successful + failed and processed <= total."""
        return (
            self.processed == self.successful + self.failed
            and self.processed <= self.total
        )

    @property
    def remaining(self) -> int:
        """Files without an outcome yet."""
        return max(0, self.total - self.processed)

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], total: int = 0) -> 'JobProgress':
        """Create from dictionary (missing progress yields zeros)."""
        if not data:
            return cls(total=total)
        return cls(
            total=int(data.get('total', total) or 0),
            processed=int(data.get('processed', 0) or 0),
            successful=int(data.get('successful', 0) or 0),
            failed=int(data.get('failed', 0) or 0),
            percentage=float(data.get('percentage', 0) or 0),
        )


@dataclass(frozen=True)
class SizeProgress:
    """Byte-count counterpart of JobProgress."""
    total: int = 0
    uploaded: int = 0
    percentage: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]], total: int = 0) -> 'SizeProgress':
        """Create from dictionary (missing progress yields zeros)."""
        if not data:
            return cls(total=total)
        return cls(
            total=int(data.get('total', total) or 0),
            uploaded=int(data.get('uploaded', 0) or 0),
            percentage=float(data.get('percentage', 0) or 0),
        )


ErrorSummary = Union[Dict[str, str], str, None]


@dataclass
class UploadJob:
    """
    Server-side handle for one batch upload.

    Transitions are driven by the platform; a job obtained from a poll
    is a point-in-time snapshot. Partial failure is reported through
    `status` and `error_summary`, never raised.

    Attributes:
        id: Job identifier assigned by the platform
        status: Lifecycle state
        total_files: Files in the batch
        total_size: Bytes in the batch
        progress: File-count progress
        size_progress: Byte-count progress
        error_summary: Per-file-id errors or a single summary string
        started_at: When the job was created
        completed_at: When the job reached a terminal state
        status_url: Platform-provided polling URL, if any
        raw: Payload the job was parsed from
    """
    id: str
    status: UploadJobStatus = UploadJobStatus.PENDING
    total_files: int = 0
    total_size: int = 0
    progress: JobProgress = field(default_factory=JobProgress)
    size_progress: SizeProgress = field(default_factory=SizeProgress)
    error_summary: ErrorSummary = None
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    status_url: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def is_terminal(self) -> bool:
        """True once the job reached COMPLETED, COMPLETED_WITH_ERRORS or FAILED."""
        return self.status.is_terminal

    @property
    def has_errors(self) -> bool:
        """True if at least one file failed or the job failed as a whole."""
        return (
            self.status in (UploadJobStatus.COMPLETED_WITH_ERRORS, UploadJobStatus.FAILED)
            or self.progress.failed > 0
        )

    @property
    def failed_file_ids(self) -> List[str]:
        """File ids named in a per-file error summary."""
        if isinstance(self.error_summary, dict):
            return list(self.error_summary.keys())
        return []

    def check_invariants(self) -> List[str]:
        """
        List violations of the job lifecycle rules.

        Returns:
            Human-readable descriptions; empty when the snapshot is consistent
        """
        problems = []
        progress = self.progress
        if progress.processed != progress.successful + progress.failed:
            problems.append(
                f"processed ({progress.processed}) != successful ({progress.successful})"
                f" + failed ({progress.failed})"
            )
        if progress.processed > progress.total:
            problems.append(f"processed ({progress.processed}) > total ({progress.total})")
        if self.is_terminal and progress.processed != progress.total:
            problems.append(
                f"terminal status {self.status.value} with processed"
                f" ({progress.processed}) != total ({progress.total})"
            )
        if self.is_terminal and self.completed_at is None:
            problems.append(f"terminal status {self.status.value} without completed_at")
        if not self.is_terminal and self.completed_at is not None:
            problems.append(f"completed_at set while status is {self.status.value}")
        return problems

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UploadJob':
        """
        Create from a job payload.

        Accepts both the creation shape (id, total_files, started_at)
        and the status shape (jobId, progress, size, startedAt).

        Raises:
            DriveResponseError: If the payload is not a mapping or lacks an id
        """
        if not isinstance(data, dict):
            raise DriveResponseError("Upload job payload must be an object", payload=data)

        job_id = _pick(data, 'id', 'jobId', 'job_id', 'upload_job_id', 'uploadJobId')
        if not job_id:
            raise DriveResponseError("Upload job payload has no id", payload=data)

        total_files = int(_pick(data, 'total_files', 'totalFiles', default=0) or 0)
        total_size = int(_pick(data, 'total_size', 'totalSize', default=0) or 0)
        progress = JobProgress.from_dict(data.get('progress'), total=total_files)
        size_data = _pick(data, 'sizeProgress', 'size_progress')
        if size_data is None and isinstance(data.get('size'), dict):
            size_data = data['size']
        size_progress = SizeProgress.from_dict(size_data, total=total_size)

        return cls(
            id=str(job_id),
            status=UploadJobStatus.parse(data.get('status') or UploadJobStatus.PENDING.value),
            total_files=total_files or progress.total,
            total_size=total_size or size_progress.total,
            progress=progress,
            size_progress=size_progress,
            error_summary=_pick(data, 'errorSummary', 'error_summary'),
            started_at=parse_timestamp(_pick(data, 'startedAt', 'started_at')),
            completed_at=parse_timestamp(_pick(data, 'completedAt', 'completed_at')),
            status_url=_pick(data, 'statusUrl', 'status_url'),
            raw=data,
        )


@dataclass(frozen=True)
class DirectUploadTarget:
    """
    Time-limited destination for a file's bytes.

    Attributes:
        url: Opaque upload URL (bytes are PUT here, outside this library)
        expires_in: Lifetime in seconds, as announced
        expires_at: Absolute expiry
    """
    url: str
    expires_in: Optional[int] = None
    expires_at: Optional[datetime] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once the grant can no longer be used."""
        if self.expires_at is None:
            return False
        current = now or _utcnow()
        if current.tzinfo is None:
            current = current.replace(tzinfo=timezone.utc)
        return current >= self.expires_at


@dataclass(frozen=True)
class UploadFileGrant:
    """
    Per-file entry of a batch manifest.

    Attributes:
        file_id: Identifier used when reporting failure
        filename: Name of the submitted file
        mime_type: Content type the target expects
        size: Size in bytes
        path: Final stored path after placement options
        target: Direct-upload destination
        failure_report_target: Platform URL for reporting a failed transfer
        upload_job_id: Job the file belongs to
    """
    file_id: str
    filename: str
    target: DirectUploadTarget
    mime_type: str = DEFAULT_MIME_TYPE
    size: int = 0
    path: Optional[str] = None
    failure_report_target: Optional[str] = None
    upload_job_id: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """True once the direct-upload target has expired."""
        return self.target.is_expired(now)

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        issued_at: Optional[datetime] = None
    ) -> 'UploadFileGrant':
        """
        Create from a manifest entry.

        Args:
            data: Manifest entry
            issued_at: Reference time for computing expiry from expiresIn

        Raises:
            DriveResponseError: If the entry lacks a file id or upload URL
        """
        if not isinstance(data, dict):
            raise DriveResponseError("Manifest entry must be an object", payload=data)

        file_id = _pick(data, 'fileId', 'file_id', 'id', 'upload_job_id')
        url = _pick(data, 'presignedUrl', 'presigned_url', 'uploadUrl', 'upload_url')
        if not file_id or not url:
            raise DriveResponseError("Manifest entry needs a file id and an upload URL", payload=data)

        expires_in = _pick(data, 'expiresIn', 'expires_in')
        expires_at = parse_timestamp(_pick(
            data, 'expiresAt', 'expires_at', 'presigned_url_expires_at'
        ))
        if expires_at is None and expires_in is not None:
            expires_at = (issued_at or _utcnow()) + timedelta(seconds=int(expires_in))

        return cls(
            file_id=str(file_id),
            filename=_pick(data, 'filename', 'name', default=''),
            target=DirectUploadTarget(
                url=url,
                expires_in=int(expires_in) if expires_in is not None else None,
                expires_at=expires_at,
            ),
            mime_type=_pick(data, 'mimeType', 'mime_type', default=DEFAULT_MIME_TYPE),
            size=int(_pick(data, 'size', default=0) or 0),
            path=_pick(data, 'path'),
            failure_report_target=_pick(data, 'failedUrl', 'failed_url'),
            upload_job_id=_pick(data, 'upload_job_id', 'uploadJobId'),
        )


@dataclass
class UploadResult:
    """
    Answer to a batch submission.

    Exactly one of `upload_job` (batch shape) or `upload_jobs`
    (one job per file) is populated.

    Attributes:
        message: Platform message
        upload_job: Job tracking the whole batch
        upload_jobs: Per-file jobs, in submission order
        files: Per-file grants, in submission order
        status_url: Polling URL for the batch job
        instructions: Human-readable hints (not a machine contract)
        raw: Payload the result was parsed from
    """
    message: str = ''
    upload_job: Optional[UploadJob] = None
    upload_jobs: List[UploadJob] = field(default_factory=list)
    files: List[UploadFileGrant] = field(default_factory=list)
    status_url: Optional[str] = None
    instructions: Dict[str, str] = field(default_factory=dict)
    raw: Dict[str, Any] = field(default_factory=dict, repr=False)

    @property
    def job_ids(self) -> List[str]:
        """Ids of all jobs in this result."""
        if self.upload_job:
            return [self.upload_job.id]
        return [job.id for job in self.upload_jobs]

    def grant_for(self, file_id: str) -> Optional[UploadFileGrant]:
        """Look up the grant of a file."""
        for grant in self.files:
            if grant.file_id == file_id:
                return grant
        return None

    def expired_grants(self, now: Optional[datetime] = None) -> List[UploadFileGrant]:
        """Grants whose direct-upload target has expired."""
        return [grant for grant in self.files if grant.is_expired(now)]

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        issued_at: Optional[datetime] = None
    ) -> 'UploadResult':
        """
        Create from a submission response.

        Raises:
            DriveResponseError: If the payload is not a mapping or holds malformed entries
        """
        if not isinstance(data, dict):
            raise DriveResponseError("Upload response must be an object", payload=data)

        issued_at = issued_at or _utcnow()
        entries = data.get('files') or []
        if not isinstance(entries, list):
            raise DriveResponseError("Upload response 'files' must be a list", payload=data)

        grants = [UploadFileGrant.from_dict(entry, issued_at) for entry in entries]
        status_url = _pick(data, 'statusUrl', 'status_url')

        upload_job = None
        upload_jobs: List[UploadJob] = []
        job_data = _pick(data, 'uploadJob', 'upload_job')
        if job_data is not None:
            upload_job = UploadJob.from_dict(job_data)
            if upload_job.status_url is None:
                upload_job.status_url = status_url
        else:
            for entry, grant in zip(entries, grants):
                if grant.upload_job_id is None:
                    continue
                upload_jobs.append(UploadJob(
                    id=grant.upload_job_id,
                    status=UploadJobStatus.parse(entry.get('status') or 'PENDING'),
                    total_files=1,
                    total_size=grant.size,
                    progress=JobProgress(total=1),
                    size_progress=SizeProgress(total=grant.size),
                    started_at=issued_at,
                    status_url=_pick(entry, 'status_url', 'statusUrl'),
                    raw=entry,
                ))

        instructions = data.get('instructions') or {}
        if not isinstance(instructions, dict):
            instructions = {'note': str(instructions)}

        return cls(
            message=data.get('message') or '',
            upload_job=upload_job,
            upload_jobs=upload_jobs,
            files=grants,
            status_url=status_url,
            instructions={str(k): str(v) for k, v in instructions.items()},
            raw=data,
        )


@dataclass(frozen=True)
class FileFailureAck:
    """Platform acknowledgement of a reported transfer failure."""
    file_id: Optional[str]
    status: Optional[str] = None
    upload_status: Optional[str] = None
    upload_error: Optional[str] = None
    raw: Dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    @classmethod
    def from_dict(cls, data: Any, file_id: Optional[str] = None) -> 'FileFailureAck':
        """Create from an acknowledgement payload (None for empty bodies)."""
        if data is None:
            return cls(file_id=file_id)
        if not isinstance(data, dict):
            raise DriveResponseError("Failure acknowledgement must be an object", payload=data)
        return cls(
            file_id=_pick(data, 'fileId', 'file_id', 'id', default=file_id),
            status=data.get('status'),
            upload_status=data.get('upload_status'),
            upload_error=data.get('upload_error'),
            raw=data,
        )


@dataclass
class PlacementOptions:
    """
    Where submitted files end up.

    Attributes:
        path: Target directory prefix
        relative_paths: Per-file sub-paths, a list or the JSON text of one
        preserve_structure: Rebuild the source tree under `path`;
            when unset it follows whether relative_paths were given
    """
    path: Optional[str] = None
    relative_paths: Optional[Union[Sequence[str], str]] = None
    preserve_structure: Optional[bool] = None

    @property
    def effective_preserve_structure(self) -> bool:
        """Whether relative paths decide the final stored paths."""
        if self.preserve_structure is not None:
            return self.preserve_structure
        return self.relative_paths is not None

    def relative_path_list(self) -> Optional[List[str]]:
        """
        Relative paths as a list.

        Raises:
            DriveInputError: If the JSON text is invalid or not a list of strings
        """
        if self.relative_paths is None:
            return None
        value = self.relative_paths
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError as e:
                raise DriveInputError(f"relative_paths is not valid JSON: {e}") from e
        if not isinstance(value, (list, tuple)) or not all(isinstance(p, str) for p in value):
            raise DriveInputError("relative_paths must be a list of strings")
        return list(value)

    def validate(self, file_count: int) -> None:
        """
        Check relative paths are order-aligned with the files.

        Raises:
            DriveInputError: On a length mismatch
        """
        paths = self.relative_path_list()
        if paths is not None and len(paths) != file_count:
            raise DriveInputError(
                f"relative_paths has {len(paths)} entries for {file_count} files"
            )

    def expected_path(self, index: int, filename: str) -> str:
        """Final stored path the platform should assign to file `index`."""
        paths = self.relative_path_list()
        if self.effective_preserve_structure and paths is not None:
            return join_item_path(self.path, paths[index])
        return join_item_path(self.path, filename)


@dataclass
class UploadSource:
    """
    One file to submit.

    Attributes:
        filename: Name sent in the multipart part
        content: Raw bytes or a path read at submission time
        mime_type: Content type (guessed from the name if omitted)
    """
    filename: str
    content: Union[bytes, Path]
    mime_type: Optional[str] = None

    def __post_init__(self):
        if isinstance(self.content, str):
            self.content = Path(self.content)
        if not self.filename:
            raise DriveInputError("Upload source needs a filename")
        if self.mime_type is None:
            self.mime_type = mimetypes.guess_type(self.filename)[0] or DEFAULT_MIME_TYPE

    @classmethod
    def from_path(cls, path: Union[str, Path], mime_type: Optional[str] = None) -> 'UploadSource':
        """Create from a filesystem path (read lazily)."""
        path = Path(path)
        return cls(filename=path.name, content=path, mime_type=mime_type)

    @classmethod
    def from_bytes(cls, filename: str, data: bytes, mime_type: Optional[str] = None) -> 'UploadSource':
        """Create from in-memory bytes."""
        return cls(filename=filename, content=bytes(data), mime_type=mime_type)
