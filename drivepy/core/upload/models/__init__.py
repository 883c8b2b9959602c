"""Upload models."""
from .upload_models import (
    UploadJob,
    UploadJobStatus,
    JobProgress,
    SizeProgress,
    DirectUploadTarget,
    UploadFileGrant,
    UploadResult,
    FileFailureAck,
    PlacementOptions,
    UploadSource,
    parse_timestamp,
)

__all__ = [
    'UploadJob',
    'UploadJobStatus',
    'JobProgress',
    'SizeProgress',
    'DirectUploadTarget',
    'UploadFileGrant',
    'UploadResult',
    'FileFailureAck',
    'PlacementOptions',
    'UploadSource',
    'parse_timestamp',
]
