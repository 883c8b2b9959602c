"""
Upload module for batch uploads.

Submissions return a job plus one direct-upload grant per file; the
job's progress is polled and failed transfers are reported back.
"""
from .facade import UploadFacade
from .request_builder import UploadRequestBuilder, UploadSubmission
from .models import (
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
)
from .services import StatusPoller, FailureReporter
from .protocols import TransportProtocol, FileReaderProtocol

__all__ = [
    # Main classes
    'UploadFacade',
    'UploadRequestBuilder',
    'UploadSubmission',
    'StatusPoller',
    'FailureReporter',

    # Models
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

    # Protocols
    'TransportProtocol',
    'FileReaderProtocol',
]
