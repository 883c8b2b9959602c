"""Upload services module."""
from .file_service import FileValidator, AsyncFileReader
from .status_service import StatusPoller
from .failure_service import FailureReporter, DEFAULT_FAILURE_MESSAGE

__all__ = [
    'FileValidator',
    'AsyncFileReader',
    'StatusPoller',
    'FailureReporter',
    'DEFAULT_FAILURE_MESSAGE',
]
