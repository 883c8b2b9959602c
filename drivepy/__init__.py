"""
drivepy - Async Python client for drive storage batch uploads.

Usage:
    >>> from drivepy import DriveClient, PlacementOptions
    >>>
    >>> async with DriveClient(api_key="...") as drive:
    ...     items = drive.items("drive-123")
    ...     result = await items.upload_many(
    ...         ["a/1.txt", "b/2.txt"],
    ...         PlacementOptions(path="/up", relative_paths=["a/1.txt", "b/2.txt"])
    ...     )
    ...     for grant in result.files:
    ...         print(grant.path, grant.target.url)
"""
import logging
from .client import DriveClient
from .drive_items import DriveItems

# Configuration
from .core.api import (
    APIConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    SessionCredentials,
    AsyncAPIClient,
    AsyncAuthService,
    DriveAPIError,
)
from .core.exceptions import (
    DriveException,
    DriveInputError,
    DriveResponseError,
    DriveAuthError,
)
from .core.logging import PACKAGE_LOGGERS

# Uploads
from .core.upload import (
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

# Items
from .core.storage import (
    ItemType,
    StoredItem,
    FileMatch,
    DirectoryListing,
    ResolvedPath,
)
from .core.path import normalize_item_path

__version__ = '1.0.0'


def setup_logging(level=logging.INFO):
    """
    Configure logging for drivepy modules.

    This ensures that all drivepy loggers are properly configured
    to show log messages at the specified level.

    Args:
        level: Logging level (default: logging.INFO)
    """
    for logger_name in PACKAGE_LOGGERS:
        logger = logging.getLogger(logger_name)
        logger.setLevel(level)
        logger.propagate = True


__all__ = [
    'DriveClient',
    'DriveItems',
    'APIConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'SessionCredentials',
    'AsyncAPIClient',
    'AsyncAuthService',
    'DriveException',
    'DriveInputError',
    'DriveResponseError',
    'DriveAuthError',
    'DriveAPIError',
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
    'ItemType',
    'StoredItem',
    'FileMatch',
    'DirectoryListing',
    'ResolvedPath',
    'normalize_item_path',
    'setup_logging',
]
