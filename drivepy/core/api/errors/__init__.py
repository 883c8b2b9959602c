"""Platform API errors and exceptions."""
from .api_errors import DriveAPIError, APIErrorCodes

__all__ = [
    'DriveAPIError',
    'APIErrorCodes',
]
