"""
Custom exceptions for drive operations.

Local input errors are raised before any request is sent; transport
errors live in core.api.errors and carry the HTTP status.
"""
from typing import Optional, Any


class DriveException(Exception):
    """Base exception for all drivepy errors."""
    
    def __init__(self, message: str, error_code: Optional[str] = None) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            error_code: Symbolic error code (if available)
        """
        self.message = message
        self.error_code = error_code
        super().__init__(message)


class DriveInputError(DriveException, ValueError):
    """Raised for invalid caller input, before any request is made."""
    pass


class DriveAuthError(DriveException):
    """Exception raised for authentication-related errors."""
    pass


class DriveResponseError(DriveException):
    """Exception raised when the platform returns a payload of unexpected shape."""
    
    def __init__(
        self,
        message: str,
        payload: Any = None,
        error_code: Optional[str] = None
    ) -> None:
        """
        Initialize the exception.
        
        Args:
            message: Error message
            payload: The offending payload
            error_code: Symbolic error code (if available)
        """
        self.payload = payload
        super().__init__(message, error_code)
