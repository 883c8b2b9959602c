"""Transport error raised for failed platform requests."""
from typing import Any, Dict, Optional

from ...exceptions import DriveException


class APIErrorCodes:
    """Symbolic codes attached to transport errors."""
    
    NETWORK_ERROR = 'NETWORK_ERROR'
    UNKNOWN_ERROR = 'UNKNOWN_ERROR'
    
    STATUS_CODES: Dict[int, str] = {
        400: 'BAD_REQUEST',
        401: 'UNAUTHORIZED',
        403: 'FORBIDDEN',
        404: 'NOT_FOUND',
        409: 'CONFLICT',
        413: 'PAYLOAD_TOO_LARGE',
        422: 'UNPROCESSABLE_ENTITY',
        429: 'TOO_MANY_REQUESTS',
        500: 'INTERNAL_SERVER_ERROR',
        502: 'BAD_GATEWAY',
        503: 'SERVICE_UNAVAILABLE',
        504: 'GATEWAY_TIMEOUT',
    }
    
    @classmethod
    def for_status(cls, status: Optional[int]) -> str:
        """Gets the symbolic code for an HTTP status."""
        if status is None:
            return cls.NETWORK_ERROR
        return cls.STATUS_CODES.get(status, cls.UNKNOWN_ERROR)


class DriveAPIError(DriveException):
    """Exception raised for platform API errors."""
    
    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        code: Optional[str] = None,
        details: Any = None
    ):
        self.status = status
        self.code = code or APIErrorCodes.for_status(status)
        self.details = details
        super().__init__(message, self.code)
    
    @property
    def is_not_found(self) -> bool:
        """True if the platform answered 404."""
        return self.status == 404
    
    def __str__(self) -> str:
        if self.status is None:
            return self.message
        return f"{self.message} (HTTP {self.status})"
