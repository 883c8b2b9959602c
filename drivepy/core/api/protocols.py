"""
Protocol definitions for the transport boundary.

Services depend on these interfaces, so the transport can be swapped
(or mocked) freely.
"""
from typing import Protocol, Any, Mapping, Optional


class TransportProtocol(Protocol):
    """
    Protocol for the authenticated transport.

    Implementations return the unwrapped payload and raise
    DriveAPIError (carrying the HTTP status) on failure.
    """

    async def get(self, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Issue a GET request."""
        ...

    async def post(self, path: str, body: Any = None) -> Any:
        """Issue a POST request with a JSON mapping or multipart form body."""
        ...


class LoggerProtocol(Protocol):
    """Protocol for logger objects."""

    def debug(self, msg: str) -> None: ...
    def info(self, msg: str) -> None: ...
    def warning(self, msg: str) -> None: ...
    def error(self, msg: str) -> None: ...
