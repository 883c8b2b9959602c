"""
Protocol definitions for upload module.

Defines the interfaces the upload services depend on.
"""
from typing import Protocol, Union
from pathlib import Path

from .models import UploadSource
from ..api.protocols import TransportProtocol, LoggerProtocol


class FileReaderProtocol(Protocol):
    """Protocol for reading upload sources."""

    async def read_file(self, file_path: Union[str, Path]) -> bytes:
        """Read an entire file."""
        ...

    async def read_source(self, source: UploadSource) -> bytes:
        """Return the bytes of an upload source."""
        ...


__all__ = ['TransportProtocol', 'LoggerProtocol', 'FileReaderProtocol']
