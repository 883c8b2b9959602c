"""
File validation and reading services.

Single Responsibility: Each class handles one specific task.
"""
from pathlib import Path
from typing import Tuple, Optional, Union
import aiofiles

from ..models import UploadSource
from ...exceptions import DriveInputError
from ...logging import get_logger


class FileValidator:
    """
    Validates local files before they are submitted.

    Responsibilities:
    - Check file existence
    - Verify file is not a directory
    - Get file size
    """

    def validate(self, file_path: Union[str, Path]) -> Tuple[Path, int]:
        """
        Validate a file for upload.

        Args:
            file_path: Path to the file

        Returns:
            Tuple of (validated Path, file size in bytes)

        Raises:
            FileNotFoundError: If file doesn't exist
            DriveInputError: If path is not a regular file
        """
        path = Path(file_path) if isinstance(file_path, str) else file_path

        if not path.exists():
            raise FileNotFoundError(f"File not found: {path}")

        if not path.is_file():
            raise DriveInputError(f"Path is not a file: {path}")

        return path, path.stat().st_size

    def validate_size(self, file_size: int, max_size: Optional[int] = None) -> None:
        """
        Validate file size against an optional client-side limit.

        Raises:
            DriveInputError: If the size exceeds max_size
        """
        if max_size and file_size > max_size:
            raise DriveInputError(
                f"File size {file_size} exceeds maximum {max_size}"
            )


class AsyncFileReader:
    """
    Asynchronous reader for upload sources.

    Uses aiofiles for non-blocking I/O operations.
    """

    def __init__(self, validator: Optional[FileValidator] = None):
        """Initialize file reader."""
        self._validator = validator or FileValidator()
        self._logger = get_logger('drivepy.upload')

    async def read_file(self, file_path: Union[str, Path]) -> bytes:
        """
        Read an entire file.

        Raises:
            FileNotFoundError: If file doesn't exist
            DriveInputError: If path is not a regular file
        """
        path, size = self._validator.validate(file_path)
        async with aiofiles.open(path, 'rb') as f:
            data = await f.read()
        self._logger.debug(f"Read {path.name} ({size} bytes)")
        return data

    async def read_source(self, source: UploadSource) -> bytes:
        """Return the bytes of an upload source, reading from disk if needed."""
        if isinstance(source.content, (bytes, bytearray)):
            return bytes(source.content)
        return await self.read_file(source.content)
