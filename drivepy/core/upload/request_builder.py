"""
Batch upload request builder.

Turns a list of upload sources plus placement options into the single
multipart submission the item collection accepts.
"""
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
import json

import aiohttp

from .models import PlacementOptions, UploadSource
from .protocols import FileReaderProtocol, LoggerProtocol
from .services import AsyncFileReader
from ..exceptions import DriveInputError
from ..logging import get_logger


FileInput = Union[UploadSource, str, Path, Tuple[str, bytes]]

FILES_FIELD = 'files'


@dataclass
class UploadSubmission:
    """
    One batch submission, ready to send.

    Attributes:
        fields: Sidecar form fields (path, relativePaths, preserveStructure)
        files: (filename, content, mime_type) in submission order
        expected_paths: Final stored path each file should receive
    """
    fields: Dict[str, str] = field(default_factory=dict)
    files: List[Tuple[str, bytes, str]] = field(default_factory=list)
    expected_paths: List[str] = field(default_factory=list)

    @property
    def is_metadata_only(self) -> bool:
        """True when no file bytes are attached."""
        return not self.files

    @property
    def total_size(self) -> int:
        """Bytes attached to the submission."""
        return sum(len(content) for _, content, _ in self.files)

    def to_form_data(self) -> aiohttp.FormData:
        """Build the multipart body, also when no file is attached."""
        form = aiohttp.FormData(default_to_multipart=True)
        for filename, content, mime_type in self.files:
            form.add_field(FILES_FIELD, content, filename=filename, content_type=mime_type)
        for name, value in self.fields.items():
            form.add_field(name, value)
        return form


class UploadRequestBuilder:
    """
    Builds batch upload submissions.

    Validates placement options against the file list before anything
    is read or sent.
    """

    def __init__(
        self,
        file_reader: Optional[FileReaderProtocol] = None,
        logger: Optional[LoggerProtocol] = None
    ):
        self._reader = file_reader or AsyncFileReader()
        self._logger = logger or get_logger('drivepy.upload')

    @staticmethod
    def to_source(file: FileInput) -> UploadSource:
        """
        Coerce a file argument to an UploadSource.

        Accepts an UploadSource, a filesystem path or a (filename, bytes) pair.

        Raises:
            DriveInputError: For unsupported inputs
        """
        if isinstance(file, UploadSource):
            return file
        if isinstance(file, (str, Path)):
            return UploadSource.from_path(file)
        if isinstance(file, tuple) and len(file) == 2 and isinstance(file[1], (bytes, bytearray)):
            return UploadSource.from_bytes(file[0], file[1])
        raise DriveInputError(f"Unsupported upload source: {type(file).__name__}")

    @staticmethod
    def build_fields(options: PlacementOptions) -> Dict[str, str]:
        """Sidecar fields; unset options are omitted."""
        fields: Dict[str, str] = {}
        if options.path is not None:
            fields['path'] = options.path
        relative_paths = options.relative_path_list()
        if relative_paths is not None:
            fields['relativePaths'] = json.dumps(relative_paths)
        if options.preserve_structure is not None:
            fields['preserveStructure'] = 'true' if options.preserve_structure else 'false'
        return fields

    async def build(
        self,
        files: Sequence[FileInput],
        options: Optional[PlacementOptions] = None
    ) -> UploadSubmission:
        """
        Build a submission.

        Args:
            files: Files to submit, in order (may be empty for metadata only)
            options: Placement options

        Returns:
            UploadSubmission

        Raises:
            DriveInputError: If relative paths don't line up with the files
            FileNotFoundError: If a path source doesn't exist
        """
        options = options or PlacementOptions()
        sources = [self.to_source(f) for f in files]
        options.validate(len(sources))

        submission = UploadSubmission(fields=self.build_fields(options))
        for index, source in enumerate(sources):
            content = await self._reader.read_source(source)
            submission.files.append((source.filename, content, source.mime_type))
            submission.expected_paths.append(options.expected_path(index, source.filename))

        self._logger.debug(
            f"Built submission: {len(submission.files)} files, "
            f"{submission.total_size} bytes, fields={sorted(submission.fields)}"
        )
        return submission

