"""Tests for the batch upload request builder."""
import json
import pytest
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import aiohttp

from drivepy.core.exceptions import DriveInputError
from drivepy.core.upload.models import PlacementOptions, UploadSource
from drivepy.core.upload.request_builder import UploadRequestBuilder, UploadSubmission


class TestToSource:
    """Test suite for UploadRequestBuilder.to_source."""

    def test_upload_source_passthrough(self):
        """Test UploadSource is returned unchanged."""
        source = UploadSource.from_bytes('a.txt', b'a')

        assert UploadRequestBuilder.to_source(source) is source

    def test_path(self):
        """Test filesystem paths."""
        source = UploadRequestBuilder.to_source('/tmp/a.txt')

        assert source.filename == 'a.txt'
        assert source.content == Path('/tmp/a.txt')

    def test_name_and_bytes(self):
        """Test (filename, bytes) pairs."""
        source = UploadRequestBuilder.to_source(('a.txt', b'abc'))

        assert source.filename == 'a.txt'
        assert source.content == b'abc'

    def test_unsupported(self):
        """Test unsupported inputs raise."""
        with pytest.raises(DriveInputError, match="Unsupported upload source"):
            UploadRequestBuilder.to_source(42)


class TestBuildFields:
    """Test suite for sidecar fields."""

    def test_no_options(self):
        """Test unset options are omitted."""
        assert UploadRequestBuilder.build_fields(PlacementOptions()) == {}

    def test_all_options(self):
        """Test all options are encoded as text."""
        fields = UploadRequestBuilder.build_fields(PlacementOptions(
            path='/up',
            relative_paths=['a/1.txt', 'b/2.txt'],
            preserve_structure=True,
        ))

        assert fields['path'] == '/up'
        assert json.loads(fields['relativePaths']) == ['a/1.txt', 'b/2.txt']
        assert fields['preserveStructure'] == 'true'

    def test_preserve_structure_false(self):
        """Test explicit False is sent."""
        fields = UploadRequestBuilder.build_fields(PlacementOptions(preserve_structure=False))

        assert fields == {'preserveStructure': 'false'}


class TestBuild:
    """Test suite for UploadRequestBuilder.build."""

    @pytest.fixture
    def builder(self):
        """Create builder instance."""
        return UploadRequestBuilder()

    @pytest.mark.asyncio
    async def test_files_in_order(self, builder, tmp_path):
        """Test files are read and kept in submission order."""
        first = tmp_path / '1.txt'
        first.write_bytes(b'first')
        second = tmp_path / '2.txt'
        second.write_bytes(b'second!')

        submission = await builder.build([first, second])

        assert [f[0] for f in submission.files] == ['1.txt', '2.txt']
        assert submission.files[0][1] == b'first'
        assert submission.total_size == 12
        assert submission.expected_paths == ['/1.txt', '/2.txt']

    @pytest.mark.asyncio
    async def test_expected_paths_preserve_structure(self, builder):
        """Test expected paths follow relative paths."""
        submission = await builder.build(
            [('1.txt', b'1'), ('2.txt', b'2')],
            PlacementOptions(path='/up', relative_paths=['a/1.txt', 'b/2.txt'], preserve_structure=True),
        )

        assert submission.expected_paths == ['/up/a/1.txt', '/up/b/2.txt']

    @pytest.mark.asyncio
    async def test_mismatched_relative_paths_read_nothing(self):
        """Test validation happens before any file is read."""
        reader = Mock()
        reader.read_source = AsyncMock()
        builder = UploadRequestBuilder(file_reader=reader)

        with pytest.raises(DriveInputError):
            await builder.build(
                [('1.txt', b'1'), ('2.txt', b'2')],
                PlacementOptions(relative_paths=['a/1.txt']),
            )

        reader.read_source.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_file(self, builder, tmp_path):
        """Test missing path source raises."""
        with pytest.raises(FileNotFoundError):
            await builder.build([tmp_path / 'missing.txt'])

    @pytest.mark.asyncio
    async def test_metadata_only(self, builder):
        """Test an empty file list yields a metadata-only submission."""
        submission = await builder.build([], PlacementOptions(path='/up/empty'))

        assert submission.is_metadata_only
        assert submission.fields == {'path': '/up/empty'}


class TestUploadSubmission:
    """Test suite for UploadSubmission."""

    def test_form_data_is_multipart(self):
        """Test a submission with files builds a multipart body."""
        submission = UploadSubmission(
            fields={'path': '/up'},
            files=[('a.txt', b'abc', 'text/plain')],
        )

        form = submission.to_form_data()

        assert isinstance(form, aiohttp.FormData)
        assert form.is_multipart

    def test_metadata_only(self):
        """Test a submission without files."""
        submission = UploadSubmission(fields={'path': '/up'})

        assert submission.is_metadata_only
        assert submission.total_size == 0

    def test_metadata_only_form_is_multipart(self):
        """Test a submission without files is still sent as multipart."""
        submission = UploadSubmission(fields={'path': '/up'})

        form = submission.to_form_data()

        assert form.is_multipart
