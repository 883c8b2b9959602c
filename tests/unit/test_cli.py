"""Tests for the drive CLI."""
import pytest
from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock, patch

import typer
from typer.testing import CliRunner

from drivepy.cli.main import app, build_client, transfer_files, DEFAULT_API_URL
from drivepy.core.api.errors import DriveAPIError
from drivepy.core.storage import FileMatch, DirectoryListing, StoredItem
from drivepy.core.upload import UploadJob, UploadResult, FileFailureAck, UploadSource


runner = CliRunner()

COMMON = ['--drive', 'drive-123', '--api-key', 'key']


class FakeClient:
    """Async context manager handing out a mocked item collection."""

    def __init__(self, items):
        self._items = items

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        return False

    def items(self, drive_id):
        return self._items


@pytest.fixture
def items():
    """Mocked DriveItems."""
    mock = Mock()
    mock.upload_many = AsyncMock()
    mock.get_upload_status = AsyncMock()
    mock.mark_upload_failed = AsyncMock()
    mock.find_by_path = AsyncMock()
    mock.report_failed_grant = AsyncMock()
    return mock


@pytest.fixture
def patched_client(items):
    """Patch client construction in the CLI."""
    with patch('drivepy.cli.main.build_client', return_value=FakeClient(items)):
        yield items


class TestBuildClient:
    """Test suite for build_client."""

    def test_requires_api_key(self):
        """Test a missing API key exits."""
        with pytest.raises(typer.Exit):
            build_client(None, DEFAULT_API_URL)

    def test_config(self):
        """Test the client is configured from options."""
        client = build_client('key', 'https://api.example.com')

        assert client.config.base_url == 'https://api.example.com/v1'
        assert client.config.api_key == 'key'


class TestUploadCommand:
    """Test suite for 'drive upload'."""

    def test_upload(self, patched_client, tmp_path, batch_response):
        """Test a batch is submitted and the job printed."""
        first = tmp_path / '1.txt'
        first.write_text('one')
        second = tmp_path / '2.txt'
        second.write_text('two')
        patched_client.upload_many.return_value = UploadResult.from_dict(batch_response)

        result = runner.invoke(app, [
            'upload', str(first), str(second),
            '--path', '/up',
            '--relative-path', 'a/1.txt',
            '--relative-path', 'b/2.txt',
            '--preserve-structure',
            *COMMON,
        ])

        assert result.exit_code == 0, result.output
        assert 'Job: job-1' in result.output
        sources, options = patched_client.upload_many.await_args.args
        assert [s.filename for s in sources] == ['1.txt', '2.txt']
        assert options.path == '/up'
        assert options.relative_paths == ['a/1.txt', 'b/2.txt']
        assert options.preserve_structure is True

    def test_upload_error(self, patched_client, tmp_path):
        """Test transport errors exit with status 1."""
        path = tmp_path / 'a.txt'
        path.write_text('a')
        patched_client.upload_many.side_effect = DriveAPIError("Storage quota exceeded", status=413)

        result = runner.invoke(app, ['upload', str(path), *COMMON])

        assert result.exit_code == 1
        assert 'quota' in result.output


class TestStatusCommand:
    """Test suite for 'drive status'."""

    def test_partial_failure(self, patched_client, partial_failure_job):
        """Test the status and per-file errors are printed."""
        patched_client.get_upload_status.return_value = UploadJob.from_dict(partial_failure_job)

        result = runner.invoke(app, ['status', 'job-9', *COMMON])

        assert result.exit_code == 0, result.output
        assert 'COMPLETED_WITH_ERRORS' in result.output
        assert 'file-3' in result.output
        assert '8 ok, 2 failed' in result.output

    def test_unknown_job(self, patched_client):
        """Test not-found exits with status 1."""
        patched_client.get_upload_status.side_effect = DriveAPIError("Upload job not found", status=404)

        result = runner.invoke(app, ['status', 'missing', *COMMON])

        assert result.exit_code == 1


class TestFailCommand:
    """Test suite for 'drive fail'."""

    def test_fail(self, patched_client):
        """Test a failure is reported."""
        patched_client.mark_upload_failed.return_value = FileFailureAck(file_id='file-1')

        result = runner.invoke(app, ['fail', 'file-1', '--error', 'timeout', *COMMON])

        assert result.exit_code == 0, result.output
        patched_client.mark_upload_failed.assert_awaited_once_with('file-1', error='timeout')
        assert 'file-1' in result.output


class TestFindCommand:
    """Test suite for 'drive find'."""

    def test_file(self, patched_client):
        """Test a file match is printed."""
        patched_client.find_by_path.return_value = FileMatch(
            item=StoredItem(id='item-1', name='report.pdf', path='/docs/report.pdf', size=2048)
        )

        result = runner.invoke(app, ['find', '/docs/report.pdf', *COMMON])

        assert result.exit_code == 0, result.output
        assert 'report.pdf' in result.output
        patched_client.find_by_path.assert_awaited_once_with('/docs/report.pdf', case_sensitive=True)

    def test_empty_directory(self, patched_client):
        """Test an empty directory is not an error."""
        patched_client.find_by_path.return_value = DirectoryListing(items=())

        result = runner.invoke(app, ['find', '/empty', '--ignore-case', *COMMON])

        assert result.exit_code == 0, result.output
        assert 'empty directory' in result.output
        patched_client.find_by_path.assert_awaited_once_with('/empty', case_sensitive=False)

    def test_not_found(self, patched_client):
        """Test an absent path exits with status 1."""
        patched_client.find_by_path.return_value = None

        result = runner.invoke(app, ['find', '/nope', *COMMON])

        assert result.exit_code == 1
        assert 'Not found' in result.output


class TestTransferFiles:
    """Test suite for transfer_files."""

    @pytest.mark.asyncio
    async def test_expired_grants_reported(self, items, batch_response):
        """Test expired grants are reported without a transfer."""
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        result = UploadResult.from_dict(batch_response, issued_at=issued)
        sources = [UploadSource.from_bytes('1.txt', b'1'), UploadSource.from_bytes('2.txt', b'2')]

        failures = await transfer_files(items, sources, result)

        assert failures == 2
        assert items.report_failed_grant.await_count == 2
        grant, error = items.report_failed_grant.await_args.args
        assert grant.file_id == 'file-2'
        assert 'expired' in error

    @pytest.mark.asyncio
    async def test_report_error_does_not_stop_loop(self, items, batch_response):
        """Test a failed report is counted and later grants are still reported."""
        issued = datetime.now(timezone.utc) - timedelta(hours=2)
        result = UploadResult.from_dict(batch_response, issued_at=issued)
        sources = [UploadSource.from_bytes('1.txt', b'1'), UploadSource.from_bytes('2.txt', b'2')]
        items.report_failed_grant.side_effect = [
            DriveAPIError("Server error", status=500),
            FileFailureAck(file_id='file-2'),
        ]

        failures = await transfer_files(items, sources, result)

        assert failures == 2
        assert items.report_failed_grant.await_count == 2
        grant, _error = items.report_failed_grant.await_args.args
        assert grant.file_id == 'file-2'
