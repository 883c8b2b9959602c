"""Pytest fixtures for drivepy tests."""
import pytest
from unittest.mock import AsyncMock, Mock

from drivepy.core.api import APIConfig


ITEMS_URI = '/drive/drive-123/item'


@pytest.fixture
def items_uri():
    """Item collection path of the test drive."""
    return ITEMS_URI


@pytest.fixture
def transport():
    """Mock transport with async get/post."""
    mock = Mock()
    mock.get = AsyncMock()
    mock.post = AsyncMock()
    return mock


@pytest.fixture
def api_config():
    """Configuration with an API key."""
    return APIConfig(api_key='test-api-key-123456', api_url='https://api.example.com')


@pytest.fixture
def batch_response():
    """Batch-shaped submission response for two files."""
    return {
        'message': 'Upload URLs generated',
        'uploadJob': {
            'id': 'job-1',
            'status': 'PENDING',
            'total_files': 2,
            'total_size': 30,
            'started_at': '2024-05-01T10:00:00Z',
        },
        'files': [
            {
                'fileId': 'file-1',
                'filename': '1.txt',
                'presignedUrl': 'https://storage.example.com/put/1',
                'mimeType': 'text/plain',
                'size': 10,
                'path': '/up/a/1.txt',
                'expiresIn': 3600,
                'failedUrl': '/v1/drive/drive-123/item/file-1/failed',
            },
            {
                'fileId': 'file-2',
                'filename': '2.txt',
                'presignedUrl': 'https://storage.example.com/put/2',
                'mimeType': 'text/plain',
                'size': 20,
                'path': '/up/b/2.txt',
                'expiresIn': 3600,
            },
        ],
        'statusUrl': '/v1/drive/drive-123/item/upload/job-1',
        'instructions': {
            'step1': 'PUT each file to its presignedUrl',
            'step2': 'Poll statusUrl',
        },
    }


@pytest.fixture
def per_file_response():
    """Per-file-job submission response for one file."""
    return {
        'message': 'Upload URLs generated',
        'files': [
            {
                'upload_job_id': 'upload-1',
                'filename': 'report.pdf',
                'size': 1024,
                'mime_type': 'application/pdf',
                'path': '/docs/report.pdf',
                'presigned_url': 'https://storage.example.com/put/report',
                'expires_at': '2024-05-01T11:00:00Z',
                'failed_url': '/v1/drive/drive-123/item/upload-1/failed',
                'status_url': '/v1/drive/drive-123/item/upload/upload-1',
            },
        ],
        'instructions': {'step1': 'PUT the file'},
    }


@pytest.fixture
def partial_failure_job():
    """Status payload of a 10-file job where 2 files failed."""
    return {
        'jobId': 'job-9',
        'status': 'COMPLETED_WITH_ERRORS',
        'progress': {
            'total': 10,
            'processed': 10,
            'successful': 8,
            'failed': 2,
            'percentage': 100,
        },
        'size': {'total': 10240, 'uploaded': 8192, 'percentage': 80},
        'errorSummary': {
            'file-3': 'Checksum mismatch',
            'file-7': 'Upload grant expired',
        },
        'startedAt': '2024-05-01T10:00:00Z',
        'completedAt': '2024-05-01T10:05:00Z',
    }
