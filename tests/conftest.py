import pytest
from unittest.mock import Mock

from googleapiclient.errors import HttpError


@pytest.fixture
def mock_drive_service():
    """Mock Drive v3 service for testing."""
    mock_service = Mock()
    mock_files = Mock()
    mock_service.files.return_value = mock_files
    return mock_service


@pytest.fixture
def sample_drive_file():
    """Sample Drive API ``files`` resource with the metadata fields."""
    return {
        "id": "file_123",
        "name": "pwsafe.kdbx",
        "version": "42",
        "modifiedTime": "2025-01-15T10:00:00.000Z",
        "md5Checksum": "d41d8cd98f00b204e9800998ecf8427e",
        "size": "2048",
    }


@pytest.fixture
def sample_list_response():
    """Sample Drive API ``files.list`` response with a file and a folder."""
    return {
        "files": [
            {"id": "file_123", "name": "pwsafe.kdbx", "mimeType": "application/octet-stream"},
            {"id": "folder_456", "name": "Backups", "mimeType": "application/vnd.google-apps.folder"},
        ],
        "incompleteSearch": False,
    }


@pytest.fixture
def make_http_error():
    """Factory for googleapiclient HttpErrors with a given status."""
    def _make(status, content=b"error"):
        resp = Mock()
        resp.status = status
        resp.reason = "Error"
        return HttpError(resp=resp, content=content)
    return _make


class FakeDownloader:
    """Stands in for MediaIoBaseDownload, writing one chunk per next_chunk call."""

    def __init__(self, chunks):
        self.chunks = list(chunks)
        self.calls = 0
        self.fd = None
        self.request = None

    def __call__(self, fd, request, chunksize=None):
        self.fd = fd
        self.request = request
        return self

    def next_chunk(self):
        self.fd.write(self.chunks[self.calls])
        self.calls += 1
        return None, self.calls == len(self.chunks)


@pytest.fixture
def fake_downloader():
    """Downloader factory delivering the chunks ab, cd, ef in order."""
    return FakeDownloader([b"ab", b"cd", b"ef"])
