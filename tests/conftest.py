"""Pytest configuration and shared fixtures for Img2FTPS tests."""

import pytest
from pathlib import Path
from unittest.mock import MagicMock

from img2ftps.ftp.client import FTPResponse, FTPSClient


# Test constants
TEST_FTP_HOST = "127.0.0.1"
TEST_FTP_PORT = 2121
TEST_FTP_USER = "testuser"
TEST_FTP_PASS = "testpass"
TEST_BASE_URL = f"ftp://{TEST_FTP_HOST}:{TEST_FTP_PORT}/img"

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
JPEG_HEADER = b"\xff\xd8\xff"
GIF87A_HEADER = b"GIF87a"
GIF89A_HEADER = b"GIF89a"


@pytest.fixture
def png_bytes() -> bytes:
    """A 12-byte PNG-signed payload."""
    return PNG_HEADER + b"\x00\x00\x00\x0d"


@pytest.fixture
def jpeg_bytes() -> bytes:
    """A small JPEG-signed payload."""
    return JPEG_HEADER + b"\xe0" + b"\x00" * 60


@pytest.fixture
def gif_bytes() -> bytes:
    """A small GIF89a payload."""
    return GIF89A_HEADER + b"\x01\x00\x01\x00" + b"\x00" * 20


@pytest.fixture
def mock_client() -> MagicMock:
    """Transport client double that succeeds on every verb."""
    client = MagicMock(spec=FTPSClient)
    client.__enter__.return_value = client
    client.list_directory.return_value = []
    client.make_directory.return_value = FTPResponse(257, '257 "/img/photos" created')
    client.upload_bytes.return_value = FTPResponse(226, "226 Transfer complete")
    return client


@pytest.fixture
def client_factory(mock_client):
    """Factory returning the shared client double."""
    factory = MagicMock(return_value=mock_client)
    return factory


@pytest.fixture
def image_files(tmp_path: Path, png_bytes: bytes, jpeg_bytes: bytes) -> list:
    """Two image files on disk."""
    png_file = tmp_path / "photo.png"
    png_file.write_bytes(png_bytes)
    jpeg_file = tmp_path / "photo.jpg"
    jpeg_file.write_bytes(jpeg_bytes)
    return [png_file, jpeg_file]
