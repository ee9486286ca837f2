"""Unit tests for FileItem and the local file reader."""

import pytest

from img2ftps.ftp.exceptions import FileReadError
from img2ftps.local.reader import FileItem, read_file, read_files


class TestFileItem:
    """Tests for FileItem dataclass."""

    def test_size(self):
        assert FileItem("a.png", b"12345").size == 5

    def test_bytearray_frozen_to_bytes(self):
        buffer = bytearray(b"abc")
        item = FileItem("a.png", buffer)
        buffer[0] = 0

        assert isinstance(item.content, bytes)
        assert item.content == b"abc"

    @pytest.mark.parametrize("name", ["", "  ", "dir/a.png", "dir\\a.png", "..", "."])
    def test_invalid_names(self, name):
        with pytest.raises(ValueError):
            FileItem(name, b"data")


class TestReadFile:
    """Tests for read_file / read_files."""

    def test_read_file(self, image_files, png_bytes):
        item = read_file(image_files[0])

        assert item.name == "photo.png"
        assert item.content == png_bytes

    def test_read_file_accepts_str(self, image_files):
        assert read_file(str(image_files[1])).name == "photo.jpg"

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(FileReadError) as exc_info:
            read_file(tmp_path / "missing.png")

        assert exc_info.value.path.endswith("missing.png")
        assert isinstance(exc_info.value.original_error, OSError)

    def test_read_directory_fails(self, tmp_path):
        with pytest.raises(FileReadError):
            read_file(tmp_path)

    def test_read_files_preserves_order(self, image_files):
        items = read_files(reversed(image_files))

        assert [i.name for i in items] == ["photo.jpg", "photo.png"]
