"""Local file reader for Img2FTPS.

Loads source files into memory as FileItem payloads for upload.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Union

from img2ftps.ftp.exceptions import FileReadError
from img2ftps.utils.validators import validate_file_name

logger = logging.getLogger("img2ftps.reader")


@dataclass(frozen=True)
class FileItem:
    """A named in-memory payload."""
    name: str
    content: bytes

    def __post_init__(self):
        """Validate the name and freeze the content buffer."""
        is_valid, error = validate_file_name(self.name)
        if not is_valid:
            raise ValueError(error)
        if not isinstance(self.content, bytes):
            object.__setattr__(self, "content", bytes(self.content))

    @property
    def size(self) -> int:
        """Payload size in bytes."""
        return len(self.content)


def read_file(path: Union[str, Path]) -> FileItem:
    """
    Read a local file into a FileItem named after its base name.

    Args:
        path: Local file path (str or Path)

    Returns:
        FileItem with the file's bytes

    Raises:
        FileReadError: If the file is missing or unreadable
    """
    path = Path(path) if isinstance(path, str) else path

    try:
        content = path.read_bytes()
    except OSError as e:
        raise FileReadError(str(path), e)

    logger.debug(f"Read {len(content)} bytes from {path}")
    return FileItem(name=path.name, content=content)


def read_files(paths: Iterable[Union[str, Path]]) -> List[FileItem]:
    """
    Read several local files.

    Args:
        paths: Local file paths

    Returns:
        FileItems in input order

    Raises:
        FileReadError: On the first file that cannot be read
    """
    return [read_file(path) for path in paths]
