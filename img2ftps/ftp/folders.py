"""Destination folder handling for Img2FTPS.

Makes sure the upload subfolder exists under the base remote path
before any file of a batch is transferred.
"""

import logging
import posixpath
import socket
import ssl
from ftplib import Error as FTPLibError
from typing import Callable, Iterable

from img2ftps.ftp.client import FTPSClient
from img2ftps.ftp.exceptions import FTPSError

logger = logging.getLogger("img2ftps.folders")

# Everything a listing or MKD round-trip can raise
TRANSPORT_ERRORS = (FTPSError, FTPLibError, socket.error, ssl.SSLError, OSError, EOFError)


def join_remote(*parts: str) -> str:
    """Join remote path components with single slashes."""
    cleaned = [p.strip("/") for p in parts[1:] if p and p.strip("/")]
    head = parts[0].rstrip("/") if parts and parts[0] else ""
    return "/".join([head] + cleaned) if cleaned else (head or "/")


class FolderEnsurer:
    """Checks for a subfolder in the base path listing and creates it if absent."""

    def __init__(self, client_factory: Callable[[], FTPSClient], base_path: str):
        """
        Initialize the ensurer.

        Args:
            client_factory: Returns a fresh, unconnected FTPSClient
            base_path: Base remote directory
        """
        self._client_factory = client_factory
        self._base_path = base_path

    @property
    def base_path(self) -> str:
        """Base remote directory."""
        return self._base_path

    def folder_path(self, subfolder: str) -> str:
        """Full remote path of a subfolder."""
        return join_remote(self._base_path, subfolder)

    def _matches(self, line: str, subfolder: str) -> bool:
        # Servers return either bare names or base-joined paths from NLST
        entry = line.strip().rstrip("/")
        name = subfolder.strip("/")
        return entry == name or posixpath.normpath(entry) == self.folder_path(name)

    def is_listed(self, listing: Iterable[str], subfolder: str) -> bool:
        """True if the base path listing already contains the subfolder."""
        return any(self._matches(line, subfolder) for line in listing)

    def ensure_folder(self, subfolder: str) -> bool:
        """
        Make sure base_path/subfolder exists.

        Lists the base path; if the subfolder is not there, issues exactly
        one MKD for it. Transport failures are logged and reported as False.

        Args:
            subfolder: Destination folder relative to the base path

        Returns:
            True if the folder was found or created (reply 257)
        """
        target = self.folder_path(subfolder)

        try:
            with self._client_factory() as client:
                listing = client.list_directory(self._base_path)

                if self.is_listed(listing, subfolder):
                    logger.info(f"Path [{subfolder}] found!")
                    return True

                response = client.make_directory(target)

        except TRANSPORT_ERRORS as e:
            logger.error(f"Could not ensure folder [{target}]: {e}")
            return False

        if response.is_pathname_created:
            logger.info(f"Path [{subfolder}] created!")
            return True

        logger.warning(f"Unexpected reply creating [{target}]: {response.text}")
        return False
