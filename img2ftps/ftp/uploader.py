"""Image uploader for Img2FTPS.

Public entry point: ensures the destination folder, validates payloads,
and dispatches bounded concurrent FTPS uploads.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable, List, Mapping, Optional, Tuple, Union
from urllib.parse import urlparse

from img2ftps.config.credentials import CredentialManager
from img2ftps.config.settings import UploaderSettings
from img2ftps.ftp.client import FTPSClient, FTPSConnectionConfig, TLSTrustPolicy
from img2ftps.ftp.dispatcher import (
    DEFAULT_CONCURRENCY_LIMIT,
    CompletionCallback,
    UploadDispatcher,
    UploadOutcome,
    UploadStatus,
    gather,
)
from img2ftps.ftp.exceptions import FileReadError
from img2ftps.ftp.folders import FolderEnsurer
from img2ftps.local.reader import FileItem, read_file, read_files
from img2ftps.utils.signatures import DEFAULT_MAX_FILE_SIZE, ImageSignatureValidator
from img2ftps.utils.validators import (
    validate_ftp_path,
    validate_positive_int,
    validate_subfolder,
)

logger = logging.getLogger("img2ftps.uploader")

Files = Union[Mapping[str, bytes], Iterable[Union[FileItem, Tuple[str, bytes]]]]


@dataclass
class BatchResult:
    """Result of one upload call."""
    subfolder: str
    folder_ready: bool
    outcomes: List[UploadOutcome] = field(default_factory=list)
    error_message: Optional[str] = None

    def _with_status(self, status: UploadStatus) -> List[UploadOutcome]:
        return [o for o in self.outcomes if o.status == status]

    @property
    def uploaded(self) -> List[UploadOutcome]:
        return self._with_status(UploadStatus.UPLOADED)

    @property
    def skipped(self) -> List[UploadOutcome]:
        return self._with_status(UploadStatus.SKIPPED)

    @property
    def failed(self) -> List[UploadOutcome]:
        return self._with_status(UploadStatus.FAILED)

    def summary(self) -> dict:
        """
        Get summary statistics for the batch.

        Returns:
            Dictionary with summary statistics
        """
        return {
            "total": len(self.outcomes),
            "uploaded": len(self.uploaded),
            "skipped": len(self.skipped),
            "failed": len(self.failed),
            "bytes_transferred": sum(o.bytes_transferred for o in self.outcomes),
            "duration_seconds": sum(o.duration_seconds for o in self.outcomes),
            "failures": [(o.file_name, o.error_message) for o in self.failed],
        }


def parse_base_url(base_path: str, host: Optional[str] = None, port: int = 21) -> tuple:
    """
    Split a base remote location into (host, port, path).

    Accepts "ftp://server[:port]/img" or "ftps://..." URLs, or a bare
    absolute path when host is given separately.

    Raises:
        ValueError: If no host can be determined or the path is invalid
    """
    parsed = urlparse(base_path)
    if parsed.scheme in ("ftp", "ftps"):
        host = parsed.hostname or host
        port = parsed.port or port
        path = parsed.path or "/"
    elif parsed.scheme:
        raise ValueError(f"Unsupported scheme: {parsed.scheme}")
    else:
        path = base_path

    if not host:
        raise ValueError("Host is required")

    path = "/" + path.strip("/") if path.strip("/") else "/"
    is_valid, error = validate_ftp_path(path)
    if not is_valid:
        raise ValueError(error)

    return host, port, path


def _to_items(files: Files) -> List[FileItem]:
    """
    Normalize a batch into FileItems.

    Accepts a name-to-bytes mapping, FileItems, or (name, content) pairs.

    Raises:
        ValueError: If a name is invalid
        TypeError: If an entry is neither a FileItem nor a pair
    """
    if isinstance(files, Mapping):
        return [FileItem(name=name, content=content) for name, content in files.items()]

    items = []
    for entry in files:
        if isinstance(entry, FileItem):
            items.append(entry)
        elif isinstance(entry, tuple) and len(entry) == 2:
            items.append(FileItem(*entry))
        else:
            raise TypeError(f"Expected FileItem or (name, content) pair, got {type(entry).__name__}")
    return items


class FTPSUploader:
    """Uploads image batches to an FTPS server."""

    def __init__(
        self,
        base_path: str,
        username: str,
        password: str,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
        tls_policy: TLSTrustPolicy = TLSTrustPolicy.ACCEPT_ALL,
        host: Optional[str] = None,
        port: int = 21,
        passive_mode: bool = True,
        timeout: int = 30,
        use_tls: bool = True,
        binary: bool = True,
        client_factory: Optional[Callable[[], FTPSClient]] = None,
    ):
        """
        Initialize the uploader.

        Args:
            base_path: Base remote location, e.g. "ftp://server/img"
            username: FTPS username
            password: FTPS password
            concurrency_limit: Maximum simultaneous transfers (default 10)
            max_file_size: Largest accepted payload in bytes
            tls_policy: Server certificate trust (default accept all)
            host: Host when base_path is a bare path
            port: Port when the URL does not carry one
            passive_mode: Use passive data connections
            timeout: Socket timeout in seconds
            use_tls: Negotiate TLS on control and data channels
            binary: Transfer in image mode (STOR via storbinary); False sends
                the payload line by line in ASCII mode
            client_factory: Override for creating transport clients

        Raises:
            ValueError: If the configuration is invalid
        """
        for value, label in (
            (concurrency_limit, "Concurrency limit"),
            (max_file_size, "Max file size"),
        ):
            is_valid, error = validate_positive_int(value, label)
            if not is_valid:
                raise ValueError(error)

        host, port, path = parse_base_url(base_path, host=host, port=port)

        self._config = FTPSConnectionConfig(
            host=host,
            port=port,
            username=username,
            passive_mode=passive_mode,
            binary=binary,
            keep_alive=True,
            use_tls=use_tls,
            timeout=timeout,
            tls_policy=tls_policy,
        )
        self._password = password
        self._base_path = path
        self._concurrency_limit = concurrency_limit
        self._max_file_size = max_file_size
        self._client_factory = client_factory or self._new_client
        self._closed = False

        self._executor = ThreadPoolExecutor(
            max_workers=concurrency_limit,
            thread_name_prefix="img2ftps-upload",
        )
        self._validator = ImageSignatureValidator(max_file_size)
        self._ensurer = FolderEnsurer(self._client_factory, path)
        self._dispatcher = UploadDispatcher(
            self._client_factory,
            path,
            self._validator,
            self._executor,
            concurrency_limit=concurrency_limit,
        )

    @classmethod
    def from_settings(
        cls,
        settings: UploaderSettings,
        password: Optional[str] = None,
        credentials: Optional[CredentialManager] = None,
        **kwargs
    ) -> "FTPSUploader":
        """
        Build an uploader from persisted settings.

        The password falls back to the system keyring when not given.

        Raises:
            ValueError: If the settings are invalid or no password is known
        """
        host, _, _ = parse_base_url(settings.base_url)
        if password is None:
            credentials = credentials or CredentialManager()
            password = credentials.get_password(host, settings.username)
        if password is None:
            raise ValueError(f"No saved password for {settings.username}@{host}")

        tls_policy = TLSTrustPolicy.VERIFY if settings.verify_tls else TLSTrustPolicy.ACCEPT_ALL
        return cls(
            settings.base_url,
            settings.username,
            password,
            concurrency_limit=settings.concurrency_limit,
            max_file_size=settings.max_file_size,
            tls_policy=tls_policy,
            passive_mode=settings.passive_mode,
            timeout=settings.timeout,
            **kwargs
        )

    def _new_client(self) -> FTPSClient:
        return FTPSClient(self._config, self._password)

    @property
    def base_path(self) -> str:
        """Base remote directory."""
        return self._base_path

    @property
    def config(self) -> FTPSConnectionConfig:
        """Shared, read-only connection configuration."""
        return self._config

    @property
    def concurrency_limit(self) -> int:
        return self._concurrency_limit

    @property
    def max_file_size(self) -> int:
        return self._max_file_size

    @property
    def validator(self) -> ImageSignatureValidator:
        return self._validator

    @property
    def dispatcher(self) -> UploadDispatcher:
        return self._dispatcher

    def is_valid_image(self, content: bytes) -> bool:
        """True if the payload would be accepted for upload."""
        return self._validator.is_valid_image(content)

    def ensure_folder(self, subfolder: str) -> bool:
        """True if base_path/subfolder exists or was created."""
        return self._ensurer.ensure_folder(subfolder)

    def submit(
        self,
        subfolder: str,
        files: Files,
        on_complete: Optional[CompletionCallback] = None
    ) -> List[Future]:
        """
        Ensure the folder, then schedule the batch without waiting.

        Args:
            subfolder: Destination folder relative to the base path
            files: Mapping of name to bytes, FileItems, or (name, content) pairs
            on_complete: Optional callback per finished file

        Returns:
            Futures of UploadOutcome; empty if the folder is unavailable
        """
        if self._closed:
            logger.error("Uploader is closed, batch not scheduled")
            return []

        is_valid, error = validate_subfolder(subfolder)
        if not is_valid:
            logger.error(error)
            return []

        try:
            items = _to_items(files)
        except (ValueError, TypeError) as e:
            logger.error(str(e))
            return []

        if not self.ensure_folder(subfolder):
            logger.error(f"Folder [{subfolder}] unavailable, skipping batch of {len(items)}")
            return []

        return self._dispatcher.submit(subfolder, items, on_complete)

    def upload(
        self,
        subfolder: str,
        files: Files,
        on_complete: Optional[CompletionCallback] = None
    ) -> BatchResult:
        """
        Upload a batch of in-memory payloads and wait for every outcome.

        Args:
            subfolder: Destination folder relative to the base path
            files: Mapping of name to bytes, FileItems, or (name, content) pairs
            on_complete: Optional callback per finished file

        Returns:
            BatchResult; folder_ready is False when nothing was attempted
        """
        if self._closed:
            return BatchResult(subfolder=subfolder, folder_ready=False, error_message="Uploader is closed")

        is_valid, error = validate_subfolder(subfolder)
        if not is_valid:
            return BatchResult(subfolder=subfolder, folder_ready=False, error_message=error)

        try:
            items = _to_items(files)
        except (ValueError, TypeError) as e:
            return BatchResult(subfolder=subfolder, folder_ready=False, error_message=str(e))

        if not self.ensure_folder(subfolder):
            return BatchResult(
                subfolder=subfolder,
                folder_ready=False,
                error_message=f"Could not find or create folder '{subfolder}'",
            )

        futures = self._dispatcher.submit(subfolder, items, on_complete)
        result = BatchResult(subfolder=subfolder, folder_ready=True, outcomes=gather(futures))
        summary = result.summary()
        logger.info(
            f"Batch [{subfolder}] done: {summary['uploaded']} uploaded, "
            f"{summary['skipped']} skipped, {summary['failed']} failed"
        )
        return result

    def upload_paths(
        self,
        subfolder: str,
        source_paths: Iterable[Union[str, Path]],
        on_complete: Optional[CompletionCallback] = None
    ) -> BatchResult:
        """
        Read local files and upload them as one batch.

        A file that cannot be read aborts the batch before anything is sent.
        """
        try:
            items = read_files(source_paths)
        except FileReadError as e:
            logger.error(str(e))
            return BatchResult(subfolder=subfolder, folder_ready=False, error_message=str(e))

        return self.upload(subfolder, items, on_complete)

    def upload_path(
        self,
        subfolder: str,
        source_path: Union[str, Path],
        on_complete: Optional[CompletionCallback] = None
    ) -> BatchResult:
        """Read one local file and upload it."""
        try:
            item = read_file(source_path)
        except FileReadError as e:
            logger.error(str(e))
            return BatchResult(subfolder=subfolder, folder_ready=False, error_message=str(e))

        return self.upload(subfolder, [item], on_complete)

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        """
        Wait for scheduled uploads and stop the worker pool.

        Later upload calls return an empty or not-ready result instead of raising.
        """
        self._closed = True
        self._executor.shutdown(wait=True)

    def __enter__(self) -> "FTPSUploader":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
