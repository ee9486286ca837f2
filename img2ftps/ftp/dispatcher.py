"""Concurrent upload dispatch for Img2FTPS.

Validates each payload, then runs accepted transfers on a shared worker
pool. A bounded permit pool caps how many transfers hold a remote
connection at once; a permit covers the write and the server's final
reply.
"""

import logging
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor, wait as wait_futures
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, List, Optional

from img2ftps.ftp.client import FTPSClient
from img2ftps.ftp.folders import join_remote
from img2ftps.local.reader import FileItem
from img2ftps.utils.signatures import ImageSignatureValidator

logger = logging.getLogger("img2ftps.dispatcher")

DEFAULT_CONCURRENCY_LIMIT = 10


class UploadStatus(Enum):
    """Terminal state of one file in a batch."""
    UPLOADED = "uploaded"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass
class UploadOutcome:
    """Result of uploading a single file."""
    file_name: str
    remote_path: str
    status: UploadStatus
    error_message: Optional[str] = None
    bytes_transferred: int = 0
    duration_seconds: float = 0.0

    @property
    def success(self) -> bool:
        """True if the file reached the server."""
        return self.status == UploadStatus.UPLOADED


@dataclass(frozen=True)
class UploadJob:
    """An accepted file bound to its destination."""
    subfolder: str
    item: FileItem
    remote_path: str


# Type alias for per-file completion callback
CompletionCallback = Callable[[UploadOutcome], None]


class UploadDispatcher:
    """Schedules validated uploads with a bounded number in flight."""

    def __init__(
        self,
        client_factory: Callable[[], FTPSClient],
        base_path: str,
        validator: ImageSignatureValidator,
        executor: ThreadPoolExecutor,
        concurrency_limit: int = DEFAULT_CONCURRENCY_LIMIT,
    ):
        """
        Initialize the dispatcher.

        Args:
            client_factory: Returns a fresh, unconnected FTPSClient
            base_path: Base remote directory
            validator: Payload gate
            executor: Shared worker pool
            concurrency_limit: Permits in the pool
        """
        if concurrency_limit < 1:
            raise ValueError(f"Concurrency limit must be at least 1, got {concurrency_limit}")

        self._client_factory = client_factory
        self._base_path = base_path
        self._validator = validator
        self._executor = executor
        self._concurrency_limit = concurrency_limit
        self._permits = threading.BoundedSemaphore(concurrency_limit)

        self._lock = threading.Lock()
        self._active = 0
        self._peak_active = 0

    @property
    def concurrency_limit(self) -> int:
        """Size of the permit pool."""
        return self._concurrency_limit

    @property
    def active_transfers(self) -> int:
        """Transfers currently holding a permit."""
        with self._lock:
            return self._active

    @property
    def peak_active_transfers(self) -> int:
        """Most permits held at the same time so far."""
        with self._lock:
            return self._peak_active

    def make_job(self, subfolder: str, item: FileItem) -> UploadJob:
        """Bind an item to base_path/subfolder/name."""
        return UploadJob(
            subfolder=subfolder,
            item=item,
            remote_path=join_remote(self._base_path, subfolder, item.name),
        )

    def submit(
        self,
        subfolder: str,
        items: Iterable[FileItem],
        on_complete: Optional[CompletionCallback] = None
    ) -> List[Future]:
        """
        Validate items and schedule the accepted ones.

        Rejected items resolve immediately to SKIPPED without touching
        the permit pool. Returned futures never raise.

        Args:
            subfolder: Destination folder relative to the base path
            items: Payloads to upload
            on_complete: Optional callback per finished item

        Returns:
            One future of UploadOutcome per item, in input order
        """
        futures: List[Future] = []

        for item in items:
            job = self.make_job(subfolder, item)
            reason = self._validator.rejection_reason(item.content)

            if reason is not None:
                logger.info(f"[{item.name}] not valid, skipping...")
                logger.debug(f"[{item.name}] rejected: {reason}")
                outcome = UploadOutcome(
                    file_name=item.name,
                    remote_path=job.remote_path,
                    status=UploadStatus.SKIPPED,
                    error_message=f"Invalid image: {reason}",
                )
                skipped: Future = Future()
                skipped.set_result(outcome)
                self._notify(on_complete, outcome)
                futures.append(skipped)
                continue

            futures.append(self._executor.submit(self._run_job, job, on_complete))

        return futures

    def _acquire(self) -> None:
        self._permits.acquire()
        with self._lock:
            self._active += 1
            self._peak_active = max(self._peak_active, self._active)

    def _release(self) -> None:
        with self._lock:
            self._active -= 1
        self._permits.release()

    def _run_job(self, job: UploadJob, on_complete: Optional[CompletionCallback]) -> UploadOutcome:
        """Transfer one job while holding a permit."""
        name = job.item.name
        self._acquire()
        start_time = time.time()

        try:
            logger.info(f"Start uploading [{name}]")
            with self._client_factory() as client:
                response = client.upload_bytes(job.remote_path, job.item.content)

            duration = time.time() - start_time
            if response.is_closing_data:
                logger.info(f"[{name}] uploaded!")
                outcome = UploadOutcome(
                    file_name=name,
                    remote_path=job.remote_path,
                    status=UploadStatus.UPLOADED,
                    bytes_transferred=job.item.size,
                    duration_seconds=duration,
                )
            else:
                logger.warning(f"[{name}] unexpected reply: {response.text}")
                outcome = UploadOutcome(
                    file_name=name,
                    remote_path=job.remote_path,
                    status=UploadStatus.FAILED,
                    error_message=f"Unexpected reply: {response.text}",
                    duration_seconds=duration,
                )

        except Exception as e:
            logger.error(f"[{name}] upload failed: {e}")
            outcome = UploadOutcome(
                file_name=name,
                remote_path=job.remote_path,
                status=UploadStatus.FAILED,
                error_message=str(e),
                duration_seconds=time.time() - start_time,
            )

        finally:
            self._release()

        self._notify(on_complete, outcome)
        return outcome

    def _notify(self, on_complete: Optional[CompletionCallback], outcome: UploadOutcome) -> None:
        if on_complete is None:
            return
        try:
            on_complete(outcome)
        except Exception:
            logger.exception(f"Completion callback failed for [{outcome.file_name}]")


def gather(futures: Iterable[Future]) -> List[UploadOutcome]:
    """
    Wait for every future and collect outcomes in submission order.

    Args:
        futures: Futures returned by UploadDispatcher.submit

    Returns:
        List of UploadOutcome
    """
    futures = list(futures)
    wait_futures(futures)
    return [f.result() for f in futures]
