"""Unit tests for UploadDispatcher.

Tests validation gating, per-file outcomes, and permit accounting under
concurrency.
"""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest

from img2ftps.ftp.client import FTPResponse
from img2ftps.ftp.dispatcher import (
    UploadDispatcher,
    UploadOutcome,
    UploadStatus,
    gather,
)
from img2ftps.ftp.exceptions import FTPSUploadError
from img2ftps.local.reader import FileItem
from img2ftps.utils.signatures import ImageSignatureValidator
from tests.conftest import JPEG_HEADER, PNG_HEADER


class TrackingClient:
    """Client double that records how many uploads overlap."""

    def __init__(self, tracker, fail_names=(), reply="226 Transfer complete"):
        self._tracker = tracker
        self._fail_names = fail_names
        self._reply = reply

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        return None

    def upload_bytes(self, remote_path, content):
        self._tracker.enter()
        try:
            time.sleep(0.02)
            name = remote_path.rsplit("/", 1)[-1]
            if name in self._fail_names:
                raise FTPSUploadError(name, remote_path, ConnectionResetError("reset"))
            return FTPResponse.parse(self._reply)
        finally:
            self._tracker.exit()


class OverlapTracker:
    def __init__(self):
        self._lock = threading.Lock()
        self.current = 0
        self.peak = 0
        self.calls = 0

    def enter(self):
        with self._lock:
            self.current += 1
            self.calls += 1
            self.peak = max(self.peak, self.current)

    def exit(self):
        with self._lock:
            self.current -= 1


def png_item(name: str) -> FileItem:
    return FileItem(name=name, content=PNG_HEADER + b"\x00" * 8)


@pytest.fixture
def executor():
    pool = ThreadPoolExecutor(max_workers=8)
    yield pool
    pool.shutdown(wait=True)


@pytest.fixture
def validator():
    return ImageSignatureValidator()


class TestUploadOutcome:
    """Tests for UploadOutcome dataclass."""

    def test_success_only_when_uploaded(self):
        for status, expected in (
            (UploadStatus.UPLOADED, True),
            (UploadStatus.SKIPPED, False),
            (UploadStatus.FAILED, False),
        ):
            outcome = UploadOutcome(file_name="a.png", remote_path="/img/a.png", status=status)
            assert outcome.success is expected


class TestUploadDispatcher:
    """Tests for UploadDispatcher class."""

    def test_invalid_concurrency_limit(self, client_factory, validator, executor):
        with pytest.raises(ValueError, match="Concurrency limit"):
            UploadDispatcher(client_factory, "/img", validator, executor, concurrency_limit=0)

    def test_make_job_builds_remote_path(self, client_factory, validator, executor):
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)
        job = dispatcher.make_job("photos", png_item("a.png"))
        assert job.remote_path == "/img/photos/a.png"
        assert job.subfolder == "photos"

    def test_uploads_valid_item(self, client_factory, mock_client, validator, executor, png_bytes):
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        outcomes = gather(dispatcher.submit("photos", [FileItem("a.png", png_bytes)]))

        assert len(outcomes) == 1
        assert outcomes[0].status == UploadStatus.UPLOADED
        assert outcomes[0].bytes_transferred == len(png_bytes)
        mock_client.upload_bytes.assert_called_once_with("/img/photos/a.png", png_bytes)

    def test_invalid_item_skipped_without_transfer(self, client_factory, mock_client, validator, executor):
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        outcomes = gather(dispatcher.submit("photos", [FileItem("notes.txt", b"hello world")]))

        assert outcomes[0].status == UploadStatus.SKIPPED
        assert "unrecognized signature" in outcomes[0].error_message
        client_factory.assert_not_called()
        assert dispatcher.peak_active_transfers == 0

    def test_mixed_batch_scenario(self, client_factory, mock_client, validator, executor):
        """One accepted PNG, one too-short buffer, one oversized JPEG."""
        items = [
            FileItem("small.png", PNG_HEADER + b"\x00\x00\x00\x0d"),
            FileItem("tiny.gif", b"GIF8"),
            FileItem("huge.jpg", JPEG_HEADER + b"\x00" * (6_000_000 - len(JPEG_HEADER))),
        ]
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        outcomes = gather(dispatcher.submit("photos", items))

        statuses = {o.file_name: o.status for o in outcomes}
        assert statuses == {
            "small.png": UploadStatus.UPLOADED,
            "tiny.gif": UploadStatus.SKIPPED,
            "huge.jpg": UploadStatus.SKIPPED,
        }
        assert mock_client.upload_bytes.call_count == 1

    def test_unexpected_reply_is_failure(self, client_factory, mock_client, validator, executor):
        mock_client.upload_bytes.return_value = FTPResponse(451, "451 Local error")
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        outcome = gather(dispatcher.submit("photos", [png_item("a.png")]))[0]

        assert outcome.status == UploadStatus.FAILED
        assert "451" in outcome.error_message

    def test_transfer_error_attributed_to_item(self, client_factory, mock_client, validator, executor):
        mock_client.upload_bytes.side_effect = FTPSUploadError("a.png", "/img/photos/a.png")
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        outcome = gather(dispatcher.submit("photos", [png_item("a.png")]))[0]

        assert outcome.status == UploadStatus.FAILED
        assert outcome.file_name == "a.png"
        assert "Failed to upload 'a.png'" in outcome.error_message

    def test_completion_callback_per_item(self, client_factory, validator, executor):
        completed = []
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)

        gather(dispatcher.submit(
            "photos",
            [png_item("a.png"), FileItem("bad.bin", b"\x00" * 10)],
            on_complete=completed.append,
        ))

        assert sorted(o.file_name for o in completed) == ["a.png", "bad.bin"]

    def test_callback_error_does_not_break_batch(self, client_factory, validator, executor):
        def boom(outcome):
            raise RuntimeError("callback failed")

        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)
        outcome = gather(dispatcher.submit("photos", [png_item("a.png")], on_complete=boom))[0]

        assert outcome.status == UploadStatus.UPLOADED

    def test_permit_pool_bounds_concurrency(self, validator, executor):
        tracker = OverlapTracker()
        dispatcher = UploadDispatcher(
            lambda: TrackingClient(tracker), "/img", validator, executor, concurrency_limit=2
        )

        items = [png_item(f"{i}.png") for i in range(10)]
        outcomes = gather(dispatcher.submit("photos", items))

        assert all(o.status == UploadStatus.UPLOADED for o in outcomes)
        assert tracker.calls == 10
        assert 1 <= tracker.peak <= 2
        assert dispatcher.peak_active_transfers <= 2
        assert dispatcher.active_transfers == 0

    def test_permits_released_on_failure(self, validator, executor):
        tracker = OverlapTracker()
        failing = {f"{i}.png" for i in range(0, 6, 2)}
        dispatcher = UploadDispatcher(
            lambda: TrackingClient(tracker, fail_names=failing),
            "/img", validator, executor, concurrency_limit=3
        )

        outcomes = gather(dispatcher.submit("photos", [png_item(f"{i}.png") for i in range(6)]))

        failed = {o.file_name for o in outcomes if o.status == UploadStatus.FAILED}
        assert failed == failing
        assert dispatcher.active_transfers == 0
        # Every permit is back in the pool
        for _ in range(3):
            assert dispatcher._permits.acquire(blocking=False) is True
        assert dispatcher._permits.acquire(blocking=False) is False

    def test_outcomes_in_submission_order(self, client_factory, validator, executor):
        dispatcher = UploadDispatcher(client_factory, "/img", validator, executor)
        names = [f"{i}.png" for i in range(5)]

        outcomes = gather(dispatcher.submit("photos", [png_item(n) for n in names]))

        assert [o.file_name for o in outcomes] == names
