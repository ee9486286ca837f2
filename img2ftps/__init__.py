"""Img2FTPS: upload image batches to an FTPS server.

Public API:
- FTPSUploader: Ensure folder, validate, and upload batches concurrently
- BatchResult / UploadOutcome / UploadStatus: Per-file results
- FileItem: Named in-memory payload
- ImageSignatureValidator: Magic-byte image check
- TLSTrustPolicy: Server certificate trust setting
"""

from img2ftps.ftp.client import TLSTrustPolicy
from img2ftps.ftp.dispatcher import UploadOutcome, UploadStatus
from img2ftps.ftp.uploader import BatchResult, FTPSUploader
from img2ftps.local.reader import FileItem
from img2ftps.utils.signatures import ImageSignatureValidator

__version__ = "0.1.0"

__all__ = [
    "BatchResult",
    "FileItem",
    "FTPSUploader",
    "ImageSignatureValidator",
    "TLSTrustPolicy",
    "UploadOutcome",
    "UploadStatus",
]
