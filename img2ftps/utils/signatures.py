"""Image signature validation for Img2FTPS.

Classifies payloads as GIF, PNG or JPEG by their leading magic bytes
before they are allowed onto the upload queue.
"""

from typing import Dict, Optional

# Default maximum accepted payload size in bytes
DEFAULT_MAX_FILE_SIZE = 5_000_000

# Number of leading bytes every payload must have to be inspected
HEADER_SIZE = 8

# Recognized formats, keyed by name
SIGNATURES: Dict[str, bytes] = {
    "gif87a": bytes([0x47, 0x49, 0x46, 0x38, 0x37, 0x61]),
    "gif89a": bytes([0x47, 0x49, 0x46, 0x38, 0x39, 0x61]),
    "png": bytes([0x89, 0x50, 0x4E, 0x47, 0x0D, 0x0A, 0x1A, 0x0A]),
    "jpeg": bytes([0xFF, 0xD8, 0xFF]),
}


def starts_with(content: bytes, signature: bytes) -> bool:
    """
    True if content begins with every byte of signature.

    A buffer shorter than the signature never matches.
    """
    if len(content) < len(signature):
        return False
    return content[:len(signature)] == signature


class ImageSignatureValidator:
    """Accepts payloads that look like images and fit the size limit."""

    def __init__(self, max_size: int = DEFAULT_MAX_FILE_SIZE):
        """
        Initialize the validator.

        Args:
            max_size: Largest accepted payload in bytes

        Raises:
            ValueError: If max_size is not positive
        """
        if max_size < 1:
            raise ValueError(f"Max file size must be at least 1, got {max_size}")
        self._max_size = max_size

    @property
    def max_size(self) -> int:
        """Largest accepted payload in bytes."""
        return self._max_size

    def detect_format(self, content: bytes) -> Optional[str]:
        """
        Identify the image format of a payload.

        Args:
            content: Payload bytes

        Returns:
            Format name ("gif87a", "gif89a", "png", "jpeg") or None when
            the payload is too large, too short, or unrecognized
        """
        if len(content) > self._max_size or len(content) < HEADER_SIZE:
            return None

        header = bytes(content[:HEADER_SIZE])
        for name, signature in SIGNATURES.items():
            if starts_with(header, signature):
                return name
        return None

    def is_valid_image(self, content: bytes) -> bool:
        """True if the payload is an accepted image."""
        return self.detect_format(content) is not None

    def rejection_reason(self, content: bytes) -> Optional[str]:
        """
        Explain why a payload would be rejected.

        Returns:
            Human-readable reason, or None if the payload is accepted
        """
        if len(content) > self._max_size:
            return f"too large ({len(content)} > {self._max_size} bytes)"
        if len(content) < HEADER_SIZE:
            return f"too short ({len(content)} < {HEADER_SIZE} bytes)"
        if self.detect_format(content) is None:
            return "unrecognized signature"
        return None
