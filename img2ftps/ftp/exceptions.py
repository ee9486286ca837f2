"""FTPS-specific exceptions for Img2FTPS.

Custom exception hierarchy for FTPS operations to provide
clear error handling and user-friendly messages.
"""


class FTPSError(Exception):
    """Base exception for all FTPS-related errors."""

    def __init__(self, message: str, original_error: Exception = None):
        super().__init__(message)
        self.message = message
        self.original_error = original_error

    def __str__(self) -> str:
        if self.original_error:
            return f"{self.message}: {self.original_error}"
        return self.message


class FTPSConnectionError(FTPSError):
    """Failed to establish FTPS connection."""

    def __init__(self, host: str, port: int, original_error: Exception = None):
        self.host = host
        self.port = port
        message = f"Failed to connect to {host}:{port}"
        super().__init__(message, original_error)


class FTPSAuthenticationError(FTPSError):
    """FTPS authentication (login) failed."""

    def __init__(self, username: str, original_error: Exception = None):
        self.username = username
        message = f"Authentication failed for user '{username}'"
        super().__init__(message, original_error)


class FTPSNotConnectedError(FTPSError):
    """Operation attempted without active FTPS connection."""

    def __init__(self, operation: str = "Operation"):
        message = f"{operation} requires an active FTPS connection"
        super().__init__(message)


class FTPSTimeoutError(FTPSError):
    """FTPS operation timed out."""

    def __init__(self, operation: str = "Operation", timeout: int = 30):
        self.timeout = timeout
        message = f"{operation} timed out after {timeout} seconds"
        super().__init__(message)


class FTPSUploadError(FTPSError):
    """Failed to upload a payload via FTPS."""

    def __init__(
        self,
        file_name: str,
        remote_path: str,
        original_error: Exception = None
    ):
        self.file_name = file_name
        self.remote_path = remote_path
        message = f"Failed to upload '{file_name}' to '{remote_path}'"
        super().__init__(message, original_error)


class FTPSPathError(FTPSError):
    """FTPS path operation failed (list, make directory)."""

    def __init__(self, path: str, operation: str, original_error: Exception = None):
        self.path = path
        self.operation = operation
        message = f"Failed to {operation} path '{path}'"
        super().__init__(message, original_error)


class FileReadError(FTPSError):
    """Local source file could not be read for upload."""

    def __init__(self, path: str, original_error: Exception = None):
        self.path = path
        message = f"Failed to read local file '{path}'"
        super().__init__(message, original_error)
