"""FTPS transport client for Img2FTPS.

Provides ConnectionState and TLSTrustPolicy enums, FTPSConnectionConfig
dataclass, FTPResponse, and the FTPSClient wrapper around ftplib.FTP_TLS.
"""

import io
import logging
import socket
import ssl
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from ftplib import FTP, FTP_TLS, error_perm, error_temp
from typing import Callable, Iterator, List, Optional

from img2ftps.ftp.exceptions import (
    FTPSAuthenticationError,
    FTPSConnectionError,
    FTPSNotConnectedError,
    FTPSPathError,
    FTPSTimeoutError,
    FTPSUploadError,
)
from img2ftps.utils.validators import validate_host, validate_port, validate_timeout

logger = logging.getLogger("img2ftps.client")

# FTP reply codes the upload pipeline inspects
CLOSING_DATA = 226
PATHNAME_CREATED = 257


class ConnectionState(Enum):
    """FTPS connection state."""
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERROR = "error"


class TLSTrustPolicy(Enum):
    """How the server certificate is trusted."""
    ACCEPT_ALL = "accept_all"
    VERIFY = "verify"


def build_ssl_context(policy: TLSTrustPolicy) -> ssl.SSLContext:
    """
    Create an SSL context for a trust policy.

    ACCEPT_ALL trusts any server certificate. The context is scoped to
    the client that receives it; nothing process-wide is changed.

    Args:
        policy: Certificate trust policy

    Returns:
        Configured SSLContext
    """
    context = ssl.create_default_context()
    if policy == TLSTrustPolicy.ACCEPT_ALL:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


@dataclass(frozen=True)
class FTPResponse:
    """Final reply of an FTP command."""
    code: int
    text: str

    @classmethod
    def parse(cls, reply: str) -> "FTPResponse":
        """Build a response from a raw reply line like '226 Transfer complete'."""
        reply = (reply or "").strip()
        prefix = reply[:3]
        code = int(prefix) if prefix.isdigit() else 0
        return cls(code=code, text=reply)

    @property
    def is_pathname_created(self) -> bool:
        return self.code == PATHNAME_CREATED

    @property
    def is_closing_data(self) -> bool:
        return self.code == CLOSING_DATA


@dataclass
class FTPSConnectionConfig:
    """FTPS connection configuration."""
    host: str
    port: int = 21
    username: str = "anonymous"
    passive_mode: bool = True
    binary: bool = True
    keep_alive: bool = True
    use_tls: bool = True
    timeout: int = 30
    tls_policy: TLSTrustPolicy = TLSTrustPolicy.ACCEPT_ALL
    ssl_context: Optional[ssl.SSLContext] = None

    def __post_init__(self):
        """Validate configuration after initialization."""
        if not self.host:
            raise ValueError("Host is required")
        is_valid, error = validate_host(self.host)
        if not is_valid:
            raise ValueError(error)
        is_valid, error = validate_port(self.port)
        if not is_valid:
            raise ValueError(error)
        is_valid, error = validate_timeout(self.timeout)
        if not is_valid:
            raise ValueError(error)

    def make_ssl_context(self) -> ssl.SSLContext:
        """SSL context for this configuration (explicit context wins)."""
        if self.ssl_context is not None:
            return self.ssl_context
        return build_ssl_context(self.tls_policy)


class FTPSClient:
    """
    One FTPS control connection with the verbs the uploader needs.

    ftplib connections are not thread-safe, so each worker uses its own
    client. With keep_alive disabled the control connection is closed
    after every verb and reopened by the next one.
    """

    # Block size for STOR transfers (8KB)
    BLOCK_SIZE = 8192

    def __init__(self, config: FTPSConnectionConfig, password: str = ""):
        """
        Initialize the client.

        Args:
            config: Connection configuration
            password: FTPS password
        """
        self._config = config
        self._password = password
        self._ftp: Optional[FTP] = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at: Optional[datetime] = None
        self._last_activity: Optional[datetime] = None
        self._error_message: Optional[str] = None

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """True if currently connected."""
        return self._state == ConnectionState.CONNECTED

    @property
    def config(self) -> FTPSConnectionConfig:
        """Connection configuration."""
        return self._config

    @property
    def connected_at(self) -> Optional[datetime]:
        """Timestamp when connection was established."""
        return self._connected_at

    @property
    def last_activity(self) -> Optional[datetime]:
        """Timestamp of last successful operation."""
        return self._last_activity

    @property
    def error_message(self) -> Optional[str]:
        """Last error message if state is ERROR."""
        return self._error_message

    @property
    def ftp(self) -> FTP:
        """
        Get the underlying ftplib object.

        Raises:
            FTPSNotConnectedError: If not connected
        """
        if not self.is_connected or self._ftp is None:
            raise FTPSNotConnectedError("FTPS access")
        return self._ftp

    def _create_ftp(self) -> FTP:
        if self._config.use_tls:
            return FTP_TLS(context=self._config.make_ssl_context())
        return FTP()

    def connect(self) -> None:
        """
        Establish the control connection and log in.

        Raises:
            FTPSConnectionError: If connection fails
            FTPSAuthenticationError: If login fails
            FTPSTimeoutError: If connection times out
        """
        config = self._config
        self._state = ConnectionState.CONNECTING
        self._error_message = None

        try:
            self._ftp = self._create_ftp()
            self._ftp.set_debuglevel(0)

            try:
                self._ftp.connect(
                    host=config.host,
                    port=config.port,
                    timeout=config.timeout
                )
            except socket.timeout:
                raise FTPSTimeoutError("Connection", config.timeout)
            except (socket.error, OSError) as e:
                raise FTPSConnectionError(config.host, config.port, e)

            # FTP_TLS.login() negotiates AUTH TLS before sending credentials
            try:
                self._ftp.login(user=config.username, passwd=self._password)
            except error_perm as e:
                raise FTPSAuthenticationError(config.username, e)

            if config.use_tls:
                self._ftp.prot_p()

            self._ftp.set_pasv(config.passive_mode)

            self._state = ConnectionState.CONNECTED
            self._connected_at = datetime.now()
            self._last_activity = self._connected_at
            logger.debug(f"Connected to {config.host}:{config.port}")

        except (FTPSConnectionError, FTPSAuthenticationError, FTPSTimeoutError) as e:
            self._state = ConnectionState.ERROR
            self._error_message = str(e)
            self._discard()
            raise
        except Exception as e:
            self._state = ConnectionState.ERROR
            self._error_message = str(e)
            self._discard()
            raise FTPSConnectionError(config.host, config.port, e)

    def close(self) -> None:
        """Close the control connection gracefully."""
        if self._ftp:
            try:
                self._ftp.quit()
            except Exception:
                # Best effort close
                try:
                    self._ftp.close()
                except Exception:
                    pass

        self._ftp = None
        self._state = ConnectionState.DISCONNECTED
        self._connected_at = None

    def _discard(self) -> None:
        """Drop a half-open connection after a failed connect, keeping ERROR state."""
        if self._ftp:
            try:
                self._ftp.close()
            except Exception:
                pass
        self._ftp = None

    def __enter__(self) -> "FTPSClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def _update_activity(self) -> None:
        """Update last activity timestamp."""
        self._last_activity = datetime.now()

    @contextmanager
    def _session(self) -> Iterator[FTP]:
        """Yield a logged-in ftplib object, closing it afterwards unless keep-alive."""
        if not self.is_connected:
            self.connect()
        try:
            yield self.ftp
            self._update_activity()
        finally:
            if not self._config.keep_alive:
                self.close()

    def list_directory(self, path: str) -> List[str]:
        """
        List directory entries (NLST).

        Args:
            path: Remote directory path

        Returns:
            Entry names as returned by the server

        Raises:
            FTPSPathError: If the listing is refused
        """
        with self._session() as ftp:
            try:
                return ftp.nlst(path)
            except (error_perm, error_temp) as e:
                # Empty directories get "550 No files found" or, on ProFTPD, "450 No files found"
                if str(e)[:3] in ("450", "550") and "no files" in str(e).lower():
                    return []
                raise FTPSPathError(path, "list", e)

    def make_directory(self, path: str) -> FTPResponse:
        """
        Create a remote directory (MKD).

        Args:
            path: Remote directory path

        Returns:
            Server response; code 257 means the pathname was created

        Raises:
            FTPSPathError: If the server refuses the request
        """
        with self._session() as ftp:
            try:
                reply = ftp.sendcmd(f"MKD {path}")
            except error_perm as e:
                raise FTPSPathError(path, "create", e)
        return FTPResponse.parse(reply)

    def upload_bytes(
        self,
        remote_path: str,
        content: bytes,
        callback: Optional[Callable[[bytes], None]] = None
    ) -> FTPResponse:
        """
        Write a whole buffer to a remote file (STOR).

        Args:
            remote_path: Full remote file path
            content: Bytes to store
            callback: Optional per-block callback

        Returns:
            Final server response; code 226 means the data connection
            closed after a complete transfer

        Raises:
            FTPSUploadError: If the transfer or the reply fails
        """
        file_name = remote_path.rsplit("/", 1)[-1]
        with self._session() as ftp:
            try:
                stream = io.BytesIO(content)
                if self._config.binary:
                    reply = ftp.storbinary(
                        f"STOR {remote_path}",
                        stream,
                        blocksize=self.BLOCK_SIZE,
                        callback=callback
                    )
                else:
                    reply = ftp.storlines(f"STOR {remote_path}", stream, callback=callback)
            except Exception as e:
                raise FTPSUploadError(file_name, remote_path, e)
        return FTPResponse.parse(reply)
