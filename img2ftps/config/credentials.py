"""Secure credential storage for Img2FTPS.

Uses the system keyring (Windows Credential Manager, macOS Keychain,
Linux Secret Service) to store FTPS passwords.
"""

from typing import Optional

import keyring
from keyring.errors import KeyringError


class CredentialManager:
    """Secure credential storage using system keyring."""

    SERVICE_NAME = "img2ftps"

    def _make_key(self, host: str, username: str) -> str:
        """Unique keyring entry name for a host/user pair."""
        return f"{host}:{username}"

    def save_password(self, host: str, username: str, password: str) -> bool:
        """
        Save FTPS password securely.

        Args:
            host: FTPS host
            username: FTPS username
            password: Password to save

        Returns:
            True if saved successfully, False otherwise
        """
        try:
            key = self._make_key(host, username)
            keyring.set_password(self.SERVICE_NAME, key, password)
            return True
        except KeyringError:
            return False

    def get_password(self, host: str, username: str) -> Optional[str]:
        """
        Retrieve saved password.

        Args:
            host: FTPS host
            username: FTPS username

        Returns:
            Password string or None if not found
        """
        try:
            key = self._make_key(host, username)
            return keyring.get_password(self.SERVICE_NAME, key)
        except KeyringError:
            return None

    def delete_password(self, host: str, username: str) -> bool:
        """
        Remove saved password.

        Returns:
            True if deleted successfully, False otherwise
        """
        try:
            key = self._make_key(host, username)
            keyring.delete_password(self.SERVICE_NAME, key)
            return True
        except KeyringError:
            return False

    def has_password(self, host: str, username: str) -> bool:
        """True if a password is saved for the host/user pair."""
        return self.get_password(host, username) is not None
