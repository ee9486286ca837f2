"""Configuration module for Img2FTPS.

This module handles uploader settings and credentials:
- SettingsManager: JSON-based settings persistence
- CredentialManager: Secure credential storage via keyring
- Paths: Application data directories
- UploaderSettings: Settings dataclass
"""
