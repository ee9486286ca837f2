"""FTPS operations module for Img2FTPS.

This module handles all FTPS-related functionality:
- FTPSClient: Control connection with list, make-directory and upload verbs
- FolderEnsurer: Destination folder check-then-create
- UploadDispatcher: Bounded concurrent uploads with per-file outcomes
- FTPSUploader: Public facade composing the above
- Exceptions: FTPS-specific error types
"""
