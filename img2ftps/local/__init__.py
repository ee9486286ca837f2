"""Local file operations module.

This module provides:
- FileItem: Named in-memory payload
- read_file / read_files: Load local files for upload
"""

from img2ftps.local.reader import FileItem, read_file, read_files

__all__ = ["FileItem", "read_file", "read_files"]
