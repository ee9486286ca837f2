"""Application data paths for Img2FTPS.

Locates the per-user directories for settings and log files.
"""

import os
import sys
from pathlib import Path


# Application name for config directories
APP_NAME = "Img2FTPS"


def get_app_data_dir() -> Path:
    """
    Get the application data directory.

    Returns:
        Path to app data directory (created if not exists)

    Platform-specific locations:
        - Windows: %APPDATA%/Img2FTPS
        - Linux: ~/.config/Img2FTPS
        - macOS: ~/Library/Application Support/Img2FTPS
    """
    if sys.platform == "win32":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
    elif sys.platform == "darwin":
        base = Path.home() / "Library" / "Application Support"
    else:
        base = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))

    app_dir = base / APP_NAME
    app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


def get_settings_path() -> Path:
    """Path to settings.json."""
    return get_app_data_dir() / "settings.json"

