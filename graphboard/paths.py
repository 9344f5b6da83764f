"""
Path utilities for GraphBoard.

Handles path resolution for both development mode and frozen (PyInstaller) executables.
- In development: paths are relative to the project root
- When frozen: paths are relative to the executable location

The config file and the graph cache live next to the executable, not bundled inside.
"""

import sys
from pathlib import Path


def get_app_dir() -> Path:
    """
    Get the application directory.

    - In development: the project root (parent of graphboard/)
    - When frozen: the directory containing the executable
    """
    if getattr(sys, 'frozen', False):
        return Path(sys.executable).parent
    return Path(__file__).parent.parent


def get_data_dir() -> Path:
    """Get the data directory (data/) holding the local graph cache."""
    return get_app_dir() / "data"


def get_config_path() -> Path:
    """Get the path to the config file (editor preferences)."""
    return get_app_dir() / "config.json"


def get_cache_path() -> Path:
    """Get the path of the cached graph restored on the next start."""
    return get_data_dir() / "graph-cached.json"


def ensure_data_dir() -> Path:
    """
    Ensure the data directory exists, creating it if necessary.
    Returns the path to the data directory.
    """
    data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir
