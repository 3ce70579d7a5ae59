"""Well-known locations used by deskclean."""

from __future__ import annotations

import sys
from pathlib import Path

APP_DIRNAME = "DesktopCleaner"
MANIFEST_FILENAME = "last_clean.json"
LOG_FILENAME = "deskclean.log"


def desktop_dir(home: Path | None = None) -> Path:
    return (home or Path.home()) / "Desktop"


def app_support_dir(home: Path | None = None) -> Path:
    """Return the per-user application support directory for deskclean.

    macOS uses ``~/Library/Application Support``; other platforms use
    ``~/.local/share``.
    """
    base_home = home or Path.home()
    if sys.platform == "darwin":
        root = base_home / "Library" / "Application Support"
    else:
        root = base_home / ".local" / "share"
    return root / APP_DIRNAME


def default_manifest_path(home: Path | None = None) -> Path:
    return app_support_dir(home) / MANIFEST_FILENAME


def default_log_path(home: Path | None = None) -> Path:
    return app_support_dir(home) / LOG_FILENAME
