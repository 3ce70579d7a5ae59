"""Source directory scanning."""

from .discovery import LEGACY_ORGANIZED_DIRNAME, DirectoryScanner
from .models import HIDDEN_PREFIXES, SYSTEM_FILES, FileEntry, ScanResult

__all__ = [
    "DirectoryScanner",
    "FileEntry",
    "ScanResult",
    "SYSTEM_FILES",
    "HIDDEN_PREFIXES",
    "LEGACY_ORGANIZED_DIRNAME",
]
