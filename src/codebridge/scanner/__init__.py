from .scanner import (
    DEFAULT_EXCLUDE,
    DEFAULT_INCLUDE,
    ScannedFile,
    ScanStats,
    WorkspaceScanner,
)

__all__ = [
    "DEFAULT_EXCLUDE",
    "DEFAULT_INCLUDE",
    "ScannedFile",
    "ScanStats",
    "WorkspaceScanner",
]
