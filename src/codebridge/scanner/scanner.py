import fnmatch
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import pathspec

log = logging.getLogger(__name__)

DEFAULT_INCLUDE = ["*.py", "*.pyi"]
DEFAULT_EXCLUDE = [
    "node_modules",
    ".git",
    "dist",
    "build",
    ".code-bridge",
    "coverage",
    "__pycache__",
    ".venv",
    "venv",
    ".tox",
    ".mypy_cache",
    ".pytest_cache",
    "*.egg-info",
]


@dataclass
class ScannedFile:
    path: Path
    relative_path: str  # POSIX separators, relative to the scan root
    extension: str
    size: int
    modified_at: float


@dataclass
class ScanStats:
    total_files: int = 0
    by_extension: Dict[str, int] = field(default_factory=dict)
    total_size: int = 0


class WorkspaceScanner:
    def __init__(
        self,
        root_path: Path,
        include_patterns: Optional[Sequence[str]] = None,
        exclude_patterns: Optional[Sequence[str]] = None,
        follow_symlinks: bool = False,
    ):
        self.root_path = Path(root_path)
        self.include_patterns = list(
            DEFAULT_INCLUDE if include_patterns is None else include_patterns
        )
        self.exclude_patterns = list(
            DEFAULT_EXCLUDE if exclude_patterns is None else exclude_patterns
        )
        self.follow_symlinks = follow_symlinks
        self._gitignore: Optional[pathspec.PathSpec] = None

    def load_gitignore(self) -> None:
        gitignore_path = self.root_path / ".gitignore"
        if not gitignore_path.is_file():
            return
        with open(gitignore_path, encoding="utf-8") as f:
            self._gitignore = pathspec.PathSpec.from_lines("gitwildmatch", f)

    def _is_excluded(self, rel_path: str, is_dir: bool) -> bool:
        for pattern in self.exclude_patterns:
            if fnmatch.fnmatch(rel_path, pattern):
                return True
            if any(fnmatch.fnmatch(part, pattern) for part in rel_path.split("/")):
                return True

        if self._gitignore is not None:
            candidate = f"{rel_path}/" if is_dir else rel_path
            if self._gitignore.match_file(candidate):
                return True
        return False

    def _is_included(self, filename: str) -> bool:
        return any(fnmatch.fnmatch(filename, p) for p in self.include_patterns)

    def scan(self) -> List[ScannedFile]:
        files: List[ScannedFile] = []

        for root, dirs, filenames in os.walk(self.root_path):
            root_path = Path(root)
            rel_root = root_path.relative_to(self.root_path).as_posix()
            prefix = "" if rel_root == "." else f"{rel_root}/"

            # Prune in place; a directory symlink is never descended into
            dirs[:] = sorted(
                d
                for d in dirs
                if not (root_path / d).is_symlink()
                and not self._is_excluded(prefix + d, is_dir=True)
            )

            for filename in sorted(filenames):
                rel_path = prefix + filename
                abs_path = root_path / filename

                if self._is_excluded(rel_path, is_dir=False):
                    continue
                if abs_path.is_symlink():
                    if not self.follow_symlinks or not abs_path.is_file():
                        continue
                if not self._is_included(filename):
                    continue

                try:
                    file_stat = abs_path.stat()
                except OSError as e:
                    log.warning(f"Could not stat file {rel_path}: {e}")
                    continue

                files.append(
                    ScannedFile(
                        path=abs_path,
                        relative_path=rel_path,
                        extension=abs_path.suffix,
                        size=file_stat.st_size,
                        modified_at=file_stat.st_mtime,
                    )
                )

        return files

    def get_stats(self, files: Optional[List[ScannedFile]] = None) -> ScanStats:
        if files is None:
            files = self.scan()
        stats = ScanStats()
        for scanned in files:
            stats.total_files += 1
            stats.by_extension[scanned.extension] = (
                stats.by_extension.get(scanned.extension, 0) + 1
            )
            stats.total_size += scanned.size
        return stats
