import logging
import os
from pathlib import Path
from typing import Dict, List, Optional

from .handlers import JsonHandler
from .interfaces import FileHandler

log = logging.getLogger(__name__)


class Loader:
    def __init__(self, handlers: Optional[List[FileHandler]] = None):
        self.handlers = handlers or [JsonHandler()]

    def _load_and_merge_file(self, path: Path, registry: Dict[str, str]):
        for handler in self.handlers:
            if not handler.match(path):
                continue
            try:
                content = handler.load(path)
            except (OSError, ValueError) as e:
                log.warning(f"Skipping message file {path}: {e}")
                return
            for key, value in content.items():
                registry[key] = str(value)
            return

    def load_directory(self, root_path: Path) -> Dict[str, str]:
        registry: Dict[str, str] = {}

        if not root_path.is_dir():
            return registry

        for dirpath, _, filenames in os.walk(root_path):
            for filename in sorted(filenames):
                self._load_and_merge_file(Path(dirpath) / filename, registry)

        return registry
