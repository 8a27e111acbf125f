from pathlib import Path
from typing import Any, Dict, Protocol


class FileHandler(Protocol):
    def match(self, path: Path) -> bool:
        """Returns True if this handler can process the given file."""
        ...

    def load(self, path: Path) -> Dict[str, Any]:
        """Parses the file into a flat {key: template} mapping."""
        ...
