from dataclasses import dataclass, field
from typing import Dict


@dataclass
class IndexStats:
    total_elements: int = 0
    by_kind: Dict[str, int] = field(default_factory=dict)
    by_language: Dict[str, int] = field(default_factory=dict)
    by_file: Dict[str, int] = field(default_factory=dict)
    total_body_bytes: int = 0
