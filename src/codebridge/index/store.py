import logging
import os
import threading
from pathlib import Path
from typing import Callable, Dict, Iterable, Iterator, List, Set, Union

from codebridge.spec import CodeElement, ElementKind

from .cache import HashCache
from .codec import decode_line, encode_line
from .exceptions import IndexNotInitializedError
from .rag import RagIndex, build_rag_index
from .types import IndexStats

log = logging.getLogger(__name__)

Predicate = Callable[[CodeElement], bool]


class ContentIndex:
    """
    Append-only JSON Lines store of CodeElements, keyed by content hash.

    Writers (init, append, exists, clear, rebuild) serialise on one
    re-entrant lock per instance. Readers open the store directly and may
    miss records appended after they started. Only one process may write
    to a given store at a time.
    """

    def __init__(self, index_path: Union[str, Path], deduplication: bool = True):
        self.index_path = Path(index_path)
        self.deduplication = deduplication
        self._cache = HashCache()
        self._lock = threading.RLock()
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def init(self) -> None:
        with self._lock:
            self.index_path.parent.mkdir(parents=True, exist_ok=True)
            if self.deduplication:
                self._cache.load(e.content_hash for e in self._iter_records())
                log.debug(f"Loaded {len(self._cache)} hashes from {self.index_path}")
            self._initialized = True

    def append(self, elements: Iterable[CodeElement]) -> int:
        with self._lock:
            if not self._initialized:
                raise IndexNotInitializedError(str(self.index_path))

            batch_hashes: Set[str] = set()
            lines: List[str] = []
            for element in elements:
                content_hash = element.content_hash
                if self.deduplication and (
                    content_hash in self._cache or content_hash in batch_hashes
                ):
                    continue
                batch_hashes.add(content_hash)
                lines.append(encode_line(element))

            if not lines:
                return 0

            # A crash may leave a partial final record; start on a fresh line
            needs_newline = self._has_unterminated_tail()
            with self.index_path.open("a", encoding="utf-8", newline="\n") as f:
                if needs_newline:
                    f.write("\n")
                f.writelines(lines)

            self._cache.add_all(batch_hashes)
            return len(lines)

    def _has_unterminated_tail(self) -> bool:
        try:
            with self.index_path.open("rb") as f:
                f.seek(0, os.SEEK_END)
                if f.tell() == 0:
                    return False
                f.seek(-1, os.SEEK_END)
                return f.read(1) != b"\n"
        except FileNotFoundError:
            return False

    # --- Reads (lock-free) ---

    def _iter_records(self) -> Iterator[CodeElement]:
        try:
            f = self.index_path.open("r", encoding="utf-8", errors="replace")
        except FileNotFoundError:
            return
        with f:
            for line in f:
                element = decode_line(line)
                if element is not None:
                    yield element

    def read_all(self) -> List[CodeElement]:
        return list(self._iter_records())

    def search(self, predicate: Predicate) -> List[CodeElement]:
        return [e for e in self._iter_records() if predicate(e)]

    def find_by_name(self, name: str) -> List[CodeElement]:
        return self.search(lambda e: e.name == name)

    def find_by_kind(self, kind: Union[ElementKind, str]) -> List[CodeElement]:
        wanted = ElementKind(kind)
        return self.search(lambda e: e.kind is wanted)

    def find_by_file(self, file: str) -> List[CodeElement]:
        return self.search(lambda e: e.file == file)

    def search_text(self, query: str) -> List[CodeElement]:
        """Case-insensitive substring match against name or body."""
        needle = query.lower()
        return self.search(
            lambda e: needle in e.name.lower() or needle in e.body.lower()
        )

    def stats(self) -> IndexStats:
        stats = IndexStats()
        for element in self._iter_records():
            stats.total_elements += 1
            kind = element.kind.value
            stats.by_kind[kind] = stats.by_kind.get(kind, 0) + 1
            stats.by_language[element.language] = (
                stats.by_language.get(element.language, 0) + 1
            )
            stats.by_file[element.file] = stats.by_file.get(element.file, 0) + 1
            stats.total_body_bytes += len(element.body.encode("utf-8"))
        return stats

    def rag_index(self) -> RagIndex:
        return build_rag_index(self._iter_records())

    # --- Membership & maintenance ---

    def exists(self, content_hash: str) -> bool:
        with self._lock:
            return content_hash in self._cache

    def clear(self) -> None:
        with self._lock:
            self._cache.clear()
            self.index_path.unlink(missing_ok=True)
            self._initialized = False

    def rebuild(self) -> int:
        """
        Collapses the store to one record per content hash. The first record
        in store order wins; survivors keep their relative order.
        """
        with self._lock:
            unique: Dict[str, CodeElement] = {}
            for element in self._iter_records():
                unique.setdefault(element.content_hash, element)

            self.clear()
            self.init()
            return self.append(unique.values())
