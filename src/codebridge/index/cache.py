from typing import Iterable, Set


class HashCache:
    """
    In-memory mirror of the content hashes present in one index store.

    Owned by exactly one ContentIndex: filled wholesale on init, extended
    after each successful append, emptied on clear.
    """

    def __init__(self):
        self._hashes: Set[str] = set()

    def load(self, hashes: Iterable[str]) -> None:
        self._hashes = set(hashes)

    def add_all(self, hashes: Iterable[str]) -> None:
        self._hashes.update(hashes)

    def clear(self) -> None:
        self._hashes = set()

    def __contains__(self, content_hash: object) -> bool:
        return content_hash in self._hashes

    def __len__(self) -> int:
        return len(self._hashes)
