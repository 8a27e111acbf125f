from codebridge.common import bus
from codebridge.index import ContentIndex
from codebridge.needle import L


class RebuildRunner:
    def __init__(self, index: ContentIndex):
        self.index = index

    def run_rebuild(self) -> int:
        before = self.index.stats().total_elements
        bus.info(L.index.rebuild.start, before=before)
        after = self.index.rebuild()
        bus.success(L.index.rebuild.complete, after=after, removed=before - after)
        return after
