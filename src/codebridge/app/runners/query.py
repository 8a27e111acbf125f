from typing import List, Optional

import typer

from codebridge.common import bus
from codebridge.index import ContentIndex
from codebridge.needle import L
from codebridge.spec import CodeElement, ElementKind

from ..formatters import RAG_FORMATS, format_rag, format_search_result, format_stats


class QueryRunner:
    def __init__(self, index: ContentIndex):
        self.index = index

    def run_search(
        self,
        query: str,
        limit: int = 10,
        kind: Optional[ElementKind] = None,
        file: Optional[str] = None,
    ) -> List[CodeElement]:
        results = self.index.search_text(query)
        if kind is not None:
            results = [e for e in results if e.kind is kind]
        if file is not None:
            results = [e for e in results if e.file == file]

        if not results:
            bus.info(L.search.results.none, query=query)
            return []

        bus.success(L.search.results.found, count=len(results), query=query)
        shown = results[:limit] if limit > 0 else results
        for element in shown:
            typer.echo(format_search_result(element))
            typer.echo("")
        if len(shown) < len(results):
            bus.info(L.search.results.truncated, shown=len(shown), count=len(results))
        return results

    def run_stats(self) -> bool:
        stats = self.index.stats()
        if stats.total_elements == 0:
            bus.warning(L.index.stats.empty)
            return True
        typer.echo(format_stats(stats))
        return True

    def run_rag(self, fmt: str = "compact") -> bool:
        if fmt not in RAG_FORMATS:
            bus.error(L.error.rag.format, format=fmt, choices=", ".join(RAG_FORMATS))
            return False

        rag = self.index.rag_index()
        if rag.total_elements == 0:
            bus.warning(L.index.rag.empty)
            return True
        typer.echo(format_rag(rag, fmt))
        return True
