from pathlib import Path
from typing import Dict, List, Optional

from codebridge.config import CodeBridgeConfig, ConfigError, load_config_from_path
from codebridge.index import ContentIndex
from codebridge.lang.python import PythonExtractor
from codebridge.needle import needle
from codebridge.spec import CodeElement, ElementKind, LanguageExtractor

from .runners import IndexRunner, InitRunner, QueryRunner, RebuildRunner
from .types import IndexReport


def default_extractors() -> Dict[str, LanguageExtractor]:
    return {PythonExtractor.language: PythonExtractor()}


class CodeBridgeApp:
    def __init__(
        self,
        root_path: Path,
        config: Optional[CodeBridgeConfig] = None,
        extractors: Optional[Dict[str, LanguageExtractor]] = None,
    ):
        self.root_path = root_path
        self.config = config or load_config_from_path(root_path)

        available = extractors if extractors is not None else default_extractors()
        unknown = [lang for lang in self.config.languages if lang not in available]
        if unknown:
            raise ConfigError(f"Unsupported language(s): {', '.join(unknown)}")
        self.extractors: List[LanguageExtractor] = [
            available[lang] for lang in self.config.languages
        ]

        # Project-level message overrides in .code-bridge/needle/<lang>/
        needle.add_root(root_path)

        self.index = ContentIndex(
            root_path / self.config.index_path,
            deduplication=self.config.deduplication,
        )

        self.init_runner = InitRunner(root_path, self.config)
        self.index_runner = IndexRunner(
            root_path, self.config, self.index, self.extractors
        )
        self.query_runner = QueryRunner(self.index)
        self.rebuild_runner = RebuildRunner(self.index)

    def run_init(self) -> bool:
        return self.init_runner.run_init()

    def run_index(self) -> IndexReport:
        return self.index_runner.run_build()

    def run_search(
        self,
        query: str,
        limit: int = 10,
        kind: Optional[ElementKind] = None,
        file: Optional[str] = None,
    ) -> List[CodeElement]:
        return self.query_runner.run_search(query, limit=limit, kind=kind, file=file)

    def run_stats(self) -> bool:
        return self.query_runner.run_stats()

    def run_rag(self, fmt: str = "compact") -> bool:
        return self.query_runner.run_rag(fmt)

    def run_rebuild(self) -> int:
        return self.rebuild_runner.run_rebuild()
