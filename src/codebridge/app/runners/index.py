import logging
from pathlib import Path
from typing import List, Optional

from codebridge.common import bus
from codebridge.config import CodeBridgeConfig
from codebridge.needle import L
from codebridge.scanner import WorkspaceScanner
from codebridge.spec import ContentIndexProtocol, LanguageExtractor

from ..types import IndexReport

log = logging.getLogger(__name__)

PROGRESS_EVERY = 10


class IndexRunner:
    def __init__(
        self,
        root_path: Path,
        config: CodeBridgeConfig,
        index: ContentIndexProtocol,
        extractors: List[LanguageExtractor],
    ):
        self.root_path = root_path
        self.config = config
        self.index = index
        self.extractors = extractors

    def _make_scanner(self) -> WorkspaceScanner:
        scanner = WorkspaceScanner(
            self.root_path,
            include_patterns=self.config.include,
            exclude_patterns=self.config.exclude,
            follow_symlinks=self.config.follow_symlinks,
        )
        if self.config.use_gitignore:
            scanner.load_gitignore()
        return scanner

    def _extractor_for(self, rel_path: str) -> Optional[LanguageExtractor]:
        for extractor in self.extractors:
            if extractor.supports_file(rel_path):
                return extractor
        return None

    def run_build(self) -> IndexReport:
        # I/O failures here are fatal for the whole run
        self.index.init()

        bus.info(L.index.run.start, root=self.root_path)
        files = self._make_scanner().scan()
        report = IndexReport(files_scanned=len(files))

        if not files:
            bus.warning(L.index.run.no_files)
            return report
        bus.debug(L.index.run.scanned, count=len(files))

        for position, scanned in enumerate(files, start=1):
            rel_path = scanned.relative_path
            extractor = self._extractor_for(rel_path)
            if extractor is None:
                bus.debug(L.index.file.unsupported, path=rel_path)
                report.files_skipped += 1
                continue

            try:
                content = scanned.path.read_bytes()
            except OSError as e:
                log.warning(f"Could not read file {rel_path}: {e}")
                bus.warning(L.index.file.unreadable, path=rel_path, error=e)
                report.files_skipped += 1
                continue

            result = extractor.extract(rel_path, content)
            if result.diagnostics:
                report.files_with_errors += 1
                for diagnostic in result.diagnostics:
                    log.debug(f"{rel_path}: {diagnostic}")
                bus.warning(
                    L.index.file.parse_errors,
                    path=rel_path,
                    count=len(result.diagnostics),
                    message=result.diagnostics[0],
                )

            report.elements_found += len(result.elements)
            report.elements_added += self.index.append(result.elements)
            report.files_processed += 1

            if position % PROGRESS_EVERY == 0:
                bus.info(L.index.run.progress, count=position, total=len(files))

        bus.success(
            L.index.run.complete,
            added=report.elements_added,
            files=report.files_processed,
        )
        return report
