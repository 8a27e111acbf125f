from dataclasses import dataclass


@dataclass
class IndexReport:
    files_scanned: int = 0
    files_processed: int = 0
    files_skipped: int = 0
    files_with_errors: int = 0
    elements_found: int = 0
    elements_added: int = 0
