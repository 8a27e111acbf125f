from .models import (
    CodeElement,
    ElementKind,
    Parameter,
    ParseDiagnostic,
    ParseResult,
    hash_code,
    utc_timestamp,
)
from .protocols import ContentIndexProtocol, LanguageExtractor

__all__ = [
    "CodeElement",
    "ElementKind",
    "Parameter",
    "ParseDiagnostic",
    "ParseResult",
    "hash_code",
    "utc_timestamp",
    "ContentIndexProtocol",
    "LanguageExtractor",
]
