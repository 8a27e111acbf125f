from .cache import HashCache
from .codec import decode_line, element_from_dict, element_to_dict, encode_line
from .exceptions import ContentIndexError, IndexNotInitializedError
from .rag import RagElement, RagIndex, build_rag_index, build_signature
from .store import ContentIndex
from .types import IndexStats

__all__ = [
    "ContentIndex",
    "HashCache",
    "IndexStats",
    "ContentIndexError",
    "IndexNotInitializedError",
    "RagElement",
    "RagIndex",
    "build_rag_index",
    "build_signature",
    "decode_line",
    "encode_line",
    "element_from_dict",
    "element_to_dict",
]
