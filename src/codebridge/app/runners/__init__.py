from .index import IndexRunner
from .init import InitRunner
from .query import QueryRunner
from .rebuild import RebuildRunner

__all__ = ["IndexRunner", "InitRunner", "QueryRunner", "RebuildRunner"]
