from .core import CodeBridgeApp
from .types import IndexReport

__all__ = ["CodeBridgeApp", "IndexReport"]
