from .pointer import L, SemanticPointer
from .runtime import LANG_ENV_VAR, Needle, needle
from .loader import Loader
from .interfaces import FileHandler

__all__ = [
    "L",
    "SemanticPointer",
    "needle",
    "Needle",
    "Loader",
    "FileHandler",
    "LANG_ENV_VAR",
]
