from .bus import SpyBus
from .needle import MockNeedle
from .workspace import WorkspaceFactory
from .helpers import make_element

__all__ = ["SpyBus", "MockNeedle", "WorkspaceFactory", "make_element"]
