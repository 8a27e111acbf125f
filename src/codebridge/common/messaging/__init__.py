from .bus import MessageBus, bus
from .protocols import Renderer

__all__ = ["MessageBus", "bus", "Renderer"]
