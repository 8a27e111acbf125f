from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Union

# The real singleton is patched in place
import codebridge.common
from codebridge.common.messaging.protocols import Renderer
from codebridge.needle import SemanticPointer


class SpyRenderer(Renderer):
    def __init__(self):
        self.messages: List[Dict[str, Any]] = []

    def render(self, message: str, level: str) -> None:
        pass

    def record(self, level: str, msg_id: SemanticPointer, params: Dict[str, Any]):
        self.messages.append({"level": level, "id": str(msg_id), "params": params})


class SpyBus:
    """
    Spies on the global codebridge.common.bus singleton.

    Modules hold their own reference to the bus instance (`from
    codebridge.common import bus`), so the instance is patched in place
    rather than replaced.
    """

    def __init__(self):
        self._spy_renderer = SpyRenderer()

    @contextmanager
    def patch(self, monkeypatch: Any):
        real_bus = codebridge.common.bus

        def intercept_render(
            level: str, msg_id: Union[str, SemanticPointer], **kwargs: Any
        ) -> None:
            # Record the intent only; nothing reaches stdout
            self._spy_renderer.record(level, msg_id, kwargs)

        monkeypatch.setattr(real_bus, "_render", intercept_render)
        monkeypatch.setattr(real_bus, "_renderer", self._spy_renderer)

        yield self

    def get_messages(self) -> List[Dict[str, Any]]:
        return self._spy_renderer.messages

    def ids(self, level: Optional[str] = None) -> List[str]:
        return [
            m["id"]
            for m in self.get_messages()
            if level is None or m["level"] == level
        ]

    def assert_id_called(self, msg_id: SemanticPointer, level: Optional[str] = None):
        key = str(msg_id)
        captured = self.get_messages()
        for msg in captured:
            if msg["id"] == key and (level is None or msg["level"] == level):
                return
        ids_seen = [m["id"] for m in captured]
        raise AssertionError(
            f"Message with ID '{key}' was not sent.\nCaptured IDs: {ids_seen}"
        )

    def assert_id_not_called(self, msg_id: SemanticPointer):
        key = str(msg_id)
        if key in self.ids():
            raise AssertionError(f"Message with ID '{key}' was unexpectedly sent.")

    def find(self, msg_id: SemanticPointer) -> Dict[str, Any]:
        key = str(msg_id)
        for msg in self.get_messages():
            if msg["id"] == key:
                return msg
        raise AssertionError(f"Message with ID '{key}' was not sent.")
