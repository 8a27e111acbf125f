import importlib
from contextlib import contextmanager
from typing import Any, Dict


class MockNeedle:
    """
    Replaces the template lookup used by the message bus with a fixed map.
    """

    def __init__(self, templates: Dict[str, str]):
        self._templates = templates

    def _mock_get(self, key: Any, lang: Any = None) -> str:
        key_str = str(key)
        return self._templates.get(key_str, key_str)

    @contextmanager
    def patch(self, monkeypatch: Any):
        # The bus resolves templates through this exact object
        # The package re-exports the `bus` instance, which shadows the
        # submodule name, so resolve the module explicitly
        bus_module = importlib.import_module("codebridge.common.messaging.bus")
        monkeypatch.setattr(bus_module.needle, "get", self._mock_get)
        yield
