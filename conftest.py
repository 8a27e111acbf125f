import pytest

from codebridge.index import ContentIndex
from codebridge.lang.python import PythonExtractor
from codebridge.test_utils import SpyBus, WorkspaceFactory


@pytest.fixture
def workspace_factory(tmp_path, monkeypatch):
    # Clean workspace per test, used as the working directory
    factory = WorkspaceFactory(tmp_path)
    monkeypatch.chdir(tmp_path)
    return factory


@pytest.fixture
def index(tmp_path):
    content_index = ContentIndex(tmp_path / ".code-bridge" / "codebase.jsonl")
    content_index.init()
    return content_index


@pytest.fixture
def extractor():
    return PythonExtractor(clock=lambda: "2024-01-01T00:00:00.000Z")


@pytest.fixture
def spy_bus(monkeypatch):
    spy = SpyBus()
    with spy.patch(monkeypatch):
        yield spy
