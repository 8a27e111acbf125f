import pytest

from codebridge.app.formatters import (
    format_by_file,
    format_by_kind,
    format_compact,
    format_rag,
    format_search_result,
    format_stats,
    top_files,
)
from codebridge.index import IndexStats, build_rag_index
from codebridge.spec import ElementKind, Parameter
from codebridge.test_utils import make_element


@pytest.fixture
def rag():
    return build_rag_index(
        [
            make_element(
                "add",
                file="calc.py",
                line=3,
                params=[Parameter("a", "int"), Parameter("b", "int")],
                returns="int",
                docstring="Adds two numbers.",
            ),
            make_element(
                "Point",
                body="class Point: ...",
                kind=ElementKind.STRUCT,
                file="geo.py",
                line=1,
                fields=["x", "y"],
            ),
        ]
    )


def test_compact_lists_signatures_by_kind(rag):
    assert format_compact(rag) == (
        "# Available Code Elements (2 total)\n"
        "\n"
        "## function\n"
        "\n"
        "- `add(a: int, b: int) -> int` - calc.py:3\n"
        "\n"
        "## struct\n"
        "\n"
        "- `Point {2 fields}` - geo.py:1\n"
    )


def test_by_file_includes_location_signature_and_doc(rag):
    text = format_by_file(rag)

    assert text.startswith(rag.summary)
    assert "## File: calc.py (1 elements)" in text
    assert "### function add" in text
    assert "**Location:** calc.py:3" in text
    assert "**Signature:** `add(a: int, b: int) -> int`" in text
    assert "**Doc:** Adds two numbers." in text
    assert text.index("calc.py (1") < text.index("geo.py (1")


def test_by_kind_groups_headings(rag):
    text = format_by_kind(rag)

    assert "## function (1)" in text
    assert "## struct (1)" in text
    assert "### Point" in text
    assert "**Doc:**" in text.split("## struct")[0]
    assert "**Doc:**" not in text.split("## struct")[1]


def test_format_rag_dispatch(rag):
    assert format_rag(rag, "compact") == format_compact(rag)
    assert format_rag(rag, "file") == format_by_file(rag)
    assert format_rag(rag, "type") == format_by_kind(rag)
    with pytest.raises(ValueError):
        format_rag(rag, "xml")


def test_search_result_layout():
    element = make_element(
        "connect",
        file="net.py",
        line=12,
        params=[Parameter("host", "str"), Parameter("timeout")],
        returns="Socket",
    )

    assert format_search_result(element) == (
        "  function connect\n"
        "    net.py:12\n"
        "    Parameters: host: str, timeout\n"
        "    Returns: Socket"
    )
    assert format_search_result(make_element("bare", file="a.py")) == (
        "  function bare\n    a.py:1"
    )


def test_top_files_orders_by_count_then_path():
    stats = IndexStats(by_file={f"f{i:02}.py": i % 4 for i in range(12)})

    ranked = top_files(stats)

    assert len(ranked) == 10
    assert ranked[:3] == [("f03.py", 3), ("f07.py", 3), ("f11.py", 3)]
    assert top_files(stats, limit=1) == [("f03.py", 3)]


def test_format_stats():
    stats = IndexStats(
        total_elements=3,
        by_kind={"function": 2, "class": 1},
        by_language={"python": 3},
        by_file={"a.py": 2, "b.py": 1},
        total_body_bytes=2048,
    )

    assert format_stats(stats) == (
        "Code-bridge Statistics\n"
        "\n"
        "Total Elements: 3\n"
        "Total Size: 2.00 KB\n"
        "\n"
        "By Type:\n"
        "  class: 1\n"
        "  function: 2\n"
        "\n"
        "By Language:\n"
        "  python: 3\n"
        "\n"
        "Top Files:\n"
        "  a.py: 2 elements\n"
        "  b.py: 1 elements"
    )
