from codebridge.index import build_rag_index, build_signature
from codebridge.spec import ElementKind, Parameter
from codebridge.test_utils import make_element


def test_function_signature_includes_types_defaults_and_returns():
    element = make_element(
        "connect",
        params=[
            Parameter("host", "str"),
            Parameter("port", "int", "8080", True),
            Parameter("retries", default="3", optional=True),
            Parameter("**options"),
        ],
        returns="Connection",
    )

    assert (
        build_signature(element)
        == "connect(host: str, port: int = 8080, retries=3, **options) -> Connection"
    )


def test_function_signature_without_params():
    assert build_signature(make_element("ping")) == "ping()"


def test_container_signatures_count_members():
    struct = make_element(
        "Point", body="class Point: ...", kind=ElementKind.STRUCT, fields=["x", "y"]
    )
    iface = make_element(
        "Reader", body="class Reader: ...", kind=ElementKind.INTERFACE, methods=["read"]
    )
    empty_struct = make_element(
        "Empty", body="class Empty: ...", kind=ElementKind.STRUCT
    )
    cls = make_element("Widget", body="class Widget: ...", kind=ElementKind.CLASS)

    assert build_signature(struct) == "Point {2 fields}"
    assert build_signature(iface) == "Reader {1 methods}"
    assert build_signature(empty_struct) == "Empty"
    assert build_signature(cls) == "Widget"


def test_grouping_is_sorted_and_stable():
    elements = [
        make_element("zeta", file="b.py", line=10),
        make_element("alpha", file="b.py", line=2),
        make_element("Thing", body="class Thing: ...", kind=ElementKind.CLASS, file="a.py", line=5),
        make_element("beta", file="a.py", line=1),
    ]

    rag = build_rag_index(elements)

    assert rag.total_elements == 4
    assert list(rag.by_file) == ["a.py", "b.py"]
    assert [e.name for e in rag.by_file["a.py"]] == ["beta", "Thing"]
    assert [e.name for e in rag.by_file["b.py"]] == ["alpha", "zeta"]
    assert list(rag.by_kind) == ["class", "function"]
    assert [e.name for e in rag.by_kind["function"]] == ["alpha", "beta", "zeta"]

    reordered = build_rag_index(list(reversed(elements)))
    assert reordered == rag


def test_summary_lists_counts():
    rag = build_rag_index(
        [
            make_element("f", file="a.py"),
            make_element("g", file="a.py"),
            make_element("C", body="class C: ...", kind=ElementKind.CLASS, file="b.py"),
        ]
    )

    assert rag.summary == (
        "# Codebase Index - 3 elements\n"
        "\n"
        "## By Type\n"
        "- class: 1\n"
        "- function: 2\n"
        "\n"
        "## By File\n"
        "- a.py: 2 elements\n"
        "- b.py: 1 elements\n"
    )


def test_empty_input():
    rag = build_rag_index([])

    assert rag.total_elements == 0
    assert rag.by_file == {}
    assert rag.by_kind == {}
