from dataclasses import dataclass, field
from typing import Dict, Iterable, List

from codebridge.spec import CodeElement, ElementKind


@dataclass
class RagElement:
    kind: ElementKind
    name: str
    file: str
    line: int
    signature: str
    docstring: str = ""


@dataclass
class RagIndex:
    """
    All indexed elements partitioned for presentation.

    Files and kinds are iterated in sorted order. Within a file elements are
    ordered by line, within a kind by name; both orders are stable for a
    given store.
    """

    summary: str = ""
    total_elements: int = 0
    by_file: Dict[str, List[RagElement]] = field(default_factory=dict)
    by_kind: Dict[str, List[RagElement]] = field(default_factory=dict)


def build_signature(element: CodeElement) -> str:
    if element.kind is ElementKind.FUNCTION:
        params = []
        for param in element.params:
            text = f"{param.name}: {param.type}" if param.type else param.name
            if param.default:
                text += f" = {param.default}" if param.type else f"={param.default}"
            params.append(text)
        signature = f"{element.name}({', '.join(params)})"
        if element.returns:
            signature += f" -> {element.returns}"
        return signature

    if element.kind is ElementKind.STRUCT and element.fields:
        return f"{element.name} {{{len(element.fields)} fields}}"

    if element.kind is ElementKind.INTERFACE and element.methods:
        return f"{element.name} {{{len(element.methods)} methods}}"

    return element.name


def _summarize(rag: RagIndex) -> str:
    lines = [f"# Codebase Index - {rag.total_elements} elements", "", "## By Type"]
    for kind, elements in rag.by_kind.items():
        lines.append(f"- {kind}: {len(elements)}")
    lines.extend(["", "## By File"])
    for file, elements in rag.by_file.items():
        lines.append(f"- {file}: {len(elements)} elements")
    return "\n".join(lines) + "\n"


def build_rag_index(elements: Iterable[CodeElement]) -> RagIndex:
    by_file: Dict[str, List[RagElement]] = {}
    by_kind: Dict[str, List[RagElement]] = {}
    total = 0

    for element in elements:
        total += 1
        rag_element = RagElement(
            kind=element.kind,
            name=element.name,
            file=element.file,
            line=element.start_line,
            signature=build_signature(element),
            docstring=element.docstring,
        )
        by_file.setdefault(element.file, []).append(rag_element)
        by_kind.setdefault(element.kind.value, []).append(rag_element)

    rag = RagIndex(
        total_elements=total,
        by_file={
            file: sorted(items, key=lambda e: (e.line, e.name))
            for file, items in sorted(by_file.items())
        },
        by_kind={
            kind: sorted(items, key=lambda e: (e.name, e.file, e.line))
            for kind, items in sorted(by_kind.items())
        },
    )
    rag.summary = _summarize(rag)
    return rag
