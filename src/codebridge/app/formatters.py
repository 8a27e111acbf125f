from typing import List, Tuple

from codebridge.index import IndexStats, RagElement, RagIndex
from codebridge.spec import CodeElement

RAG_FORMATS = ("compact", "file", "type")


def _format_detail(element: RagElement, heading: str) -> List[str]:
    lines = [
        heading,
        f"**Location:** {element.file}:{element.line}",
        f"**Signature:** `{element.signature}`",
    ]
    if element.docstring:
        lines.append(f"**Doc:** {element.docstring.strip()}")
    lines.append("")
    return lines


def format_by_file(rag: RagIndex) -> str:
    lines = [rag.summary, "---", ""]
    for file, elements in rag.by_file.items():
        lines.extend([f"## File: {file} ({len(elements)} elements)", ""])
        for element in elements:
            heading = f"### {element.kind.value} {element.name}"
            lines.extend(_format_detail(element, heading))
    return "\n".join(lines)


def format_by_kind(rag: RagIndex) -> str:
    lines = [rag.summary, "---", ""]
    for kind, elements in rag.by_kind.items():
        lines.extend([f"## {kind} ({len(elements)})", ""])
        for element in elements:
            lines.extend(_format_detail(element, f"### {element.name}"))
    return "\n".join(lines)


def format_compact(rag: RagIndex) -> str:
    lines = [f"# Available Code Elements ({rag.total_elements} total)"]
    for kind, elements in rag.by_kind.items():
        lines.extend(["", f"## {kind}", ""])
        for element in elements:
            lines.append(f"- `{element.signature}` - {element.file}:{element.line}")
    return "\n".join(lines) + "\n"


def format_rag(rag: RagIndex, fmt: str) -> str:
    if fmt == "file":
        return format_by_file(rag)
    if fmt == "type":
        return format_by_kind(rag)
    if fmt == "compact":
        return format_compact(rag)
    raise ValueError(f"Unknown format '{fmt}'")


def format_search_result(element: CodeElement) -> str:
    lines = [
        f"  {element.kind.value} {element.name}",
        f"    {element.file}:{element.start_line}",
    ]
    if element.params:
        params = [f"{p.name}: {p.type}" if p.type else p.name for p in element.params]
        lines.append(f"    Parameters: {', '.join(params)}")
    if element.returns:
        lines.append(f"    Returns: {element.returns}")
    return "\n".join(lines)


def top_files(stats: IndexStats, limit: int = 10) -> List[Tuple[str, int]]:
    """Files with the most elements; ties broken by path."""
    ranked = sorted(stats.by_file.items(), key=lambda item: (-item[1], item[0]))
    return ranked[:limit]


def format_stats(stats: IndexStats) -> str:
    lines = [
        "Code-bridge Statistics",
        "",
        f"Total Elements: {stats.total_elements}",
        f"Total Size: {stats.total_body_bytes / 1024:.2f} KB",
        "",
        "By Type:",
    ]
    lines.extend(f"  {kind}: {count}" for kind, count in sorted(stats.by_kind.items()))
    lines.extend(["", "By Language:"])
    lines.extend(
        f"  {language}: {count}" for language, count in sorted(stats.by_language.items())
    )
    lines.extend(["", "Top Files:"])
    lines.extend(f"  {file}: {count} elements" for file, count in top_files(stats))
    return "\n".join(lines)
