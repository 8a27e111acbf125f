from typing import Any

from codebridge.spec import CodeElement, ElementKind, hash_code


def make_element(
    name: str,
    body: str = "",
    kind: ElementKind = ElementKind.FUNCTION,
    file: str = "src/module.py",
    line: int = 1,
    **kwargs: Any,
) -> CodeElement:
    """Builds a CodeElement whose hash matches its body."""
    body = body or f"def {name}():\n    pass"
    return CodeElement(
        kind=kind,
        name=name,
        file=file,
        start_line=line,
        end_line=line + body.count("\n"),
        content_hash=hash_code(body),
        body=body,
        indexed_at="2024-01-01T00:00:00.000Z",
        **kwargs,
    )
