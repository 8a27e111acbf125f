import libcst as cst

UNKNOWN = "unknown"


def dotted_name(node: cst.BaseExpression) -> str:
    """
    Flattens a Name/Attribute chain into 'a.b.c'. Calls and subscripts
    resolve to their callee/base, so `@dataclass(frozen=True)` and
    `Protocol[T]` name their origin. Anything else yields "".
    """
    if isinstance(node, cst.Name):
        return node.value
    if isinstance(node, cst.Attribute):
        parent = dotted_name(node.value)
        if not parent:
            return ""
        return f"{parent}.{node.attr.value}"
    if isinstance(node, cst.Call):
        return dotted_name(node.func)
    if isinstance(node, cst.Subscript):
        return dotted_name(node.value)
    return ""


def tail_name(node: cst.BaseExpression) -> str:
    return dotted_name(node).rsplit(".", 1)[-1]


def _render_elements(elements) -> str:
    parts = []
    for element in elements:
        rendered = render_annotation(element.value)
        if isinstance(element, cst.StarredElement):
            rendered = f"*{rendered}"
        parts.append(rendered)
    return ", ".join(parts)


def render_annotation(node: cst.BaseExpression) -> str:
    """
    Renders a type expression into its canonical string form.

    Qualified names keep their selector (`os.PathLike`), generics keep their
    arguments (`Dict[str, List[int]]`), PEP 604 unions are spaced
    (`int | None`) and forward references keep their quotes. Shapes that are
    not type expressions render as "unknown".
    """
    if isinstance(node, cst.Name):
        return node.value

    if isinstance(node, cst.Attribute):
        base = render_annotation(node.value)
        if base == UNKNOWN:
            return UNKNOWN
        return f"{base}.{node.attr.value}"

    if isinstance(node, cst.Subscript):
        base = render_annotation(node.value)
        if base == UNKNOWN:
            return UNKNOWN
        args = []
        for element in node.slice:
            if not isinstance(element.slice, cst.Index):
                return UNKNOWN
            rendered = render_annotation(element.slice.value)
            if getattr(element.slice, "star", None):
                rendered = f"*{rendered}"
            args.append(rendered)
        return f"{base}[{', '.join(args)}]"

    if isinstance(node, cst.BinaryOperation) and isinstance(node.operator, cst.BitOr):
        return f"{render_annotation(node.left)} | {render_annotation(node.right)}"

    if isinstance(node, cst.SimpleString):
        return node.value

    if isinstance(node, cst.List):
        # Callable[[int, str], bool]
        return f"[{_render_elements(node.elements)}]"

    if isinstance(node, cst.Tuple):
        return f"({_render_elements(node.elements)})"

    if isinstance(node, cst.Ellipsis):
        return "..."

    if isinstance(node, (cst.Integer, cst.Float)):
        return node.value

    return UNKNOWN
