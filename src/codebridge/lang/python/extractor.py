import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple, Union

import libcst as cst
from libcst.metadata import ByteSpanPositionProvider, PositionProvider

from codebridge.spec import (
    CodeElement,
    Parameter,
    ParseDiagnostic,
    ParseResult,
    hash_code,
    utc_timestamp,
)

from .annotations import dotted_name, render_annotation
from .shapes import (
    SHAPE_KINDS,
    AssignmentNode,
    DeclShape,
    classify_assignment,
    classify_class,
    collect_fields,
    collect_methods,
    is_exported,
)

log = logging.getLogger(__name__)

LANGUAGE = "python"
SUFFIXES = (".py", ".pyi")


def slice_span(source: bytes, start: int, end: int) -> str:
    """
    Returns the source text between two byte offsets. A degenerate range
    (negative or zero bounds, empty or inverted, past the end) yields "".
    """
    if start < 0 or end <= 0 or start >= end or end > len(source):
        return ""
    return source[start:end].decode("utf-8", errors="replace")


class _ImportCollector(cst.CSTVisitor):
    """Collects module-level imports as module paths, in first-seen order."""

    def __init__(self):
        self.imports: List[str] = []

    def _add(self, path: str):
        if path and path not in self.imports:
            self.imports.append(path)

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        return False

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        return False

    def visit_Import(self, node: cst.Import) -> Optional[bool]:
        for alias in node.names:
            self._add(dotted_name(alias.name))
        return False

    def visit_ImportFrom(self, node: cst.ImportFrom) -> Optional[bool]:
        dots = "." * len(node.relative)
        module = dotted_name(node.module) if node.module else ""
        self._add(dots + module)
        return False


class _YieldFinder(cst.CSTVisitor):
    """Detects a yield in a function body, ignoring nested scopes."""

    def __init__(self):
        self.found = False

    def visit_Yield(self, node: cst.Yield) -> Optional[bool]:
        self.found = True
        return False

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        return False

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        return False

    def visit_Lambda(self, node: cst.Lambda) -> Optional[bool]:
        return False


def _is_generator(node: cst.FunctionDef) -> bool:
    finder = _YieldFinder()
    node.body.visit(finder)
    return finder.found


def _docstring(node: Union[cst.FunctionDef, cst.ClassDef]) -> str:
    # get_docstring evaluates the literal; invalid escapes such as "\x" raise
    try:
        return node.get_docstring() or ""
    except (SyntaxError, ValueError):
        return ""


class _DeclarationVisitor(cst.CSTVisitor):
    METADATA_DEPENDENCIES = (PositionProvider, ByteSpanPositionProvider)

    def __init__(
        self,
        file_path: str,
        source: bytes,
        imports: Sequence[str],
        indexed_at: str,
    ):
        super().__init__()
        self.file_path = file_path
        self.source = source
        self.imports = list(imports)
        self.indexed_at = indexed_at
        self.elements: List[CodeElement] = []

        # (name, is_class) for every enclosing def/class
        self._scopes: List[Tuple[str, bool]] = []
        self._dummy_module = cst.Module([])

        self._builders: Dict[DeclShape, Callable[..., CodeElement]] = {
            DeclShape.FUNCTION: self._build_function,
            DeclShape.STRUCT: self._build_struct,
            DeclShape.INTERFACE: self._build_interface,
            DeclShape.CLASS: self._build_class,
            DeclShape.TYPE_ALIAS: self._build_plain,
            DeclShape.VARIABLE: self._build_plain,
        }

    # --- Traversal ---

    def visit_FunctionDef(self, node: cst.FunctionDef) -> Optional[bool]:
        self._emit(DeclShape.FUNCTION, node, node.name.value)
        self._scopes.append((node.name.value, False))
        return True

    def leave_FunctionDef(self, original_node: cst.FunctionDef) -> None:
        self._scopes.pop()

    def visit_ClassDef(self, node: cst.ClassDef) -> Optional[bool]:
        self._emit(classify_class(node), node, node.name.value)
        self._scopes.append((node.name.value, True))
        return True

    def leave_ClassDef(self, original_node: cst.ClassDef) -> None:
        self._scopes.pop()

    def visit_Assign(self, node: cst.Assign) -> Optional[bool]:
        self._visit_assignment(node)
        return False

    def visit_AnnAssign(self, node: cst.AnnAssign) -> Optional[bool]:
        self._visit_assignment(node)
        return False

    def visit_TypeAlias(self, node: cst.TypeAlias) -> Optional[bool]:
        self._visit_assignment(node)
        return False

    def _visit_assignment(self, node: AssignmentNode) -> None:
        # Only module-level bindings are declarations
        if self._scopes:
            return
        declared = classify_assignment(node)
        if declared is None:
            return
        name, shape = declared
        self._emit(shape, node, name)

    def _emit(self, shape: DeclShape, node: cst.CSTNode, simple_name: str) -> None:
        qualified = ".".join([scope for scope, _ in self._scopes] + [simple_name])
        builder = self._builders[shape]
        self.elements.append(builder(shape, node, qualified, simple_name))

    # --- Builders ---

    def _element(
        self, shape: DeclShape, node: cst.CSTNode, name: str, simple_name: str, **attrs
    ) -> CodeElement:
        position = self.get_metadata(PositionProvider, node)
        span = self.get_metadata(ByteSpanPositionProvider, node)
        body = slice_span(self.source, span.start, span.start + span.length)
        return CodeElement(
            kind=SHAPE_KINDS[shape],
            name=name,
            file=self.file_path,
            start_line=position.start.line,
            end_line=position.end.line,
            content_hash=hash_code(body),
            body=body,
            exported=is_exported(simple_name),
            language=LANGUAGE,
            indexed_at=self.indexed_at,
            **attrs,
        )

    def _build_function(
        self, shape: DeclShape, node: cst.FunctionDef, name: str, simple_name: str
    ) -> CodeElement:
        is_method = bool(self._scopes) and self._scopes[-1][1]
        decorators = {dotted_name(d.decorator) for d in node.decorators}
        drop_receiver = is_method and "staticmethod" not in decorators

        returns = ""
        if node.returns:
            returns = render_annotation(node.returns.annotation)

        return self._element(
            shape,
            node,
            name,
            simple_name,
            params=self._parse_parameters(node.params, drop_receiver),
            returns=returns,
            is_async=node.asynchronous is not None,
            is_generator=_is_generator(node),
            docstring=_docstring(node),
            imports=list(self.imports),
        )

    def _build_struct(
        self, shape: DeclShape, node: cst.ClassDef, name: str, simple_name: str
    ) -> CodeElement:
        return self._element(
            shape,
            node,
            name,
            simple_name,
            fields=collect_fields(node),
            docstring=_docstring(node),
        )

    def _build_interface(
        self, shape: DeclShape, node: cst.ClassDef, name: str, simple_name: str
    ) -> CodeElement:
        return self._element(
            shape,
            node,
            name,
            simple_name,
            methods=collect_methods(node),
            docstring=_docstring(node),
        )

    def _build_class(
        self, shape: DeclShape, node: cst.ClassDef, name: str, simple_name: str
    ) -> CodeElement:
        return self._element(
            shape, node, name, simple_name, docstring=_docstring(node)
        )

    def _build_plain(
        self, shape: DeclShape, node: cst.CSTNode, name: str, simple_name: str
    ) -> CodeElement:
        return self._element(shape, node, name, simple_name)

    def _parse_parameters(
        self, params: cst.Parameters, drop_receiver: bool
    ) -> List[Parameter]:
        def extract_param(param: cst.Param, prefix: str = "") -> Parameter:
            annotation = ""
            if param.annotation:
                annotation = render_annotation(param.annotation.annotation)
            default = ""
            if param.default:
                default = self._dummy_module.code_for_node(param.default).strip()
            return Parameter(
                name=prefix + param.name.value,
                type=annotation,
                default=default,
                optional=param.default is not None,
            )

        positional = list(params.posonly_params) + list(params.params)
        if drop_receiver and positional:
            positional = positional[1:]

        result = [extract_param(p) for p in positional]

        # A bare `*` is a ParamStar marker, not a parameter
        if isinstance(params.star_arg, cst.Param):
            result.append(extract_param(params.star_arg, "*"))

        result.extend(extract_param(p) for p in params.kwonly_params)

        if params.star_kwarg:
            result.append(extract_param(params.star_kwarg, "**"))

        return result


class PythonExtractor:
    """
    Derives CodeElement records from Python source with libcst.

    Parsing problems never raise: they come back as diagnostics on the
    ParseResult alongside an empty element list.
    """

    language = LANGUAGE

    def __init__(self, clock: Callable[[], str] = utc_timestamp):
        self._clock = clock

    def supports_file(self, path: str) -> bool:
        return str(path).endswith(SUFFIXES)

    def extract(self, file_path: str, content: Union[bytes, str]) -> ParseResult:
        if isinstance(content, str):
            content = content.encode("utf-8")

        try:
            module = cst.parse_module(content)
            wrapper = cst.MetadataWrapper(module)

            collector = _ImportCollector()
            wrapper.module.visit(collector)

            visitor = _DeclarationVisitor(
                file_path=file_path,
                # Byte spans are measured over the UTF-8 rendering of the module
                source=wrapper.module.code.encode("utf-8"),
                imports=collector.imports,
                indexed_at=self._clock(),
            )
            wrapper.visit(visitor)
        except cst.ParserSyntaxError as e:
            return ParseResult(
                diagnostics=[
                    ParseDiagnostic(
                        message=e.message, line=e.raw_line, column=e.raw_column
                    )
                ]
            )
        except (UnicodeDecodeError, LookupError, RecursionError) as e:
            log.debug(f"Could not parse {file_path}: {e}")
            return ParseResult(diagnostics=[ParseDiagnostic(message=str(e))])

        return ParseResult(elements=visitor.elements)
