from enum import Enum
from typing import Dict, Iterator, List, Optional, Tuple, Union

import libcst as cst

from codebridge.spec import ElementKind

from .annotations import dotted_name, tail_name


class DeclShape(str, Enum):
    """The closed set of declaration shapes the extractor recognises."""

    FUNCTION = "function"
    STRUCT = "struct"
    INTERFACE = "interface"
    CLASS = "class"
    TYPE_ALIAS = "type_alias"
    VARIABLE = "variable"


SHAPE_KINDS: Dict[DeclShape, ElementKind] = {
    DeclShape.FUNCTION: ElementKind.FUNCTION,
    DeclShape.STRUCT: ElementKind.STRUCT,
    DeclShape.INTERFACE: ElementKind.INTERFACE,
    DeclShape.CLASS: ElementKind.CLASS,
    DeclShape.TYPE_ALIAS: ElementKind.TYPE,
    DeclShape.VARIABLE: ElementKind.VARIABLE,
}

STRUCT_DECORATORS = {
    "dataclass",
    "dataclasses.dataclass",
    "attr.s",
    "attr.attrs",
    "attr.define",
    "attr.frozen",
    "attrs.define",
    "attrs.frozen",
    "attrs.mutable",
    "define",
    "frozen",
}
STRUCT_BASES = {"NamedTuple", "TypedDict"}
INTERFACE_BASES = {"Protocol", "ABC"}
ABSTRACT_METACLASSES = {"ABCMeta"}
ATTRS_FIELD_CALLS = {"attr.ib", "attr.attrib", "attr.field", "attrs.field", "ib", "attrib"}

AssignmentNode = Union[cst.Assign, cst.AnnAssign, cst.TypeAlias]


def classify_class(node: cst.ClassDef) -> DeclShape:
    for decorator in node.decorators:
        if dotted_name(decorator.decorator) in STRUCT_DECORATORS:
            return DeclShape.STRUCT

    base_names = [tail_name(arg.value) for arg in node.bases]
    if any(name in STRUCT_BASES for name in base_names):
        return DeclShape.STRUCT
    if any(name in INTERFACE_BASES for name in base_names):
        return DeclShape.INTERFACE

    for keyword in node.keywords:
        if (
            keyword.keyword is not None
            and keyword.keyword.value == "metaclass"
            and tail_name(keyword.value) in ABSTRACT_METACLASSES
        ):
            return DeclShape.INTERFACE

    return DeclShape.CLASS


def classify_assignment(node: AssignmentNode) -> Optional[Tuple[str, DeclShape]]:
    """
    Returns the declared name and shape of a module-level assignment, or
    None when the target is not a single plain name.
    """
    if isinstance(node, cst.TypeAlias):
        return node.name.value, DeclShape.TYPE_ALIAS

    if isinstance(node, cst.AnnAssign):
        if not isinstance(node.target, cst.Name):
            return None
        if tail_name(node.annotation.annotation) == "TypeAlias":
            return node.target.value, DeclShape.TYPE_ALIAS
        return node.target.value, DeclShape.VARIABLE

    if len(node.targets) != 1:
        return None
    target = node.targets[0].target
    if not isinstance(target, cst.Name):
        return None
    if isinstance(node.value, cst.Call) and tail_name(node.value.func) == "NewType":
        return target.value, DeclShape.TYPE_ALIAS
    return target.value, DeclShape.VARIABLE


def iter_body_statements(node: cst.ClassDef) -> Iterator[cst.CSTNode]:
    """Yields the small and compound statements directly in a class body."""
    if isinstance(node.body, cst.SimpleStatementSuite):
        yield from node.body.body
        return
    for statement in node.body.body:
        if isinstance(statement, cst.SimpleStatementLine):
            yield from statement.body
        else:
            yield statement


def _is_class_var(annotation: cst.BaseExpression) -> bool:
    return tail_name(annotation) == "ClassVar"


def collect_fields(node: cst.ClassDef) -> List[str]:
    fields: List[str] = []
    for statement in iter_body_statements(node):
        if isinstance(statement, cst.AnnAssign):
            if not isinstance(statement.target, cst.Name):
                continue
            if _is_class_var(statement.annotation.annotation):
                continue
            fields.append(statement.target.value)
        elif isinstance(statement, cst.Assign):
            # attrs without annotations: `x = attr.ib()`
            if len(statement.targets) != 1:
                continue
            target = statement.targets[0].target
            if (
                isinstance(target, cst.Name)
                and isinstance(statement.value, cst.Call)
                and dotted_name(statement.value.func) in ATTRS_FIELD_CALLS
            ):
                fields.append(target.value)
    return fields


def collect_methods(node: cst.ClassDef) -> List[str]:
    return [
        statement.name.value
        for statement in iter_body_statements(node)
        if isinstance(statement, cst.FunctionDef)
    ]


def is_exported(name: str) -> bool:
    if name.startswith("__") and name.endswith("__") and len(name) > 4:
        return True
    return not name.startswith("_")
