import json
from typing import Any, Dict, List, Optional

from codebridge.spec import CodeElement, ElementKind, Parameter

# Characters escaped on top of plain JSON output
_COMPAT_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _escape(text: str) -> str:
    for raw, escaped in _COMPAT_ESCAPES.items():
        text = text.replace(raw, escaped)
    return text


def parameter_to_dict(param: Parameter) -> Dict[str, Any]:
    data: Dict[str, Any] = {"name": param.name}
    if param.type:
        data["type"] = param.type
    if param.default:
        data["default"] = param.default
    if param.optional:
        data["optional"] = True
    return data


def element_to_dict(element: CodeElement) -> Dict[str, Any]:
    """
    Serialises an element with the store's key names and order. Optional
    fields are omitted when empty; `body` is always present.
    """
    data: Dict[str, Any] = {
        "type": element.kind.value,
        "name": element.name,
        "file": element.file,
        "line": element.start_line,
        "endLine": element.end_line,
        "hash": element.content_hash,
    }
    if element.params:
        data["params"] = [parameter_to_dict(p) for p in element.params]
    if element.returns:
        data["returns"] = element.returns
    if element.is_async:
        data["async"] = True
    if element.is_generator:
        data["generator"] = True
    if element.methods:
        data["methods"] = list(element.methods)
    if element.extends:
        data["extends"] = element.extends
    if element.implements:
        data["implements"] = list(element.implements)
    if element.fields:
        data["fields"] = list(element.fields)
    data["body"] = element.body
    if element.docstring:
        data["docstring"] = element.docstring
    if element.imports:
        data["imports"] = list(element.imports)
    if element.exported:
        data["exports"] = True
    data["language"] = element.language
    data["indexedAt"] = element.indexed_at
    return data


def encode_line(element: CodeElement) -> str:
    text = json.dumps(
        element_to_dict(element), ensure_ascii=False, separators=(",", ":")
    )
    return _escape(text) + "\n"


# --- Decoding ---


def _get_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key, "")
    if not isinstance(value, str):
        raise ValueError(f"'{key}' must be a string")
    return value


def _get_int(data: Dict[str, Any], key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"'{key}' must be an integer")
    return value


def _get_bool(data: Dict[str, Any], key: str) -> bool:
    value = data.get(key, False)
    if not isinstance(value, bool):
        raise ValueError(f"'{key}' must be a boolean")
    return value


def _get_str_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key) or []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValueError(f"'{key}' must be a list of strings")
    return value


def parameter_from_dict(data: Any) -> Parameter:
    if not isinstance(data, dict):
        raise ValueError("parameter must be an object")
    return Parameter(
        name=_get_str(data, "name"),
        type=_get_str(data, "type"),
        default=_get_str(data, "default"),
        optional=_get_bool(data, "optional"),
    )


def element_from_dict(data: Dict[str, Any]) -> CodeElement:
    """
    Inverse of element_to_dict. Absent fields take their empty value;
    present fields of the wrong type raise ValueError.
    """
    raw_params = data.get("params") or []
    if not isinstance(raw_params, list):
        raise ValueError("'params' must be a list")

    return CodeElement(
        kind=ElementKind(_get_str(data, "type")),
        name=_get_str(data, "name"),
        file=_get_str(data, "file"),
        start_line=_get_int(data, "line"),
        end_line=_get_int(data, "endLine"),
        content_hash=_get_str(data, "hash"),
        body=_get_str(data, "body"),
        params=[parameter_from_dict(p) for p in raw_params],
        returns=_get_str(data, "returns"),
        is_async=_get_bool(data, "async"),
        is_generator=_get_bool(data, "generator"),
        methods=_get_str_list(data, "methods"),
        extends=_get_str(data, "extends"),
        implements=_get_str_list(data, "implements"),
        fields=_get_str_list(data, "fields"),
        docstring=_get_str(data, "docstring"),
        imports=_get_str_list(data, "imports"),
        exported=_get_bool(data, "exports"),
        language=_get_str(data, "language"),
        indexed_at=_get_str(data, "indexedAt"),
    )


def decode_line(line: str) -> Optional[CodeElement]:
    """Returns None for blank, malformed or ill-typed lines."""
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    try:
        return element_from_dict(data)
    except ValueError:
        return None
