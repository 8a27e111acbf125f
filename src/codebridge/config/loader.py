import sys
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List

import tomli_w

from codebridge.scanner import DEFAULT_EXCLUDE, DEFAULT_INCLUDE

if sys.version_info < (3, 11):
    import tomli as tomllib
else:
    import tomllib

CONFIG_DIR = ".code-bridge"
CONFIG_FILE = "config.toml"
PYPROJECT_TABLE = "code-bridge"


class ConfigError(ValueError):
    pass


@dataclass
class CodeBridgeConfig:
    include: List[str] = field(default_factory=lambda: list(DEFAULT_INCLUDE))
    exclude: List[str] = field(default_factory=lambda: list(DEFAULT_EXCLUDE))
    index_path: str = f"{CONFIG_DIR}/codebase.jsonl"
    deduplication: bool = True
    follow_symlinks: bool = False
    use_gitignore: bool = True
    languages: List[str] = field(default_factory=lambda: ["python"])


_FIELD_TYPES = {f.name: f.type for f in fields(CodeBridgeConfig)}


def _validate(key: str, value: Any, source: Path) -> Any:
    expected = _FIELD_TYPES[key]
    if expected in (List[str], "List[str]"):
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ConfigError(f"{source}: '{key}' must be a list of strings")
        return list(value)
    if expected in (bool, "bool"):
        if not isinstance(value, bool):
            raise ConfigError(f"{source}: '{key}' must be a boolean")
        return value
    if not isinstance(value, str):
        raise ConfigError(f"{source}: '{key}' must be a string")
    return value


def _merge(config: CodeBridgeConfig, data: Dict[str, Any], source: Path) -> None:
    for raw_key, value in data.items():
        key = raw_key.replace("-", "_")
        if key not in _FIELD_TYPES:
            # Unknown keys are ignored
            continue
        setattr(config, key, _validate(key, value, source))


def _read_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"{path}: {e}") from e


def load_config_from_path(root_path: Path) -> CodeBridgeConfig:
    """
    Builds the effective configuration for a project root.

    Later sources override earlier ones: built-in defaults, then the
    [tool.code-bridge] table of <root>/pyproject.toml, then
    <root>/.code-bridge/config.toml.
    """
    config = CodeBridgeConfig()

    pyproject_path = root_path / "pyproject.toml"
    if pyproject_path.is_file():
        data = _read_toml(pyproject_path)
        table = data.get("tool", {}).get(PYPROJECT_TABLE, {})
        _merge(config, table, pyproject_path)

    config_path = root_path / CONFIG_DIR / CONFIG_FILE
    if config_path.is_file():
        _merge(config, _read_toml(config_path), config_path)

    return config


def write_config(root_path: Path, config: CodeBridgeConfig) -> Path:
    config_path = root_path / CONFIG_DIR / CONFIG_FILE
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with config_path.open("wb") as f:
        tomli_w.dump(asdict(config), f)
    return config_path
