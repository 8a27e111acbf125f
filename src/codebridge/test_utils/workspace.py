from pathlib import Path
from textwrap import dedent
from typing import Any, Dict, List

import tomli_w


class WorkspaceFactory:
    def __init__(self, root_path: Path):
        self.root_path = root_path
        self._files_to_create: List[Dict[str, Any]] = []
        self._pyproject_data: Dict[str, Any] = {}

    def with_config(self, config: Dict[str, Any]) -> "WorkspaceFactory":
        """Sets the [tool.code-bridge] table of pyproject.toml."""
        tool = self._pyproject_data.setdefault("tool", {})
        tool["code-bridge"] = config
        return self

    def with_project_config(self, config: Dict[str, Any]) -> "WorkspaceFactory":
        """Writes .code-bridge/config.toml."""
        self._files_to_create.append(
            {"path": ".code-bridge/config.toml", "content": config, "format": "toml"}
        )
        return self

    def with_project_name(self, name: str) -> "WorkspaceFactory":
        project = self._pyproject_data.setdefault("project", {})
        project["name"] = name
        return self

    def with_source(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append(
            {"path": path, "content": dedent(content), "format": "raw"}
        )
        return self

    def with_raw_file(self, path: str, content: str) -> "WorkspaceFactory":
        self._files_to_create.append({"path": path, "content": content, "format": "raw"})
        return self

    def with_bytes(self, path: str, content: bytes) -> "WorkspaceFactory":
        self._files_to_create.append({"path": path, "content": content, "format": "bytes"})
        return self

    def build(self) -> Path:
        if self._pyproject_data:
            self._files_to_create.append(
                {
                    "path": "pyproject.toml",
                    "content": self._pyproject_data,
                    "format": "toml",
                }
            )

        for file_spec in self._files_to_create:
            output_path = self.root_path / file_spec["path"]
            output_path.parent.mkdir(parents=True, exist_ok=True)

            fmt = file_spec["format"]
            content = file_spec["content"]
            if fmt == "toml":
                with output_path.open("wb") as f:
                    tomli_w.dump(content, f)
            elif fmt == "bytes":
                output_path.write_bytes(content)
            else:
                output_path.write_text(content, encoding="utf-8")

        return self.root_path
