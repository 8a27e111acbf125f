from pathlib import Path

import typer

from codebridge.app import CodeBridgeApp
from codebridge.common import bus
from codebridge.config import ConfigError
from codebridge.needle import L


def get_project_root() -> Path:
    return Path.cwd()


def make_app() -> CodeBridgeApp:
    # Composition root: configuration errors end the command here
    try:
        return CodeBridgeApp(root_path=get_project_root())
    except ConfigError as e:
        bus.error(L.error.config, error=e)
        raise typer.Exit(code=1)
