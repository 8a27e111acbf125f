import typer

from codebridge.common import bus
from codebridge.cli import __version__
from codebridge.cli.factories import make_app
from codebridge.needle import L


def init_command():
    app_instance = make_app()
    try:
        app_instance.run_init()
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)


def index_command():
    app_instance = make_app()
    try:
        app_instance.run_index()
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)


def rebuild_command():
    app_instance = make_app()
    try:
        app_instance.run_rebuild()
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)


def version_command():
    bus.info(L.cli.version, version=__version__)
