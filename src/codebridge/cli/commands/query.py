from typing import Optional

import typer

from codebridge.cli.factories import make_app
from codebridge.common import bus
from codebridge.needle import L
from codebridge.spec import ElementKind


def search_command(
    query: str = typer.Argument(..., help="Substring to look for in names and source."),
    limit: int = typer.Option(
        10, "--limit", "-n", help="Maximum number of results to print (0 for all)."
    ),
    kind: Optional[ElementKind] = typer.Option(
        None, "--kind", "-k", help="Only return elements of this kind."
    ),
    file: Optional[str] = typer.Option(
        None, "--file", "-f", help="Only return elements from this relative path."
    ),
):
    app_instance = make_app()
    try:
        app_instance.run_search(query, limit=limit, kind=kind, file=file)
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)


def stats_command():
    app_instance = make_app()
    try:
        app_instance.run_stats()
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)


def rag_command(
    fmt: str = typer.Argument(
        "compact", metavar="FORMAT", help="One of: compact, file, type."
    ),
):
    app_instance = make_app()
    try:
        success = app_instance.run_rag(fmt)
    except OSError as e:
        bus.error(L.error.io, error=e)
        raise typer.Exit(code=1)
    if not success:
        raise typer.Exit(code=1)
