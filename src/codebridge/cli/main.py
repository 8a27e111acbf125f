import typer

from codebridge.common import bus
from codebridge.needle import L, needle

from .rendering import CliRenderer
from .commands.basics import (
    index_command,
    init_command,
    rebuild_command,
    version_command,
)
from .commands.query import rag_command, search_command, stats_command

app = typer.Typer(
    name="code-bridge",
    help=needle.get(L.cli.app.description),
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help=needle.get(L.cli.option.verbose.help)
    ),
):
    # The CLI is the composition root; it picks the renderer.
    cli_renderer = CliRenderer(verbose=verbose)
    bus.set_renderer(cli_renderer)


app.command(name="init", help=needle.get(L.cli.command.init.help))(init_command)
app.command(name="index", help=needle.get(L.cli.command.index.help))(index_command)
app.command(name="search", help=needle.get(L.cli.command.search.help))(
    search_command
)
app.command(name="stats", help=needle.get(L.cli.command.stats.help))(stats_command)
app.command(name="rebuild", help=needle.get(L.cli.command.rebuild.help))(
    rebuild_command
)
app.command(name="rag", help=needle.get(L.cli.command.rag.help))(rag_command)
app.command(name="version", help=needle.get(L.cli.command.version.help))(
    version_command
)


if __name__ == "__main__":
    app()
