"""Main CLI entry point for buildhooks."""

import typer
from rich.console import Console

from buildhooks import __version__
from buildhooks.exceptions import ConfigurationError
from buildhooks.utils.config import get_settings
from buildhooks.utils.logging import configure_from_settings

from .commands import hooks

app = typer.Typer(
    name="buildhooks",
    help="Lifecycle hooks for build tools",
    add_completion=True,
    rich_markup_mode="rich",
    no_args_is_help=True,
)
console = Console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"[bold blue]buildhooks[/bold blue] version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        callback=version_callback,
        is_eager=True,
        help="Show the version and exit.",
    ),
) -> None:
    """
    buildhooks - run project hook scripts and listeners at build lifecycle points.
    """
    try:
        settings = get_settings()
    except ConfigurationError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(2)

    configure_from_settings(settings)


app.add_typer(hooks.app, name="hooks")


if __name__ == "__main__":
    app()
