"""Main ChicCloset CLI application."""

import typer
from rich.console import Console

from storefront import __version__
from storefront.commands import serve, shop, trace


console = Console()

app = typer.Typer(
    name="chiccloset",
    help="Run the ChicCloset API and drive traced shopping sessions against it.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register commands
app.command(name="serve")(serve.serve)
app.command(name="shop")(shop.shop)
app.command(name="debug-trace")(trace.debug_trace)
app.command(name="demo-trace")(trace.demo_trace)


@app.callback(invoke_without_command=True)
def version_callback(
    version: bool = typer.Option(
        False, "--version", "-v", help="Show version and exit."
    ),
) -> None:
    """ChicCloset CLI - traced fashion storefront demo."""
    if version:
        console.print(f"[bold magenta]chiccloset[/bold magenta] version {__version__}")
        raise typer.Exit()


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
