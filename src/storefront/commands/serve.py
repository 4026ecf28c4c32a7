"""Command: chiccloset serve - Run the API under uvicorn."""

import typer
from rich.console import Console


console = Console()


def serve(
    host: str | None = typer.Option(None, "--host", help="Bind address"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Start the ChicCloset API.

    Traces go to OTLP_ENDPOINT when it is set; set CONSOLE_EXPORTER=true
    to print them instead.
    """
    import uvicorn

    from chiccloset.config import settings

    bind_host = host or settings.host
    bind_port = port or settings.port

    console.print(
        f"\n[bold magenta]ChicCloset API[/bold magenta] on http://{bind_host}:{bind_port}"
    )
    console.print(f"  service:  {settings.service_name} {settings.service_version}")
    console.print(f"  exporter: {settings.otlp_endpoint or 'none'}\n")

    uvicorn.run(
        "chiccloset.main:create_app",
        factory=True,
        host=bind_host,
        port=bind_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )
