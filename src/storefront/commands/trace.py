"""Commands: chiccloset debug-trace / demo-trace - Check the trace pipeline."""

import typer
from rich.console import Console
from rich.table import Table


console = Console()


def debug_trace(
    api_url: str | None = typer.Option(None, "--api-url", help="API base URL"),
) -> None:
    """Ask the API which trace context it received.

    Exits non-zero when the traceparent header did not arrive.
    """
    import httpx
    from opentelemetry.trace import format_trace_id

    from chiccloset.core.observability import create_span
    from storefront.client import ApiError, StorefrontClient
    from storefront.telemetry import setup_telemetry, tracer

    provider = setup_telemetry()

    try:
        with StorefrontClient(base_url=api_url) as client:
            with create_span("debug.traceCheck", tracer=tracer) as span:
                local_trace_id = format_trace_id(span.get_span_context().trace_id)
                result = client.debug_trace()
    except (ApiError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    finally:
        provider.force_flush()

    table = Table(title="Trace propagation", show_header=False)
    table.add_column("Field", style="cyan", no_wrap=True)
    table.add_column("Value")
    table.add_row("traceparent", result.headers.traceparent)
    table.add_row("tracestate", result.headers.tracestate)
    table.add_row("client trace", local_trace_id)
    table.add_row("server trace", result.active_span.trace_id)

    console.print()
    console.print(table)

    joined = result.propagated and result.active_span.trace_id == local_trace_id
    if joined:
        console.print(f"\n[green]✓[/green] {result.note}\n")
    else:
        console.print(f"\n[red]✗[/red] {result.note}\n")
        raise typer.Exit(1)


def demo_trace() -> None:
    """Emit a three-span demo trace from this process."""
    from storefront.telemetry import create_demo_trace, setup_telemetry

    provider = setup_telemetry()
    trace_id = create_demo_trace()
    provider.force_flush()

    console.print(f"[green]✓[/green] Demo trace created: [bold]{trace_id}[/bold]")
