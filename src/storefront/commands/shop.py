"""Command: chiccloset shop - Run one traced purchase."""

from typing import Annotated

import typer
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from chiccloset.core.database import PaymentMethod


console = Console()


def shop(
    email: str = typer.Option("demo@chiccloset.com", "--email", "-e", help="Login email"),
    password: str = typer.Option("demo123", "--password", help="Login password"),
    product_ids: Annotated[
        list[int] | None,
        typer.Option("--product", "-p", help="Product ID to buy (repeatable)"),
    ] = None,
    payment_method: PaymentMethod = typer.Option(
        PaymentMethod.CREDIT_CARD, "--payment", help="Payment method"
    ),
    demo: str | None = typer.Option(
        None, "--demo", help="Demo scenario: slow-checkout, slow-page, error, experiment"
    ),
    api_url: str | None = typer.Option(None, "--api-url", help="API base URL"),
) -> None:
    """Log in, fill the cart, check out and pay, all in one trace."""
    import httpx

    from storefront.checkout import (
        CheckoutForm,
        CheckoutPaymentError,
        CheckoutValidationError,
        PaymentDetails,
    )
    from storefront.client import ApiError, StorefrontClient
    from storefront.demo import DEMO_SCENARIOS, log_demo_scenario
    from storefront.formatters import format_currency, format_date
    from storefront.journey import JourneyError, ShoppingJourney
    from storefront.telemetry import setup_telemetry

    if demo and demo not in DEMO_SCENARIOS:
        console.print(f"[red]Error:[/red] Unknown demo scenario '{demo}'")
        raise typer.Exit(1)

    provider = setup_telemetry()
    log_demo_scenario(demo)

    form = CheckoutForm(
        first_name="Demo",
        last_name="Shopper",
        email=email,
        phone="555-123-4567",
        address="1 Fashion Ave",
        city="New York",
        state="NY",
        zip_code="10001",
    )
    payment = PaymentDetails(
        payment_method=payment_method,
        card_name="Demo Shopper",
        card_number="4242 4242 4242 4242",
        expiry_date="12/30",
        cvv="123",
    )

    try:
        with StorefrontClient(base_url=api_url) as client:
            journey = ShoppingJourney(client, demo=demo)
            with console.status("[bold green]Shopping..."):
                order = journey.run(email, password, product_ids or [1, 3], form, payment)
    except CheckoutValidationError as e:
        console.print(f"[red]Checkout form invalid:[/red] {', '.join(e.errors.values())}")
        raise typer.Exit(1) from None
    except CheckoutPaymentError as e:
        console.print(
            f"[red]Payment failed![/red] Error ID: [bold]{e.error_id}[/bold] "
            "- contact support with this ID."
        )
        raise typer.Exit(1) from None
    except ApiError as e:
        trace_hint = f" (trace {e.trace_id})" if e.trace_id else ""
        console.print(f"[red]API error {e.status_code}:[/red] {e.message}{trace_hint}")
        raise typer.Exit(1) from None
    except (JourneyError, httpx.HTTPError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1) from None
    finally:
        provider.force_flush()

    table = Table(show_header=True)
    table.add_column("Product", style="cyan")
    table.add_column("Qty", justify="right")
    for item in order.items:
        table.add_row(str(item.product_id), str(item.quantity))

    console.print(table)
    console.print(
        Panel(
            f"""[bold]Order #{order.id}[/bold] {order.status.value}
Total:       {format_currency(order.total)}
Transaction: {order.transaction_id}
Placed:      {format_date(order.created_at)}
Trace ID:    {journey.trace_id}""",
            title="[green]Order confirmed[/green]",
            border_style="green",
        )
    )
