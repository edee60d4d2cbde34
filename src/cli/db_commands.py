"""Database management CLI commands."""

from decimal import Decimal

import typer
from rich.prompt import Confirm
from rich.table import Table

from src.inventory.core.services import DbManageService, DbSessionService, ProductService
from src.inventory.entities.product import ProductPayload

from .utils import console

db_app = typer.Typer(help="Manage the product database")

SAMPLE_PRODUCTS = [
    ProductPayload(name="Widget", description="Standard widget", price=Decimal("9.99"), quantity=5),
    ProductPayload(name="Gadget", description="Pocket gadget", price=Decimal("24.50"), quantity=40),
    ProductPayload(name="Sprocket", description="Steel sprocket", price=Decimal("3.75"), quantity=120),
    ProductPayload(name="Gizmo", description=None, price=Decimal("149.00"), quantity=2),
]


@db_app.command("init")
def init_db() -> None:
    """Create all database tables."""
    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).create_all()
    finally:
        database_service.dispose()
    console.print("[green]✅ Database tables created[/green]")


@db_app.command("drop")
def drop_db(
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip the confirmation prompt"),
) -> None:
    """Drop all database tables, including soft-deleted products."""
    if not yes and not Confirm.ask("[red]Drop every table and all product data?[/red]"):
        console.print("[yellow]Aborted[/yellow]")
        raise typer.Exit(0)

    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).drop_all()
    finally:
        database_service.dispose()
    console.print("[green]✅ Database tables dropped[/green]")


@db_app.command("seed")
def seed_db(
    force: bool = typer.Option(
        False, "--force", help="Insert samples even when active products exist"
    ),
) -> None:
    """Insert a handful of sample products."""
    database_service = DbSessionService()
    try:
        DbManageService(database_service.engine).create_all()
        service = ProductService(database_service)

        existing = service.total_active_count()
        if existing and not force:
            console.print(
                f"[yellow]{existing} active products already present; use --force to add samples anyway[/yellow]"
            )
            raise typer.Exit(0)

        table = Table(title="Seeded products")
        table.add_column("ID", style="cyan")
        table.add_column("Name", style="green")
        table.add_column("Price", style="magenta")
        table.add_column("Quantity", style="yellow")

        for payload in SAMPLE_PRODUCTS:
            product = service.create(payload)
            table.add_row(str(product.id), product.name, str(product.price), str(product.quantity))

        console.print(table)
    finally:
        database_service.dispose()
