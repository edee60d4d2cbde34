"""Server CLI commands."""

import typer
from rich.panel import Panel

from src.inventory.runtime.context import get_config

from .utils import console, get_project_root, run_command


def start_server(
    host: str | None = typer.Option(
        None, help="Host to bind the server to; defaults to app.host in config.yaml"
    ),
    port: int | None = typer.Option(
        None, help="Port to bind the server to; defaults to app.port in config.yaml"
    ),
    reload: bool = typer.Option(False, help="Enable auto-reload on code changes"),
    log_level: str = typer.Option(
        "info", help="Log level (debug, info, warning, error, critical)"
    ),
) -> None:
    """
    🚀 Start the product inventory API with uvicorn.
    """
    app_config = get_config().app
    host = host or app_config.host
    port = port or app_config.port

    console.print(
        Panel.fit(
            "[bold green]Starting Product Inventory Service[/bold green]",
            border_style="green",
        )
    )

    cmd = [
        "uvicorn",
        "src.inventory.api.http.app:app",
        "--host",
        host,
        "--port",
        str(port),
        "--log-level",
        log_level,
        "--no-access-log",
    ]

    if reload:
        cmd.extend(["--reload", "--reload-dir", "src"])

    console.print(f"[blue]Running:[/blue] {' '.join(cmd)}")
    console.print(f"[blue]Server will be available at:[/blue] http://{host}:{port}")

    try:
        run_command(cmd, cwd=get_project_root())
    except KeyboardInterrupt:
        console.print("\n[yellow]Server stopped by user[/yellow]")
