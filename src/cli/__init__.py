"""Main CLI application module."""

import typer

from .db_commands import db_app
from .server_commands import start_server

# Create the main CLI application
app = typer.Typer(
    help="Product inventory service tools",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

app.add_typer(db_app, name="db")
app.command(name="start-server")(start_server)


def main() -> None:
    """Main entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
