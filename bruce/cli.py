"""Command-line interface for the Bruce backend."""

import click
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from bruce import __version__

console = Console()

SECRET_SETTINGS = {
    "SPOTIFY_CLIENT_SECRET",
    "OPENAI_API_KEY",
    "POSTGRES_URI",
    "SQLALCHEMY_DATABASE_URI",
    "SENTRY_DSN",
}


def load_settings():
    from bruce.config import Settings

    return Settings()


@click.group()
@click.version_option(version=__version__)
def main():
    """
    Bruce - backend for the Bruce Launcher.

    Spotify login, key/value memory and the AI question relay.
    """
    pass


def setup_db(settings) -> bool:
    """Create tables, reporting instead of raising on failure."""
    from bruce.database import create_db_engine, init_db

    console.print("[cyan]⚙ Checking database...[/cyan]")
    try:
        engine = create_db_engine(settings.SQLALCHEMY_DATABASE_URI)
        init_db(engine)
        engine.dispose()
    except Exception as e:
        console.print(f"[red]❌ Error setting up database: {e}[/red]")
        return False
    console.print("[green]✓ Database is up to date.[/green]")
    return True


@main.command("init-db")
def init_db_command():
    """Create the memory and credential tables."""
    if not setup_db(load_settings()):
        raise SystemExit(1)


@main.command()
@click.option("--host", default=None, help="Host to bind (default: HOST setting)")
@click.option("--port", default=None, type=int, help="Port to bind (default: PORT setting)")
@click.option("--reload", is_flag=True, help="Reload on code changes")
def serve(host, port, reload):
    """Start the API and WebSocket server."""
    settings = load_settings()
    host = host or settings.HOST
    port = port or settings.PORT

    setup_db(settings)

    console.print(
        Panel.fit(
            f"[bold green]Bruce backend {__version__}[/bold green]\n"
            f"🚀 Server live at http://localhost:{port}",
            border_style="green",
        )
    )
    uvicorn.run(
        "bruce.main:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


@main.command("show-config")
def show_config():
    """Print the effective settings, hiding secrets."""
    settings = load_settings()
    table = Table(title="Bruce settings")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for name, value in settings.model_dump().items():
        if name in SECRET_SETTINGS:
            value = "[green]set[/green]" if value else "[yellow]unset[/yellow]"
        table.add_row(name, str(value))
    console.print(table)


if __name__ == "__main__":
    main()
