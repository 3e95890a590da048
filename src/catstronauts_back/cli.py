"""
Catstronauts CLI.

Commands:
- serve: Run the GraphQL BFF with uvicorn
- schema: Print the GraphQL SDL
"""

from __future__ import annotations

import typer

from catstronauts_back import __version__

app = typer.Typer(
    name="catstronauts",
    help="GraphQL BFF for the Catstronauts track catalogue.",
    no_args_is_help=True,
)


def version_callback(value: bool) -> None:
    if value:
        typer.echo(f"catstronauts {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        False, "--version", callback=version_callback, is_eager=True, help="Show version"
    ),
) -> None:
    """Catstronauts BFF."""


@app.command("serve")
def serve_command(
    host: str = typer.Option("127.0.0.1", "--host", help="Host to bind to"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port (default: $PORT or 4000)"),
    reload: bool = typer.Option(False, "--reload/--no-reload", help="Auto-reload (dev only)"),
) -> None:
    """Start the GraphQL server."""
    import uvicorn

    from catstronauts_back.runtime.config import get_config
    from catstronauts_back.runtime.logging import setup_logging

    try:
        config = get_config()
    except ValueError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(code=1) from e

    setup_logging(level=config.log_level_value, log_dir=config.log_dir)

    bind_port = port or config.port
    typer.echo(f"🚀 Catstronauts GraphQL at http://{host}:{bind_port}/graphql")

    uvicorn.run(
        "catstronauts_back.graphql.integration:create_graphql_app",
        factory=True,
        host=host,
        port=bind_port,
        reload=reload,
        log_level=config.log_level.lower(),
    )


@app.command("schema")
def schema_command() -> None:
    """Print the GraphQL schema (SDL)."""
    from catstronauts_back.graphql.schema import print_schema

    typer.echo(print_schema())


if __name__ == "__main__":
    app()
