import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.logging import RichHandler

from vite_mini.config import load_settings

console = Console()


def configure_logging(verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def serve(
    root: Annotated[Path | None, typer.Option(help="Project root to serve.")] = None,
    host: Annotated[str | None, typer.Option(help="Interface to bind.")] = None,
    port: Annotated[int | None, typer.Option(help="Port to listen on.")] = None,
    transform: Annotated[
        bool | None, typer.Option("--transform/--no-transform", help="Pass served modules through esbuild.")
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output.")] = False,
) -> None:
    """Start the development server."""
    import uvicorn

    from vite_mini.api.app import create_app

    configure_logging(verbose)
    settings = load_settings(root=root, host=host, port=port, transform_modules=transform)
    app = create_app(settings)
    console.print(f"[green]Serving {settings.root} on http://{settings.host}:{settings.port}[/green]")
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)
