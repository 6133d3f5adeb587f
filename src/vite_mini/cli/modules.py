"""Run single pipeline steps from the command line."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from vite_mini.api.dependencies import build_dispatcher
from vite_mini.config import load_settings
from vite_mini.core.resolver import BareModuleResolver
from vite_mini.core.rewriter import resolve_imports
from vite_mini.errors import BareModuleNotFoundError, PrebundleError

err_console = Console(stderr=True)

RootOption = Annotated[Path | None, typer.Option(help="Project root (defaults to VITE_MINI_ROOT or cwd).")]


def rewrite(
    file: Annotated[Path, typer.Argument(help="JavaScript module to rewrite.", exists=True, dir_okay=False)],
    root: RootOption = None,
) -> None:
    """Print a module with its import specifiers rewritten for the browser."""
    settings = load_settings(root=root)
    source = file.read_text(encoding="utf-8")
    typer.echo(resolve_imports(source, file.resolve().parent, settings.root), nl=False)


def resolve(
    name: Annotated[str, typer.Argument(help="Bare package specifier, e.g. lodash or @vue/shared.")],
    root: RootOption = None,
) -> None:
    """Print the entry file a bare specifier resolves to."""
    settings = load_settings(root=root)
    try:
        resolved = BareModuleResolver(settings.dependency_root).resolve(name)
    except BareModuleNotFoundError as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None
    typer.echo(str(resolved.entry_path))


def prebundle(
    name: Annotated[str, typer.Argument(help="Bare package specifier to bundle.")],
    root: RootOption = None,
) -> None:
    """Pre-bundle a package and print the resulting ES module."""
    dispatcher = build_dispatcher(load_settings(root=root))
    try:
        bundled = asyncio.run(dispatcher.cache.get(name))
    except (BareModuleNotFoundError, PrebundleError) as exc:
        err_console.print(f"[red]{exc}[/red]")
        raise typer.Exit(1) from None
    typer.echo(bundled, nl=False)
