from __future__ import annotations

from pathlib import Path

import typer

from sysbundle.cli.commands._helpers import exit_with_error
from sysbundle.cli.context import build_context
from sysbundle.core.result import Err
from sysbundle.output.console import Style
from sysbundle.services.bundle import BundleService

_DIST_HELP = "Dist directory or distinfo.txt URL (overrides config)"
_CONFIG_HELP = "Path to sysbundle.toml (default: ./sysbundle.toml)"


def bundle(
    systems: list[str] = typer.Argument(..., help="Systems to bundle"),
    to: Path = typer.Option(..., "--to", help="Bundle directory"),
    dist: str | None = typer.Option(None, "--dist", help=_DIST_HELP),
    config: Path | None = typer.Option(None, "--config", help=_CONFIG_HELP),
    cache: Path | None = typer.Option(None, "--cache", help="Archive cache directory"),
    no_overwrite: bool = typer.Option(
        False, "--no-overwrite", help="Refuse to write into an existing bundle directory"
    ),
    refresh: bool = typer.Option(
        False, "--refresh", help="Download archives again even if they are cached"
    ),
) -> None:
    """Bundle systems and their dependencies into a standalone directory."""
    ctx = build_context(config_path=config, dist=dist, cache=cache)
    service = BundleService(catalog=ctx.catalog, fetcher=ctx.fetcher, console=ctx.console)

    result = service.bundle(systems, to.expanduser(), overwrite=not no_overwrite, refresh=refresh)
    if isinstance(result, Err):
        exit_with_error(result.error, ctx)


def deps(
    systems: list[str] = typer.Argument(..., help="Systems to resolve"),
    dist: str | None = typer.Option(None, "--dist", help=_DIST_HELP),
    config: Path | None = typer.Option(None, "--config", help=_CONFIG_HELP),
) -> None:
    """Show the releases and systems a bundle of SYSTEMS would contain."""
    ctx = build_context(config_path=config, dist=dist)
    service = BundleService(catalog=ctx.catalog, fetcher=ctx.fetcher, console=ctx.console)

    result = service.resolve(systems)
    if isinstance(result, Err):
        exit_with_error(result.error, ctx)

    resolved = result.value
    ctx.console.header("Releases")
    for release in resolved.provided_releases():
        ctx.console.print(f"{release.name}  software/{release.prefix}")
    ctx.console.header("Systems")
    for system in resolved.provided_systems():
        requires = ", ".join(system.depends_on)
        line = f"{system.name} ({system.release})"
        ctx.console.print(f"{line} <- {requires}" if requires else line)
    if not resolved.provided_systems():
        ctx.console.print("nothing to bundle", Style.DIM)
