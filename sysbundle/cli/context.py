from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from sysbundle.core.config import CONFIG_FILENAME, Config, load_config_or_default
from sysbundle.core.errors import ErrorCode
from sysbundle.core.result import Err
from sysbundle.dist.catalog import Catalog
from sysbundle.fetch.download import ArchiveFetcher
from sysbundle.fetch.http import RealHttpClient
from sysbundle.output.console import ConsoleProtocol, RichConsole
from sysbundle.output.errors import error_exit_code, print_error
from sysbundle.services.bundle import open_catalog


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    catalog: Catalog
    fetcher: ArchiveFetcher
    console: ConsoleProtocol


def build_context(
    *,
    config_path: Path | None = None,
    dist: str | None = None,
    cache: Path | None = None,
) -> CLIContext:
    """Load config and open the dist; exit with a mapped code on failure."""
    console = RichConsole()
    base = Path.cwd()

    config_result = load_config_or_default(config_path or base / CONFIG_FILENAME)
    if isinstance(config_result, Err):
        print_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
    config = config_result.value

    source = dist or config.dist.index
    if source is None:
        console.error("no dist configured")
        console.print(f"hint: pass --dist or set [dist] index in {CONFIG_FILENAME}")
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    cache_dir = cache.expanduser() if cache is not None else config.cache_dir(base)
    http = RealHttpClient(timeout=config.http.timeout)

    catalog = open_catalog(source, http=http, cache_dir=cache_dir)
    if isinstance(catalog, Err):
        print_error(catalog.error, console)
        raise typer.Exit(code=error_exit_code(catalog.error))

    return CLIContext(
        config=config,
        catalog=catalog.value,
        fetcher=ArchiveFetcher(http, cache_dir),
        console=console,
    )
