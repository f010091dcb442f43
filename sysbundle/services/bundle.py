from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from sysbundle.bundle.closure import bundle_systems
from sysbundle.bundle.materialize import BundleReport, write_bundle
from sysbundle.core.config import ConfigError
from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.index import load_dist
from sysbundle.dist.remote import fetch_dist
from sysbundle.output.console import Style

if TYPE_CHECKING:
    from sysbundle.bundle.errors import BundleError
    from sysbundle.bundle.model import Bundle
    from sysbundle.dist.catalog import Catalog, SnapshotCatalog
    from sysbundle.dist.errors import NotFoundError
    from sysbundle.dist.model import Release
    from sysbundle.fetch.download import ArchiveFetcher
    from sysbundle.fetch.http import HttpClient, HttpError
    from sysbundle.output.console import ConsoleProtocol


def open_catalog(
    source: str,
    *,
    http: HttpClient,
    cache_dir: Path,
) -> Result[SnapshotCatalog, ConfigError | HttpError]:
    """Open a dist from a local directory or a remote distinfo.txt URL."""
    if source.startswith(("http://", "https://")):
        remote = fetch_dist(http, source, cache_dir)
        if isinstance(remote, Err):
            return remote
        return Ok(remote.value)

    local = load_dist(Path(source).expanduser())
    if isinstance(local, Err):
        return local
    return Ok(local.value)


class BundleService:
    def __init__(
        self,
        *,
        catalog: Catalog,
        fetcher: ArchiveFetcher,
        console: ConsoleProtocol,
    ) -> None:
        self._catalog = catalog
        self._fetcher = fetcher
        self._console = console

    def resolve(self, names: Sequence[str]) -> Result[Bundle, NotFoundError]:
        """Resolve the closure of names; nothing is written to disk."""
        self._console.print(f"resolve {' '.join(names)}", Style.DIM)
        result = bundle_systems(names, self._catalog)
        if isinstance(result, Ok):
            bundle = result.value
            self._console.print(
                f"{len(bundle)} systems in {len(bundle.provided_releases())} releases",
                Style.DIM,
            )
        return result

    def bundle(
        self,
        names: Sequence[str],
        target: Path,
        *,
        overwrite: bool = True,
        refresh: bool = False,
    ) -> Result[BundleReport, BundleError]:
        """Resolve names, then write the bundle into target.

        Resolution completes before the first filesystem write, so an unknown
        name leaves target untouched. refresh re-downloads cached archives.
        """
        resolved = self.resolve(names)
        if isinstance(resolved, Err):
            return resolved

        def on_release(release: Release) -> None:
            self._console.print(f"unpack {release.name}", Style.DIM)

        written = write_bundle(
            resolved.value,
            target,
            self._fetcher,
            overwrite=overwrite,
            on_release=on_release,
            refresh=refresh,
        )
        if isinstance(written, Ok):
            report = written.value
            self._console.success(
                f"bundled {report.systems} systems from {report.releases} releases into "
                f"{report.target}"
            )
        return written
