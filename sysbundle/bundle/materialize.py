"""Materialization - writing a resolved bundle to disk.

Layout of a bundle directory:

    <target>/
        software/<release-prefix>/...   unpacked release contents
        local-projects/                 empty, for the user's own sources
        system-index.txt                software/<prefix>/<source-file> per line
        bundle_loader.py                loader script
        bundle-info.json                requested systems and bundled releases

Stages run in order and the first failure aborts the run. Nothing is rolled
back: files written by earlier stages stay on disk. Writing the same bundle
into the same target again reproduces the same end state.
"""

from __future__ import annotations

import json
import tempfile
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from sysbundle import __version__
from sysbundle.bundle.errors import BundleError, BundleExistsError, WriteError
from sysbundle.bundle.loader import LOADER_FILENAME, render_loader
from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.errors import ArchiveError
from sysbundle.fetch.archive import decompress, extract_tar
from sysbundle.platform.files import atomic_write_lines, atomic_write_text

if TYPE_CHECKING:
    from sysbundle.bundle.model import Bundle
    from sysbundle.dist.model import Release
    from sysbundle.fetch.download import ArchiveFetcher

__all__ = [
    "BundleReport",
    "INDEX_FILENAME",
    "INFO_FILENAME",
    "LOCAL_PROJECTS_DIR",
    "SOFTWARE_DIR",
    "prepare_target",
    "release_dir",
    "system_index_lines",
    "unpack_release",
    "unpack_releases",
    "write_bundle",
    "write_bundle_info",
    "write_loader_script",
    "write_system_index",
]

SOFTWARE_DIR = "software"
LOCAL_PROJECTS_DIR = "local-projects"
INDEX_FILENAME = "system-index.txt"
INFO_FILENAME = "bundle-info.json"


@dataclass(frozen=True, slots=True)
class BundleReport:
    """Summary of a written bundle.

    Attributes:
        target: Bundle directory
        releases: Number of releases unpacked
        systems: Number of systems provided
        files: Number of files extracted from archives
    """

    target: Path
    releases: int
    systems: int
    files: int


def release_dir(target: Path, release: Release) -> Path:
    """Directory a release is unpacked into."""
    return target / SOFTWARE_DIR / release.prefix


# -----------------------------------------------------------------------------
# Stage 1: unpack
# -----------------------------------------------------------------------------


def unpack_release(
    release: Release,
    target: Path,
    fetcher: ArchiveFetcher,
    *,
    work_dir: Path | None = None,
    refresh: bool = False,
) -> Result[int, ArchiveError]:
    """Fetch, gunzip and extract one release under target/software/<prefix>/.

    The archive's leading directory is replaced by the release prefix. The
    intermediate tar file is deleted whether or not extraction succeeds. With
    refresh=True a cached download is fetched again.

    Returns:
        Ok with the number of files extracted, or Err with ArchiveError
    """
    fetched = fetcher.fetch(release, force=refresh)
    if isinstance(fetched, Err):
        return fetched

    decompressed = decompress(fetched.value.path, work_dir or Path(tempfile.gettempdir()))
    if isinstance(decompressed, Err):
        return Err(
            ArchiveError(release=release.name, stage="decompress", message=str(decompressed.error))
        )

    tar_path = decompressed.value
    try:
        extracted = extract_tar(tar_path, release_dir(target, release), strip_components=1)
    finally:
        tar_path.unlink(missing_ok=True)

    if isinstance(extracted, Err):
        return Err(ArchiveError(release=release.name, stage="extract", message=str(extracted.error)))
    return Ok(extracted.value)


def unpack_releases(
    bundle: Bundle,
    target: Path,
    fetcher: ArchiveFetcher,
    *,
    on_release: Callable[[Release], None] | None = None,
    refresh: bool = False,
) -> Result[int, ArchiveError]:
    """Unpack every provided release, in name order.

    Args:
        bundle: Resolved bundle
        target: Bundle directory
        fetcher: Archive fetcher
        on_release: Optional callback invoked before each release is unpacked
        refresh: Download archives again even if a verified copy is cached

    Returns:
        Ok with the total number of files extracted, or Err with the first ArchiveError
    """
    total = 0
    for release in bundle.provided_releases():
        if on_release is not None:
            on_release(release)
        result = unpack_release(release, target, fetcher, refresh=refresh)
        if isinstance(result, Err):
            return result
        total += result.value
    return Ok(total)


# -----------------------------------------------------------------------------
# Stage 2: system index
# -----------------------------------------------------------------------------


def system_index_lines(bundle: Bundle) -> list[str]:
    """Index entries: releases by name, then each release's declared file order."""
    return [
        f"{SOFTWARE_DIR}/{release.prefix}/{path}"
        for release in bundle.provided_releases()
        for path in release.source_files
    ]


def write_system_index(bundle: Bundle, target: Path) -> Result[Path, WriteError]:
    path = target / INDEX_FILENAME
    try:
        atomic_write_lines(path, system_index_lines(bundle))
    except OSError as e:
        return Err(WriteError(path=path, message=f"Cannot write system index: {e}"))
    return Ok(path)


# -----------------------------------------------------------------------------
# Stage 3: loader script and bundle info
# -----------------------------------------------------------------------------


def write_loader_script(bundle: Bundle, target: Path) -> Result[Path, WriteError]:
    path = target / LOADER_FILENAME
    try:
        atomic_write_text(path, render_loader(bundle, version=__version__))
    except OSError as e:
        return Err(WriteError(path=path, message=f"Cannot write loader script: {e}"))
    return Ok(path)


def write_bundle_info(bundle: Bundle, target: Path) -> Result[Path, WriteError]:
    """Record what the bundle was built from in bundle-info.json."""
    catalog = bundle.catalog
    info = {
        "dist": {
            "name": catalog.dist_name,
            "version": catalog.dist_version,
        },
        "requested": list(bundle.requested_systems),
        "releases": [
            {"name": release.name, "prefix": release.prefix}
            for release in bundle.provided_releases()
        ],
        "systems": [system.name for system in bundle.provided_systems()],
    }
    path = target / INFO_FILENAME
    try:
        atomic_write_text(path, json.dumps(info, indent=2) + "\n")
    except OSError as e:
        return Err(WriteError(path=path, message=f"Cannot write bundle info: {e}"))
    return Ok(path)


# -----------------------------------------------------------------------------
# Whole bundle
# -----------------------------------------------------------------------------


def prepare_target(target: Path, *, overwrite: bool = True) -> Result[None, BundleError]:
    """Create the bundle directory skeleton.

    With overwrite=False an existing non-empty target is refused.
    """
    if target.exists() and not target.is_dir():
        return Err(WriteError(path=target, message="Bundle target is not a directory"))
    try:
        if not overwrite and target.exists() and any(target.iterdir()):
            return Err(BundleExistsError(path=target))

        (target / SOFTWARE_DIR).mkdir(parents=True, exist_ok=True)
        (target / LOCAL_PROJECTS_DIR).mkdir(parents=True, exist_ok=True)
    except OSError as e:
        return Err(WriteError(path=target, message=f"Cannot create bundle directory: {e}"))
    return Ok(None)


def write_bundle(
    bundle: Bundle,
    target: Path,
    fetcher: ArchiveFetcher,
    *,
    overwrite: bool = True,
    on_release: Callable[[Release], None] | None = None,
    refresh: bool = False,
) -> Result[BundleReport, BundleError]:
    """Materialize a resolved bundle into target.

    Args:
        bundle: Resolved bundle
        target: Bundle directory (created if missing)
        fetcher: Archive fetcher
        overwrite: Allow writing into an existing non-empty target
        on_release: Optional callback invoked before each release is unpacked
        refresh: Download archives again even if a verified copy is cached

    Returns:
        Ok with BundleReport, or Err with the first failure
    """
    prepared = prepare_target(target, overwrite=overwrite)
    if isinstance(prepared, Err):
        return prepared

    unpacked = unpack_releases(bundle, target, fetcher, on_release=on_release, refresh=refresh)
    if isinstance(unpacked, Err):
        return unpacked

    for write in (write_system_index, write_loader_script, write_bundle_info):
        written = write(bundle, target)
        if isinstance(written, Err):
            return written

    return Ok(
        BundleReport(
            target=target,
            releases=len(bundle.provided_releases()),
            systems=len(bundle),
            files=unpacked.value,
        )
    )
