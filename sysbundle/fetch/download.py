"""Release archive fetching with a local cache.

This module provides an ArchiveFetcher that:
- Serves local archives (plain paths and file:// URLs) in place
- Downloads http(s) archives into <cache>/archives/<release>/
- Reuses a cached archive when it still matches the declared size and MD5
- Returns Result for error handling
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urlparse
from urllib.request import url2pathname

from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.errors import ArchiveError

if TYPE_CHECKING:
    from sysbundle.dist.model import Release
    from sysbundle.fetch.http import HttpClient

__all__ = ["ArchiveFetcher", "FetchResult", "file_md5"]


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Result of fetching one release archive.

    Attributes:
        path: Local path of the archive
        from_cache: True if no download was needed
        size: File size in bytes
    """

    path: Path
    from_cache: bool
    size: int


def file_md5(path: Path) -> str:
    """Hex MD5 digest of a file, read in chunks."""
    digest = hashlib.md5(usedforsecurity=False)
    with path.open("rb") as f:
        while chunk := f.read(64 * 1024):
            digest.update(chunk)
    return digest.hexdigest()


def _local_path(location: str) -> Path | None:
    """Return the filesystem path for a local archive location, else None."""
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(url2pathname(parsed.path))
    if parsed.scheme in {"http", "https"}:
        return None
    return Path(location)


class ArchiveFetcher:
    """Release archive fetcher.

    Usage:
        fetcher = ArchiveFetcher(RealHttpClient(), cache_dir)
        result = fetcher.fetch(release)
        if is_ok(result):
            print(f"Archive at: {result.value.path}")
    """

    def __init__(self, http: HttpClient, cache_dir: Path) -> None:
        """Initialize fetcher.

        Args:
            http: HTTP client for downloads
            cache_dir: Root of the download cache
        """
        self._http = http
        self._cache_dir = cache_dir

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def cache_path(self, release: Release) -> Path:
        """Cache location for a release's archive, keyed by release name."""
        filename = Path(urlparse(release.archive).path).name or f"{release.name}.tgz"
        return self._cache_dir / "archives" / release.name / filename

    def _verify(self, release: Release, path: Path) -> str | None:
        """Return a mismatch description, or None if the archive checks out."""
        if release.archive_size is not None:
            size = path.stat().st_size
            if size != release.archive_size:
                return f"size mismatch: expected {release.archive_size}, got {size}"
        if release.archive_md5:
            actual = file_md5(path)
            if actual != release.archive_md5.lower():
                return f"md5 mismatch: expected {release.archive_md5}, got {actual}"
        return None

    def fetch(
        self,
        release: Release,
        *,
        force: bool = False,
    ) -> Result[FetchResult, ArchiveError]:
        """Make a release's archive available locally.

        Args:
            release: Release whose archive to fetch
            force: Re-download even if a verified copy is cached

        Returns:
            Ok with FetchResult, or Err with ArchiveError (stage "fetch" or "checksum")
        """
        local = _local_path(release.archive)
        if local is not None:
            return self._use_local(release, local)

        cache_path = self.cache_path(release)
        try:
            if not force and cache_path.exists():
                if self._verify(release, cache_path) is None:
                    return Ok(
                        FetchResult(path=cache_path, from_cache=True, size=cache_path.stat().st_size)
                    )
                cache_path.unlink()

            cache_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            return Err(ArchiveError(release=release.name, stage="fetch", message=f"IO error: {e}"))

        result = self._http.download(release.archive, cache_path)
        if isinstance(result, Err):
            cache_path.unlink(missing_ok=True)
            return Err(ArchiveError(release=release.name, stage="fetch", message=str(result.error)))

        try:
            mismatch = self._verify(release, cache_path)
            if mismatch is not None:
                cache_path.unlink()
                return Err(ArchiveError(release=release.name, stage="checksum", message=mismatch))
            size = cache_path.stat().st_size
        except OSError as e:
            return Err(ArchiveError(release=release.name, stage="fetch", message=f"IO error: {e}"))

        return Ok(FetchResult(path=cache_path, from_cache=False, size=size))

    def _use_local(self, release: Release, path: Path) -> Result[FetchResult, ArchiveError]:
        if not path.is_file():
            return Err(
                ArchiveError(release=release.name, stage="fetch", message=f"Archive not found: {path}")
            )
        try:
            mismatch = self._verify(release, path)
            size = path.stat().st_size
        except OSError as e:
            return Err(ArchiveError(release=release.name, stage="fetch", message=f"IO error: {e}"))
        if mismatch is not None:
            return Err(ArchiveError(release=release.name, stage="checksum", message=mismatch))
        return Ok(FetchResult(path=path, from_cache=True, size=size))

