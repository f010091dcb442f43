"""Remote dists: fetch a dist's index over HTTP into the local cache.

A remote dist is published as a distinfo.txt whose `system-index-url` and
`release-index-url` entries point at the two index files. Both are stored
under <cache>/dists/<name>/ together with the distinfo, after which the
directory is an ordinary local dist. Relative archive URLs in releases.txt
are made absolute against the release index URL before it is stored.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING
from urllib.parse import urljoin, urlparse

from sysbundle.core.config import ConfigError
from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.index import (
    DISTINFO_FILE,
    RELEASES_FILE,
    SYSTEMS_FILE,
    DistCatalog,
    load_dist,
    parse_distinfo,
)
from sysbundle.platform.files import atomic_write_text

if TYPE_CHECKING:
    from sysbundle.fetch.http import HttpClient, HttpError

__all__ = ["fetch_dist"]

_REQUIRED_KEYS = ("name", "system-index-url", "release-index-url")


def _safe_dir_name(name: str) -> str:
    return "".join(c if c.isalnum() or c in "-_." else "_" for c in name).strip(".") or "dist"


def _absolute_archive_urls(releases_text: str, base_url: str) -> str:
    """Rewrite scheme-less archive URLs in releases.txt against base_url.

    The cached copy is read back as a local dist, where a relative URL would
    otherwise resolve against the cache directory.
    """
    lines: list[str] = []
    for raw in releases_text.splitlines(keepends=True):
        fields = raw.split()
        if len(fields) < 2 or fields[0].startswith("#") or urlparse(fields[1]).scheme:
            lines.append(raw)
            continue
        fields[1] = urljoin(base_url, fields[1])
        lines.append(" ".join(fields) + "\n")
    return "".join(lines)


def fetch_dist(
    http: HttpClient,
    distinfo_url: str,
    cache_dir: Path,
) -> Result[DistCatalog, HttpError | ConfigError]:
    """Download a dist's index files and load them as a DistCatalog.

    Args:
        http: HTTP client
        distinfo_url: URL of the dist's distinfo.txt
        cache_dir: Root of the download cache

    Returns:
        Ok with the catalog, Err with HttpError on download failure, or
        Err with ConfigError if the distinfo or index files are malformed
    """
    distinfo = http.get_text(distinfo_url)
    if isinstance(distinfo, Err):
        return distinfo

    info = parse_distinfo(distinfo.value)
    missing = [key for key in _REQUIRED_KEYS if key not in info]
    if missing:
        return Err(ConfigError(f"{distinfo_url}: distinfo is missing {', '.join(missing)}"))

    texts: dict[str, str] = {DISTINFO_FILE: distinfo.value}
    for filename, key in ((SYSTEMS_FILE, "system-index-url"), (RELEASES_FILE, "release-index-url")):
        url = urljoin(distinfo_url, info[key])
        fetched = http.get_text(url)
        if isinstance(fetched, Err):
            return fetched
        text = fetched.value
        if filename == RELEASES_FILE:
            text = _absolute_archive_urls(text, url)
        texts[filename] = text

    dist_dir = cache_dir / "dists" / _safe_dir_name(info["name"])
    try:
        for filename, text in texts.items():
            atomic_write_text(dist_dir / filename, text)
    except OSError as e:
        return Err(ConfigError(f"Cannot store dist index in {dist_dir}: {e}", path=dist_dir))

    loaded = load_dist(dist_dir)
    if isinstance(loaded, Err):
        return loaded
    return Ok(loaded.value)
