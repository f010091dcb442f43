"""File-backed dist catalog.

A dist directory holds two whitespace-separated index files:

    systems.txt:   # project system-file system-name [dependency1..dependencyN]
    releases.txt:  # project url size file-md5 content-sha1 prefix [system-file1..system-fileN]

and optionally a distinfo.txt of `key: value` lines (name, version, ...).

Each system's loadable source file is the release's declared system file with
that stem (which may sit in a subdirectory, e.g. `Apps/Listener/x.asd`), or
`<system-file>.asd` when the release declares none. Paths are relative to the
root of the release. Archive URLs without a scheme are paths relative to the
dist directory.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from sysbundle.core.config import ConfigError
from sysbundle.core.result import Err, Ok, Result
from sysbundle.dist.catalog import CatalogIndex, SnapshotCatalog
from sysbundle.dist.model import Release, System

__all__ = [
    "DistCatalog",
    "DISTINFO_FILE",
    "RELEASES_FILE",
    "SYSTEMS_FILE",
    "load_dist",
    "parse_distinfo",
    "parse_index",
]

SYSTEMS_FILE = "systems.txt"
RELEASES_FILE = "releases.txt"
DISTINFO_FILE = "distinfo.txt"

SYSTEM_FILE_SUFFIX = ".asd"

_URL_SCHEMES = frozenset({"http", "https", "file"})


@dataclass(frozen=True, slots=True)
class _ReleaseLine:
    project: str
    url: str
    size: int
    md5: str
    prefix: str
    system_files: tuple[str, ...]


def _data_lines(text: str) -> list[tuple[int, list[str]]]:
    """Split index text into (line number, fields), skipping comments and blanks."""
    out: list[tuple[int, list[str]]] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue
        out.append((lineno, line.split()))
    return out


def parse_distinfo(text: str) -> dict[str, str]:
    """Parse distinfo.txt `key: value` lines into a dict."""
    info: dict[str, str] = {}
    for raw in text.splitlines():
        key, sep, value = raw.partition(":")
        if not sep or not key.strip():
            continue
        info[key.strip()] = value.strip()
    return info


def _resolve_archive(url: str, base_dir: Path | None) -> str:
    if urlparse(url).scheme in _URL_SCHEMES:
        return url
    path = Path(url)
    if base_dir is not None and not path.is_absolute():
        return str(base_dir / path)
    return str(path)


def _source_file(system_file: str, declared: tuple[str, ...]) -> str:
    """Declared releases.txt path whose stem is system_file, else <system-file>.asd."""
    for path in declared:
        candidate = PurePosixPath(path)
        if candidate.stem == system_file and candidate.suffix == SYSTEM_FILE_SUFFIX:
            return path
    return f"{system_file}{SYSTEM_FILE_SUFFIX}"


def _parse_releases(text: str, source: Path | None) -> Result[list[_ReleaseLine], ConfigError]:
    lines: list[_ReleaseLine] = []
    for lineno, fields in _data_lines(text):
        if len(fields) < 6:
            return Err(
                ConfigError(f"{RELEASES_FILE}:{lineno}: expected at least 6 fields", path=source)
            )
        project, url, size, md5, _sha1, prefix, *system_files = fields
        if not size.isdigit():
            return Err(
                ConfigError(f"{RELEASES_FILE}:{lineno}: invalid size {size!r}", path=source)
            )
        lines.append(_ReleaseLine(project, url, int(size), md5.lower(), prefix, tuple(system_files)))
    return Ok(lines)


def parse_index(
    systems_text: str,
    releases_text: str,
    *,
    base_dir: Path | None = None,
    name: str | None = None,
    version: str | None = None,
) -> Result[CatalogIndex, ConfigError]:
    """Parse the contents of systems.txt and releases.txt into a CatalogIndex.

    Args:
        systems_text: Contents of systems.txt
        releases_text: Contents of releases.txt
        base_dir: Directory relative archive paths are resolved against
        name: Dist name recorded on the index
        version: Dist version recorded on the index

    Returns:
        Ok with the index, or Err with ConfigError naming the bad line
    """
    releases_path = base_dir / RELEASES_FILE if base_dir else None
    systems_path = base_dir / SYSTEMS_FILE if base_dir else None

    parsed = _parse_releases(releases_text, releases_path)
    if isinstance(parsed, Err):
        return parsed
    release_lines = {line.project: line for line in parsed.value}

    systems_by_project: dict[str, list[System]] = {project: [] for project in release_lines}
    for lineno, fields in _data_lines(systems_text):
        if len(fields) < 3:
            return Err(
                ConfigError(f"{SYSTEMS_FILE}:{lineno}: expected at least 3 fields", path=systems_path)
            )
        project, system_file, system_name, *dependencies = fields
        if project not in release_lines:
            return Err(
                ConfigError(
                    f"{SYSTEMS_FILE}:{lineno}: system {system_name!r} names unknown release "
                    f"{project!r}",
                    path=systems_path,
                )
            )
        systems_by_project[project].append(
            System(
                name=system_name,
                release=project,
                source_files=(_source_file(system_file, release_lines[project].system_files),),
                depends_on=tuple(dependencies),
            )
        )

    try:
        releases = [
            Release(
                name=line.project,
                archive=_resolve_archive(line.url, base_dir),
                prefix=line.prefix,
                systems=tuple(systems_by_project[line.project]),
                system_files=line.system_files,
                archive_size=line.size,
                archive_md5=line.md5,
            )
            for line in release_lines.values()
        ]
    except ValueError as e:
        return Err(ConfigError(f"{RELEASES_FILE}: {e}", path=releases_path))

    return Ok(CatalogIndex.from_releases(releases, name=name, version=version))


def _read_text(path: Path) -> Result[str, ConfigError]:
    try:
        return Ok(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return Err(ConfigError(f"Dist index file not found: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading dist index {path}: {e}", path=path))


def _load_index(directory: Path) -> Result[CatalogIndex, ConfigError]:
    systems = _read_text(directory / SYSTEMS_FILE)
    if isinstance(systems, Err):
        return systems
    releases = _read_text(directory / RELEASES_FILE)
    if isinstance(releases, Err):
        return releases

    info: dict[str, str] = {}
    distinfo_path = directory / DISTINFO_FILE
    if distinfo_path.exists():
        distinfo = _read_text(distinfo_path)
        if isinstance(distinfo, Err):
            return distinfo
        info = parse_distinfo(distinfo.value)

    return parse_index(
        systems.value,
        releases.value,
        base_dir=directory,
        name=info.get("name"),
        version=info.get("version"),
    )


class DistCatalog(SnapshotCatalog):
    """Catalog reading a dist directory.

    Usage:
        result = load_dist(Path("dists/quicklisp"))
        if is_ok(result):
            catalog = result.value
            with catalog.consistent_snapshot():
                system = catalog.find_system("alexandria")
    """

    def __init__(self, directory: Path, index: CatalogIndex) -> None:
        super().__init__(index)
        self._directory = directory

    @property
    def directory(self) -> Path:
        return self._directory

    def reload(self) -> Result[None, ConfigError]:
        """Re-read the index files.

        Inside a consistent snapshot the new state is only observed once the
        snapshot ends.
        """
        result = _load_index(self._directory)
        if isinstance(result, Err):
            return result
        self._set_index(result.value)
        return Ok(None)


def load_dist(directory: Path) -> Result[DistCatalog, ConfigError]:
    """Load a dist directory into a DistCatalog.

    Args:
        directory: Directory containing systems.txt and releases.txt

    Returns:
        Ok with the catalog, or Err with ConfigError
    """
    if not directory.is_dir():
        return Err(ConfigError(f"Dist directory not found: {directory}", path=directory))

    result = _load_index(directory)
    if isinstance(result, Err):
        return result
    return Ok(DistCatalog(directory, result.value))
