"""Loader script written into every bundle.

The script is plain Python with no dependency on sysbundle or on the dist.
It knows which bundled system lives in which source file and lets a runtime
find them by name, preferring anything the user dropped into
local-projects/. Run it directly to print the table, or pass system names to
print their source files.
"""

from __future__ import annotations

from string import Template
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sysbundle.bundle.model import Bundle

__all__ = ["LOADER_FILENAME", "render_loader"]

LOADER_FILENAME = "bundle_loader.py"

_TEMPLATE = Template('''\
"""Loader for a standalone system bundle (generated by sysbundle $version).

Bundled systems resolve to files under software/. Source files found under
local-projects/ take precedence over bundled ones with the same name.
"""

from __future__ import annotations

import sys
from pathlib import Path

BUNDLE_ROOT = Path(__file__).resolve().parent
INDEX_FILE = BUNDLE_ROOT / "system-index.txt"
LOCAL_PROJECTS = BUNDLE_ROOT / "local-projects"
SOURCE_SUFFIX = "$suffix"

SYSTEMS: dict[str, tuple[str, ...]] = {
$systems}


def indexed_files() -> list[Path]:
    """Every bundled source file listed in system-index.txt, in index order."""
    lines = INDEX_FILE.read_text(encoding="utf-8").splitlines()
    return [BUNDLE_ROOT / line for line in lines if line]


def local_files() -> dict[str, Path]:
    """Source files under local-projects/, keyed by lower-cased file stem."""
    found: dict[str, Path] = {}
    if LOCAL_PROJECTS.is_dir():
        for path in sorted(LOCAL_PROJECTS.rglob("*" + SOURCE_SUFFIX)):
            found.setdefault(path.stem.lower(), path)
    return found


def locate(name: str) -> list[Path]:
    """Source files providing the system called name (empty if unknown)."""
    local = local_files().get(name.lower())
    if local is not None:
        return [local]
    return [BUNDLE_ROOT / rel for rel in SYSTEMS.get(name.lower(), ())]


def main(argv: list[str]) -> int:
    if not argv:
        for name in SYSTEMS:
            print(name, *locate(name))
        return 0

    status = 0
    for name in argv:
        paths = locate(name)
        if not paths:
            print(f"unknown system: {name}", file=sys.stderr)
            status = 1
        for path in paths:
            print(path)
    return status


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
''')


def render_loader(bundle: Bundle, *, version: str, suffix: str = ".asd") -> str:
    """Render the loader script for a resolved bundle.

    The output depends only on the bundle contents and the arguments, so
    rewriting it for the same bundle produces identical bytes.
    """
    entries: list[str] = []
    for system in bundle.provided_systems():
        release = bundle.find_release(system.release)
        if release is None:
            continue
        paths = tuple(f"software/{release.prefix}/{path}" for path in system.source_files)
        entries.append(f"    {system.key!r}: {paths!r},\n")
    return _TEMPLATE.substitute(version=version, suffix=suffix, systems="".join(entries))
