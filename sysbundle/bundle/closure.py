"""Dependency closure of a set of requested systems.

Resolution is depth first: a system is registered, then its dependencies are
required, then the dependencies of the sibling systems its release brought in.
A name already present in the bundle is never expanded again; the bundle's
own membership test is the visited set, which is what makes cycles
(A -> B -> A) terminate.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

from sysbundle.bundle.model import Bundle
from sysbundle.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from sysbundle.dist.catalog import Catalog
    from sysbundle.dist.errors import NotFoundError

__all__ = ["bundle_systems", "resolve_closure"]


def _require(bundle: Bundle, name: str) -> Result[None, NotFoundError]:
    if name in bundle:
        return Ok(None)

    ensured = bundle.ensure_system(name)
    if isinstance(ensured, Err):
        return ensured
    system = ensured.value

    # Siblings were registered together with the release and are expanded here.
    release = bundle.find_release(system.release)
    siblings = [s for s in release.systems if s.key != system.key] if release else []

    for member in (system, *siblings):
        for dependency in member.depends_on:
            required = _require(bundle, dependency)
            if isinstance(required, Err):
                return required
    return Ok(None)


def resolve_closure(names: Iterable[str], bundle: Bundle) -> Result[Bundle, NotFoundError]:
    """Grow bundle until it holds names and everything they transitively require.

    Stops at the first unknown system or release. The bundle may then hold a
    partial closure and should be discarded.

    Args:
        names: Requested system names, resolved in order
        bundle: Bundle to grow

    Returns:
        Ok with the same bundle, or Err(SystemNotFound / ReleaseNotFound)
    """
    for name in names:
        bundle.request(name)
        required = _require(bundle, name)
        if isinstance(required, Err):
            return required
    return Ok(bundle)


def bundle_systems(names: Iterable[str], catalog: Catalog) -> Result[Bundle, NotFoundError]:
    """Resolve names into a fresh bundle under one consistent catalog snapshot."""
    with catalog.consistent_snapshot():
        return resolve_closure(names, Bundle(catalog))
