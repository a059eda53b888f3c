"""Cross-check extracted nested archives against what the host really loaded.

The cache only proves that nestcache extracted an archive. The host loads
its classpath through its own path, and a nested archive can get dropped
anywhere in that assembly. Verification looks at the manifests the host can
see and reports every cache file that is not among them, all at once.
"""

import logging
from collections.abc import Iterable
from pathlib import Path

from nestcache.cache import MaterializationCache
from nestcache.classpath import ClasspathView
from nestcache.discovery import container_of
from nestcache.errors import InvariantViolationError, MissingNestedArchivesError
from nestcache.manifest import MANIFEST_PATH
from nestcache.models import EntryLocator, VerificationResult
from nestcache.urls import JAR_SCHEME, file_url_to_path

logger = logging.getLogger(__name__)


def live_archives(live: ClasspathView) -> set[Path]:
    """Archives the host resolved to real files, read fresh from ``live``.

    Raises:
        InvariantViolationError: if a manifest container does not end in ``!``.
    """
    loaded: set[Path] = set()
    for manifest_url in live.get_resources(MANIFEST_PATH):
        container = container_of(manifest_url)
        if not container.endswith("!"):
            raise InvariantViolationError(f"Expected {container} to end with !")
        archive = container[:-1]
        if archive.startswith(JAR_SCHEME):
            archive = archive[len(JAR_SCHEME) :]
        loaded.add(file_url_to_path(archive).resolve())
    return loaded


def verify(
    expected: Iterable[EntryLocator],
    cache: MaterializationCache,
    live: ClasspathView | None = None,
) -> VerificationResult:
    """Materialize ``expected`` and report the ones the host did not load.

    ``live`` defaults to the running interpreter's ``sys.path``.
    """
    entries = cache.materialize_all(expected)
    loaded = live_archives(live if live is not None else ClasspathView.from_sys_path())
    missing = tuple(e.locator for e in entries if e.path.resolve() not in loaded)
    result = VerificationResult(missing)
    if not result.ok:
        logger.warning("%d of %d nested jars are not loaded", len(missing), len(entries))
    return result


def confirm_all_present(
    expected: Iterable[EntryLocator],
    cache: MaterializationCache,
    live: ClasspathView | None = None,
) -> None:
    """Raise ``MissingNestedArchivesError`` listing every missing nested archive."""
    result = verify(expected, cache, live)
    if not result.ok:
        raise MissingNestedArchivesError(list(result.missing))
