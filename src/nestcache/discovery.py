"""Nested-archive discovery.

Bundles may ship extra archives inside themselves and point at them with the
``Bundle-ClassPath`` manifest header. ``NestedBundles`` finds those
references, either across everything on a classpath view or inside an
explicit list of archive files:

    bundles = NestedBundles.in_files([Path("tools.jar"), Path("core.jar")])
    bundles.discover()
    # [EntryLocator('jar:file:///.../tools.jar!', 'lib/tools-impl.jar')]

A discovery pass is all-or-nothing: any I/O or manifest failure aborts it.
"""

from __future__ import annotations

import logging
import zipfile
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import TYPE_CHECKING

from nestcache.classpath import ClasspathView
from nestcache.errors import ResourceIOError
from nestcache.manifest import MANIFEST_PATH, read_classpath_entries
from nestcache.models import EntryLocator, MaterializedFile, VerificationResult
from nestcache.urls import archive_url, open_url

if TYPE_CHECKING:
    from nestcache.cache import MaterializationCache

logger = logging.getLogger(__name__)

_MANIFEST_SUFFIX = "/" + MANIFEST_PATH


def container_of(manifest_url: str) -> str:
    """Strip the manifest path off a manifest resource URL."""
    if not manifest_url.endswith(_MANIFEST_SUFFIX):
        raise ResourceIOError(f"Not a manifest URL: {manifest_url}")
    return manifest_url[: -len(_MANIFEST_SUFFIX)]


def _scan_classpath(view: ClasspathView) -> list[EntryLocator]:
    locators: list[EntryLocator] = []
    for manifest_url in view.get_resources(MANIFEST_PATH):
        container = container_of(manifest_url)
        locators.extend(read_classpath_entries(container, open_url(manifest_url)))
    return locators


def _scan_files(files: Iterable[Path]) -> list[EntryLocator]:
    locators: list[EntryLocator] = []
    for file in files:
        file = Path(file)
        try:
            with zipfile.ZipFile(file) as zf:
                try:
                    info = zf.getinfo(MANIFEST_PATH)
                except KeyError:
                    logger.debug("No manifest in %s, skipping", file)
                    continue
                with zf.open(info) as stream:
                    locators.extend(read_classpath_entries(archive_url(file), stream))
        except (zipfile.BadZipFile, OSError) as e:
            raise ResourceIOError(f"Failed to read archive {file}") from e
    return locators


class NestedBundles:
    """Source of nested-archive locators.

    Use :meth:`on_classpath` or :meth:`in_files` rather than the constructor.
    """

    def __init__(self, scan: Callable[[], list[EntryLocator]], description: str):
        self._scan = scan
        self.description = description

    def __repr__(self) -> str:
        return f"NestedBundles({self.description})"

    @classmethod
    def on_classpath(cls, view: ClasspathView | None = None) -> NestedBundles:
        """Discover from every manifest visible on ``view`` (default: ``sys.path``)."""
        view = view if view is not None else ClasspathView.from_sys_path()
        return cls(lambda: _scan_classpath(view), f"classpath of {len(view.entries)} entries")

    @classmethod
    def in_files(cls, files: Iterable[Path]) -> NestedBundles:
        """Discover from the manifests of an explicit list of archives."""
        files = [Path(f) for f in files]
        return cls(lambda: _scan_files(files), f"{len(files)} files")

    def discover(self) -> list[EntryLocator]:
        """Unique nested-archive locators, sorted by URL."""
        locators = sorted(set(self._scan()))
        logger.info("Discovered %d nested jars in %s", len(locators), self.description)
        return locators

    def extract_all(self, cache: MaterializationCache) -> list[MaterializedFile]:
        """Materialize every discovered nested archive into ``cache``."""
        return cache.materialize_all(self.discover())

    def verify(
        self, cache: MaterializationCache, live: ClasspathView | None = None
    ) -> VerificationResult:
        """Check that every discovered nested archive was loaded from ``cache``."""
        from nestcache.verify import verify

        return verify(self.discover(), cache, live)

    def confirm_all_present(
        self, cache: MaterializationCache, live: ClasspathView | None = None
    ) -> None:
        """Like :meth:`verify`, raising ``MissingNestedArchivesError`` on failure."""
        from nestcache.verify import confirm_all_present

        confirm_all_present(self.discover(), cache, live)
