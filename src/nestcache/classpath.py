"""Aggregated classpath view.

A classpath is an ordered list of roots, each a directory or a zip archive.
Several roots may carry a resource with the same name (every bundle has its
own ``META-INF/MANIFEST.MF``), so lookups return all matches in root order.
"""

import logging
import sys
import zipfile
from collections.abc import Iterable
from pathlib import Path

from nestcache.errors import ResourceIOError
from nestcache.urls import entry_url

logger = logging.getLogger(__name__)

# Local file header, or end-of-central-directory for an empty archive
_ZIP_MAGIC = (b"PK\x03\x04", b"PK\x05\x06")


class ClasspathView:
    """Enumerates resources across an ordered set of classpath roots."""

    def __init__(self, entries: Iterable[Path | str]):
        self.entries = [Path(e) for e in entries]

    @classmethod
    def from_sys_path(cls) -> "ClasspathView":
        """Live view of the running interpreter's import path."""
        return cls(p for p in sys.path if p and Path(p).exists())

    def get_resources(self, name: str) -> list[str]:
        """URLs of every ``name`` resource on the classpath, in root order."""
        name = name.lstrip("/")
        urls: list[str] = []
        for entry in self.entries:
            if entry.is_dir():
                candidate = entry / name
                if candidate.is_file():
                    urls.append(candidate.resolve().as_uri())
            elif entry.is_file():
                if self._archive_contains(entry, name):
                    urls.append(entry_url(entry, name))
        logger.debug("Found %d '%s' resources on classpath", len(urls), name)
        return urls

    @staticmethod
    def _archive_contains(archive: Path, name: str) -> bool:
        try:
            with open(archive, "rb") as fh:
                if fh.read(4) not in _ZIP_MAGIC:
                    return False
                fh.seek(0)
                with zipfile.ZipFile(fh) as zf:
                    return name in zf.namelist()
        except (zipfile.BadZipFile, OSError) as e:
            raise ResourceIOError(f"Failed to open classpath entry {archive}") from e
