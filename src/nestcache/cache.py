"""Content-addressed cache of nested archives.

Each nested archive is written once under the cache root as

    <MD5 of bytes>_<simple name>      e.g. 9E107D9D372BB6826BD81D3542A419D6_tools-impl.jar

so identical bytes from different bundles share one file, and changed bytes
get a new file. Old files are never pruned here; ``clean()`` exists for an
operator who asks for it explicitly.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Iterable
from pathlib import Path

from nestcache.digest import cache_filename
from nestcache.errors import ResourceIOError
from nestcache.models import EntryLocator, MaterializedFile
from nestcache.urls import open_url

logger = logging.getLogger(__name__)

_TMP_SUFFIX = ".tmp"


def _default_file_mode() -> int:
    # mkstemp creates 0600 files; cache files follow the umask like any other write
    umask = os.umask(0o022)
    os.umask(umask)
    return 0o666 & ~umask


def write_atomic(path: Path, content: bytes) -> None:
    """Write ``content`` to a temp sibling of ``path`` and move it into place.

    Readers only ever see the old file or the complete new one.
    """
    tmp_path: Path | None = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            dir=str(path.parent), prefix=f".{path.name}.", suffix=_TMP_SUFFIX
        )
        tmp_path = Path(tmp_name)
        with os.fdopen(fd, "wb") as out:
            out.write(content)
        os.chmod(tmp_path, _default_file_mode())
        os.replace(tmp_path, path)
        tmp_path = None
    except OSError as e:
        raise ResourceIOError(f"Failed to write {path}") from e
    finally:
        if tmp_path is not None:
            tmp_path.unlink(missing_ok=True)


class MaterializationCache:
    """Turns nested-archive locators into files under ``root``."""

    def __init__(self, root: Path):
        self.root = Path(root)

    def __repr__(self) -> str:
        return f"MaterializationCache({str(self.root)!r})"

    @classmethod
    def from_settings(cls) -> "MaterializationCache":
        from nestcache.config import get_settings

        return cls(get_settings().cache_dir)

    def materialize(self, locator: EntryLocator) -> MaterializedFile:
        """Make sure the bytes behind ``locator`` exist as a cache file.

        Skips the write when a file of the same name and length is already
        there; any other state (missing, truncated, padded) is rewritten.
        """
        content = open_url(locator.url)
        target = self.root / cache_filename(content, locator.url)
        if not self._is_present(target, len(content)):
            logger.info("Extracting %s -> %s", locator.url, target.name)
            write_atomic(target, content)
        return MaterializedFile(locator, target)

    def materialize_all(self, locators: Iterable[EntryLocator]) -> list[MaterializedFile]:
        """Materialize unique ``locators``, returned sorted by locator URL."""
        return [self.materialize(locator) for locator in sorted(set(locators))]

    def files(self) -> list[Path]:
        """Cache files currently on disk."""
        if not self.root.is_dir():
            return []
        return sorted(
            p for p in self.root.iterdir() if p.is_file() and not p.name.startswith(".")
        )

    def clean(self) -> int:
        """Delete the cache root. Returns the number of files removed."""
        if not self.root.exists():
            return 0
        count = len(self.files())
        try:
            shutil.rmtree(self.root)
        except OSError as e:
            raise ResourceIOError(f"Failed to remove {self.root}") from e
        logger.info("Removed %d cached jars from %s", count, self.root)
        return count

    @staticmethod
    def _is_present(path: Path, size: int) -> bool:
        try:
            return path.is_file() and path.stat().st_size == size
        except OSError:
            # Raced with a concurrent writer; rewriting is always safe
            return False
