"""Real files standing in for resources inside archives.

Some consumers (native image loaders, external tools) can only read from the
filesystem. ``ArchiveUrlResolver`` copies the resource behind a
``...something.jar!/inner/path`` URL to a file whose name encodes where it
came from:

    jar:file:///opt/app/plugins/ui.jar!/icons/save 16.png
    -> <MD5 of "jar:file:///opt/app/plugins">--ui--icons-save-16.png
"""

import logging
from pathlib import Path

from nestcache.cache import write_atomic
from nestcache.digest import filename_safe_hash, sanitize
from nestcache.errors import ResourceIOError, UnsupportedResolutionError
from nestcache.urls import open_url

logger = logging.getLogger(__name__)

DOT_JAR_EX_SLASH = ".jar!/"


def filename_for(url: str) -> str:
    """Cache filename for a ``.jar!/`` URL.

    Raises:
        UnsupportedResolutionError: for any other URL shape.
    """
    dot_jar_idx = url.find(DOT_JAR_EX_SLASH)
    if dot_jar_idx == -1:
        raise UnsupportedResolutionError(
            f"This is only for {DOT_JAR_EX_SLASH} urls, this was {url}"
        )
    jar_name_start = url.rfind("/", 0, dot_jar_idx)

    before_jar = url[:jar_name_start] if jar_name_start != -1 else ""
    jar = url[jar_name_start + 1 : dot_jar_idx]
    in_zip = url[dot_jar_idx + len(DOT_JAR_EX_SLASH) :]
    return f"{filename_safe_hash(before_jar)}--{sanitize(jar)}--{sanitize(in_zip)}"


class ArchiveUrlResolver:
    """Materializes single archive-internal resources on demand."""

    def __init__(self, directory: Path):
        self.directory = Path(directory)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ResourceIOError(f"Failed to create {self.directory}") from e

    @classmethod
    def from_settings(cls) -> "ArchiveUrlResolver":
        from nestcache.config import get_settings

        return cls(get_settings().resolver_dir)

    def to_file_url(self, url: str) -> str:
        """Return a ``file:`` URL with the same bytes as ``url``.

        The first write wins: the name already pins the source location.
        """
        file = self.directory / filename_for(url)
        if not file.exists():
            logger.debug("Materializing %s -> %s", url, file.name)
            write_atomic(file, open_url(url))
        return file.resolve().as_uri()

    def resolve(self, url: str) -> str:
        raise UnsupportedResolutionError("Resolving back to archive URLs is not supported")
