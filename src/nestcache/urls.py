"""Reading bytes behind the URLs nestcache deals with.

Supported shapes:

    file:///abs/path/bundle.jar             <- plain file
    https://host/path/bundle.jar            <- fetched with httpx
    jar:file:///abs/outer.jar!/lib/in.jar   <- member of a zip archive

In ``jar:`` URLs the first ``!/`` separates the archive URL from the member
name, the same way the host runtime writes them.
"""

import io
import logging
import zipfile
from pathlib import Path
from urllib.parse import unquote, urlparse

import httpx

from nestcache.errors import ResourceIOError

logger = logging.getLogger(__name__)

JAR_SCHEME = "jar:"
ARCHIVE_SEPARATOR = "!/"


def archive_url(archive: Path) -> str:
    """Container URL for an archive on disk: ``jar:file:///...!``."""
    return f"{JAR_SCHEME}{archive.resolve().as_uri()}!"


def entry_url(archive: Path, entry: str) -> str:
    """URL of ``entry`` inside the archive at ``archive``."""
    return f"{archive_url(archive)}/{entry}"


def file_url_to_path(url: str) -> Path:
    """Convert a ``file:`` URL into a local path."""
    parsed = urlparse(url)
    if parsed.scheme != "file":
        raise ResourceIOError(f"Not a file URL: {url}")
    return Path(unquote(parsed.path))


def split_jar_url(url: str) -> tuple[str, str]:
    """Split ``jar:<archive>!/<entry>`` into ``(archive, entry)``."""
    if not url.startswith(JAR_SCHEME) or ARCHIVE_SEPARATOR not in url:
        raise ResourceIOError(f"Not an archive entry URL: {url}")
    outer, entry = url[len(JAR_SCHEME) :].split(ARCHIVE_SEPARATOR, 1)
    return outer, entry


def _read_file(url: str) -> bytes:
    path = file_url_to_path(url)
    try:
        return path.read_bytes()
    except OSError as e:
        raise ResourceIOError(f"Failed to read {url}") from e


def _read_http(url: str) -> bytes:
    from nestcache.config import get_settings

    logger.info("Downloading %s", url)
    try:
        with httpx.Client(timeout=get_settings().http_timeout, follow_redirects=True) as client:
            resp = client.get(url)
            resp.raise_for_status()
            return resp.content
    except httpx.HTTPError as e:
        raise ResourceIOError(f"Failed to download {url}") from e


def _read_jar_entry(url: str) -> bytes:
    outer, entry = split_jar_url(url)
    archive_bytes = open_url(outer)
    try:
        with zipfile.ZipFile(io.BytesIO(archive_bytes)) as zf:
            return zf.read(entry)
    except KeyError as e:
        raise ResourceIOError(f"No entry '{entry}' in {outer}") from e
    except (zipfile.BadZipFile, OSError) as e:
        raise ResourceIOError(f"Failed to read archive {outer}") from e


def open_url(url: str) -> bytes:
    """Read all bytes behind ``url``.

    Raises:
        ResourceIOError: for any read failure or an unsupported scheme.
    """
    if url.startswith(JAR_SCHEME):
        return _read_jar_entry(url)
    scheme = urlparse(url).scheme
    if scheme == "file":
        return _read_file(url)
    if scheme in ("http", "https"):
        return _read_http(url)
    raise ResourceIOError(f"Unsupported URL scheme: {url}")
