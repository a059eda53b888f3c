"""Deterministic short names derived from content.

Cache filenames must stay stable across runs: downstream consumers match on
them, so the hex alphabet (uppercase) and the separators are fixed.
"""

import hashlib
import re

from nestcache.errors import ResourceIOError

_UNSAFE_CHARS = re.compile(r"[^a-zA-Z0-9\-+_.]")
_DASH_RUN = re.compile(r"-+")


def _md5():
    try:
        return hashlib.md5()
    except ValueError as e:
        # FIPS-restricted builds refuse md5 outright
        raise ResourceIOError("MD5 digest is not available") from e


def content_digest(data: bytes) -> str:
    """Uppercase hex MD5 of ``data``."""
    md5 = _md5()
    md5.update(data)
    return md5.hexdigest().upper()


def filename_safe_hash(text: str) -> str:
    """Uppercase hex MD5 of the UTF-8 encoding of ``text``."""
    return content_digest(text.encode("utf-8"))


def simple_name(path: str) -> str:
    """Return the part of ``path`` after the last ``!`` or ``/``.

    ``jar:file:///a/outer.jar!/lib/inner.jar`` -> ``inner.jar``
    """
    last_sep = max(path.rfind("!"), path.rfind("/"))
    return path[last_sep + 1 :]


def cache_filename(data: bytes, inner_path: str) -> str:
    """Name of the cache file holding ``data``: ``<DIGEST>_<simple name>``."""
    return f"{content_digest(data)}_{simple_name(inner_path)}"


def sanitize(text: str) -> str:
    """Replace filename-unsafe characters with ``-`` and collapse dash runs."""
    return _DASH_RUN.sub("-", _UNSAFE_CHARS.sub("-", text))
