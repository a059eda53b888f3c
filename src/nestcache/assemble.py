"""Classpath assembly: bundle archives plus their extracted nested archives."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from pathlib import Path

from nestcache.cache import MaterializationCache
from nestcache.discovery import NestedBundles

logger = logging.getLogger(__name__)


class DebugClasspath(str, Enum):
    """How to dump the assembled classpath instead of launching."""

    DISABLED = "disabled"
    NAMES = "names"
    PATHS = "paths"


def assemble_classpath(files: Iterable[Path], cache: MaterializationCache) -> list[Path]:
    """Return ``files`` followed by the nested archives extracted from them.

    Archives already listed are not repeated.
    """
    files = [Path(f) for f in files]
    archives = list(dict.fromkeys(files))
    classpath = list(archives)
    for entry in NestedBundles.in_files(files).extract_all(cache):
        if entry.path not in classpath:
            classpath.append(entry.path)
    logger.info(
        "Assembled classpath: %d archives, %d nested", len(archives), len(classpath) - len(archives)
    )
    return classpath


def format_classpath(classpath: Iterable[Path], mode: DebugClasspath) -> str:
    """Render the classpath in order, one entry per line."""
    if mode is DebugClasspath.DISABLED:
        return ""
    if mode is DebugClasspath.NAMES:
        return "\n".join(p.name for p in classpath)
    return "\n".join(str(p) for p in classpath)
