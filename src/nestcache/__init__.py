"""nestcache — content-addressed materialization of nested bundle archives.

Manages:
  - Discovery of archives nested inside bundles (``Bundle-ClassPath``)
  - A content-named cache of the extracted archives
  - Verification that the host actually loaded every extracted archive
  - Real files for single ``jar:...!/`` resources
"""

from nestcache.cache import MaterializationCache
from nestcache.classpath import ClasspathView
from nestcache.discovery import NestedBundles
from nestcache.errors import (
    InvariantViolationError,
    ManifestReadError,
    MissingNestedArchivesError,
    NestcacheError,
    ResourceIOError,
    UnsupportedResolutionError,
)
from nestcache.models import EntryLocator, MaterializedFile, VerificationResult
from nestcache.resolver import ArchiveUrlResolver
from nestcache.verify import confirm_all_present, verify

__all__ = [
    "ArchiveUrlResolver",
    "ClasspathView",
    "EntryLocator",
    "InvariantViolationError",
    "ManifestReadError",
    "MaterializationCache",
    "MaterializedFile",
    "MissingNestedArchivesError",
    "NestcacheError",
    "NestedBundles",
    "ResourceIOError",
    "UnsupportedResolutionError",
    "VerificationResult",
    "confirm_all_present",
    "verify",
]
