"""Error taxonomy for nested-archive materialization.

Nothing in nestcache retries. Every failure is either an aggregated report
(``MissingNestedArchivesError``) or an immediate abort of the current pass.
"""

from __future__ import annotations

from nestcache.models import EntryLocator, VerificationResult


class NestcacheError(Exception):
    """Base class for every error raised by nestcache."""


class ManifestReadError(NestcacheError):
    """A manifest stream could not be parsed as a structured manifest."""


class ResourceIOError(NestcacheError, RuntimeError):
    """Opening or reading a URL/archive, or writing a cache file, failed.

    The original exception is always chained as ``__cause__``.
    """


class MissingNestedArchivesError(NestcacheError):
    """Verification found nested archives that the host never loaded."""

    def __init__(self, missing: list[EntryLocator]):
        self.missing = list(missing)
        super().__init__(VerificationResult(tuple(self.missing)).message)


class UnsupportedResolutionError(NestcacheError, NotImplementedError):
    """The URL resolver was asked for something outside its contract."""


class InvariantViolationError(NestcacheError, ValueError):
    """A live manifest URL did not follow the ``<container>!`` convention."""
