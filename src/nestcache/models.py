"""Value types shared across discovery, caching and verification."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True, order=True)
class EntryLocator:
    """One nested archive: ``container_url + "/" + relative_path``.

    Equality and ordering follow the string form, so sorted output is
    deterministic across runs.
    """

    url: str = field(init=False, repr=False)
    container_url: str = field(compare=False)
    relative_path: str = field(compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "url", f"{self.container_url}/{self.relative_path}")

    def __str__(self) -> str:
        return self.url


@dataclass(frozen=True)
class MaterializedFile:
    """A nested archive and the cache file holding its bytes."""

    locator: EntryLocator
    path: Path


@dataclass(frozen=True)
class VerificationResult:
    """Outcome of a verification pass: nothing missing, or everything missing."""

    missing: tuple[EntryLocator, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.missing

    @property
    def message(self) -> str:
        if self.ok:
            return "All nested jars are present."
        lines = ["The following nested jars are missing:"]
        lines.extend(f"  {locator.url}" for locator in self.missing)
        return "\n".join(lines) + "\n"
