"""Bundle manifest reader.

A bundle manifest lives at ``META-INF/MANIFEST.MF`` inside an archive:

    Manifest-Version: 1.0
    Bundle-SymbolicName: org.example.tools
    Bundle-ClassPath: lib/tools-impl.ja
     r
    Bundle-Localization: plugin

Header lines are ``Name: value``; a line starting with a single space
continues the previous value. The main section ends at the first blank
line, per-entry sections follow.
"""

import logging
from dataclasses import dataclass, field
from typing import BinaryIO

from nestcache.errors import ManifestReadError
from nestcache.models import EntryLocator

logger = logging.getLogger(__name__)

MANIFEST_PATH = "META-INF/MANIFEST.MF"
BUNDLE_CLASSPATH = "Bundle-ClassPath"
BUNDLE_LOCALIZATION = "Bundle-Localization"
DEFAULT_LOCALIZATION = "OSGI-INF/l10n/bundle"


class Attributes(dict):
    """Header map with case-insensitive names (original case kept for display)."""

    def __init__(self):
        super().__init__()
        self._names: dict[str, str] = {}

    def __setitem__(self, name: str, value: str) -> None:
        key = name.lower()
        self._names[key] = name
        super().__setitem__(key, value)

    def __getitem__(self, name: str) -> str:
        return super().__getitem__(name.lower())

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and super().__contains__(name.lower())

    def get(self, name: str, default: str | None = None) -> str | None:
        return super().get(name.lower(), default)

    def names(self) -> list[str]:
        return list(self._names.values())


@dataclass
class Manifest:
    main: Attributes = field(default_factory=Attributes)
    sections: list[Attributes] = field(default_factory=list)


def parse_manifest(data: bytes) -> Manifest:
    """Parse manifest bytes.

    Raises:
        ManifestReadError: if the bytes are not a structured manifest.
    """
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise ManifestReadError("Manifest is not valid UTF-8") from e
    if text.startswith("\ufeff"):
        text = text[1:]

    manifest = Manifest()
    current = manifest.main
    last_name: str | None = None

    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line:
            # Blank line closes the section; the next header opens a new one
            if current:
                current = Attributes()
                manifest.sections.append(current)
            last_name = None
            continue
        if line.startswith(" "):
            if last_name is None:
                raise ManifestReadError(f"Line {lineno}: continuation without a header")
            current[last_name] = current[last_name] + line[1:]
            continue
        name, sep, value = line.partition(": ")
        if not sep or not name:
            raise ManifestReadError(f"Line {lineno}: invalid header {line!r}")
        current[name] = value
        last_name = name

    manifest.sections = [s for s in manifest.sections if s]
    return manifest


def read_localization(manifest: Manifest) -> str:
    """Base path of the bundle's localization files."""
    return manifest.main.get(BUNDLE_LOCALIZATION) or DEFAULT_LOCALIZATION


def read_classpath_entries(container_url: str, source: BinaryIO | bytes) -> list[EntryLocator]:
    """Nested archives a bundle manifest declares.

    ``Bundle-ClassPath`` absent or ``.`` means the archive is its own
    classpath, so there is nothing nested to extract.
    """
    data = source if isinstance(source, bytes) else source.read()
    manifest = parse_manifest(data)
    classpath = manifest.main.get(BUNDLE_CLASSPATH)
    if classpath is None or classpath == ".":
        return []
    logger.debug("%s declares nested %s", container_url, classpath)
    return [EntryLocator(container_url, classpath)]
