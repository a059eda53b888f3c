"""Builders for throwaway bundle archives used across the tests."""

import io
import zipfile
from pathlib import Path


def manifest_text(classpath: str | None = None, **headers: str) -> str:
    lines = ["Manifest-Version: 1.0", "Bundle-SymbolicName: test.bundle"]
    if classpath is not None:
        lines.append(f"Bundle-ClassPath: {classpath}")
    for name, value in headers.items():
        lines.append(f"{name.replace('_', '-')}: {value}")
    return "\n".join(lines) + "\n"


def jar_bytes(manifest: str | None = None, entries: dict[str, bytes] | None = None) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        if manifest is not None:
            zf.writestr("META-INF/MANIFEST.MF", manifest)
        for name, data in (entries or {}).items():
            zf.writestr(name, data)
    return buf.getvalue()


def write_jar(
    path: Path, manifest: str | None = None, entries: dict[str, bytes] | None = None
) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(jar_bytes(manifest, entries))
    return path


def write_bundle(path: Path, nested_name: str, nested: bytes) -> Path:
    """A bundle archive whose manifest points at one nested archive."""
    return write_jar(path, manifest_text(nested_name), {nested_name: nested})
