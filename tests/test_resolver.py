import re

import pytest

from nestcache.digest import filename_safe_hash
from nestcache.errors import UnsupportedResolutionError
from nestcache.resolver import ArchiveUrlResolver, filename_for
from nestcache.urls import entry_url, file_url_to_path

from jars import write_jar

SAFE = re.compile(r"^[a-zA-Z0-9+_.\-]+$")


def test_filename_for_splits_container_jar_and_inner_path():
    url = "jar:file:///opt/app/plugins/ui.jar!/icons/a b#1.png"

    name = filename_for(url)

    assert name == f"{filename_safe_hash('jar:file:///opt/app/plugins')}--ui--icons-a-b-1.png"


def test_filename_is_filesystem_safe(tmp_path):
    url = entry_url(tmp_path / "root.jar", "icons/a b#1.png")

    parts = filename_for(url).split("--")

    assert SAFE.match(filename_for(url))
    assert parts[1:] == ["root", "icons-a-b-1.png"]
    assert all("--" not in part for part in parts)


def test_to_file_url_copies_the_resource(tmp_path):
    archive = write_jar(tmp_path / "root.jar", entries={"icons/a b#1.png": b"\x89PNG"})
    resolver = ArchiveUrlResolver(tmp_path / "files")

    file_url = resolver.to_file_url(entry_url(archive, "icons/a b#1.png"))

    path = file_url_to_path(file_url)
    assert file_url.startswith("file:")
    assert path.parent == (tmp_path / "files").resolve()
    assert path.read_bytes() == b"\x89PNG"
    assert SAFE.match(path.name)


def test_first_write_wins(tmp_path):
    archive = write_jar(tmp_path / "root.jar", entries={"a.txt": b"new"})
    url = entry_url(archive, "a.txt")
    resolver = ArchiveUrlResolver(tmp_path / "files")
    existing = tmp_path / "files" / filename_for(url)
    existing.write_bytes(b"old")

    assert file_url_to_path(resolver.to_file_url(url)).read_bytes() == b"old"


def test_directory_is_created_up_front(tmp_path):
    ArchiveUrlResolver(tmp_path / "a" / "b")
    assert (tmp_path / "a" / "b").is_dir()


def test_non_archive_urls_are_unsupported(tmp_path):
    resolver = ArchiveUrlResolver(tmp_path / "files")
    with pytest.raises(UnsupportedResolutionError, match=r"only for \.jar!/ urls"):
        resolver.to_file_url((tmp_path / "icon.png").as_uri())


def test_reverse_resolution_is_unsupported(tmp_path):
    resolver = ArchiveUrlResolver(tmp_path / "files")
    with pytest.raises(UnsupportedResolutionError):
        resolver.resolve((tmp_path / "icon.png").as_uri())
    assert isinstance(UnsupportedResolutionError(), NotImplementedError)


def test_from_settings_uses_configured_dir(tmp_path):
    resolver = ArchiveUrlResolver.from_settings()
    assert resolver.directory == tmp_path / "settings-resolver"
    assert resolver.directory.is_dir()
