from nestcache import cli
from nestcache.urls import archive_url, entry_url, file_url_to_path

from jars import jar_bytes, write_bundle, write_jar


def test_discover_prints_locators(tmp_path, capsys):
    bundle = write_bundle(tmp_path / "a.jar", "lib/a-impl.jar", jar_bytes())

    assert cli.main(["discover", str(bundle)]) == 0

    assert capsys.readouterr().out.splitlines() == [f"{archive_url(bundle)}/lib/a-impl.jar"]


def test_classpath_prints_names(tmp_path, capsys):
    bundle = write_bundle(tmp_path / "a.jar", "lib/a-impl.jar", jar_bytes())
    cache_dir = tmp_path / "cache"

    code = cli.main(["--cache-dir", str(cache_dir), "classpath", str(bundle), "--debug", "names"])

    lines = capsys.readouterr().out.splitlines()
    assert code == 0
    assert lines[0] == "a.jar"
    assert lines[1].endswith("_a-impl.jar")
    assert (cache_dir / lines[1]).is_file()


def test_resolve_prints_file_url(tmp_path, capsys):
    archive = write_jar(tmp_path / "ui.jar", entries={"icons/a.png": b"png"})

    assert cli.main(["resolve", entry_url(archive, "icons/a.png")]) == 0

    file_url = capsys.readouterr().out.strip()
    assert file_url_to_path(file_url).read_bytes() == b"png"
    assert file_url_to_path(file_url).parent == (tmp_path / "settings-resolver").resolve()


def test_clean_is_dry_run_by_default(tmp_path, capsys):
    bundle = write_bundle(tmp_path / "a.jar", "lib/a-impl.jar", jar_bytes())
    cache_dir = tmp_path / "cache"
    cli.main(["--cache-dir", str(cache_dir), "classpath", str(bundle)])
    capsys.readouterr()

    assert cli.main(["--cache-dir", str(cache_dir), "clean"]) == 0
    assert "[dry-run] delete:" in capsys.readouterr().out
    assert any(cache_dir.iterdir())

    assert cli.main(["--cache-dir", str(cache_dir), "clean", "--apply"]) == 0
    assert "[ok] removed 1 files" in capsys.readouterr().out
    assert not cache_dir.exists()


def test_errors_exit_with_status_one(tmp_path, capsys):
    broken = tmp_path / "broken.jar"
    broken.write_bytes(b"garbage")

    assert cli.main(["discover", str(broken)]) == 1
    assert "error: Failed to read archive" in capsys.readouterr().err


def test_unsupported_resolve_exits_with_status_one(capsys):
    assert cli.main(["resolve", "https://example.com/icon.png"]) == 1
    assert "only for .jar!/ urls" in capsys.readouterr().err


def test_invalid_settings_exit_with_status_one(tmp_path, monkeypatch, capsys):
    bundle = write_bundle(tmp_path / "a.jar", "lib/a-impl.jar", jar_bytes())
    monkeypatch.setenv("NESTCACHE_HTTP_TIMEOUT", "not-a-number")

    assert cli.main(["discover", str(bundle)]) == 1
    assert "error:" in capsys.readouterr().err
