from pathlib import Path

from nestcache.assemble import DebugClasspath, assemble_classpath, format_classpath
from nestcache.cache import MaterializationCache

from jars import jar_bytes, manifest_text, write_bundle, write_jar


def test_nested_jars_follow_the_bundles(tmp_path):
    a = write_bundle(tmp_path / "a.jar", "lib/a-impl.jar", jar_bytes(entries={"a": b"a"}))
    plain = write_jar(tmp_path / "plain.jar", manifest_text("."))
    cache = MaterializationCache(tmp_path / "cache")

    classpath = assemble_classpath([a, plain, a], cache)

    assert classpath[:2] == [a, plain]
    assert len(classpath) == 3
    assert classpath[2].parent == cache.root
    assert classpath[2].name.endswith("_a-impl.jar")


def test_format_classpath_modes():
    classpath = [Path("/opt/a.jar"), Path("/cache/ABC_b.jar")]

    assert format_classpath(classpath, DebugClasspath.NAMES) == "a.jar\nABC_b.jar"
    assert format_classpath(classpath, DebugClasspath.PATHS) == "/opt/a.jar\n/cache/ABC_b.jar"
    assert format_classpath(classpath, DebugClasspath.DISABLED) == ""


def test_debug_mode_parses_from_string():
    assert DebugClasspath("names") is DebugClasspath.NAMES
