import pytest

from nestcache import config


@pytest.fixture(autouse=True)
def _isolated_settings(tmp_path, monkeypatch):
    monkeypatch.setenv("NESTCACHE_CACHE_DIR", str(tmp_path / "settings-cache"))
    monkeypatch.setenv("NESTCACHE_RESOLVER_DIR", str(tmp_path / "settings-resolver"))
    config._load_settings.cache_clear()
    yield
    config._load_settings.cache_clear()
