import pytest

from engine import config


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config loader at an empty file so tests see defaults."""
    path = tmp_path / "mapdiff.json"
    path.write_text("{}", encoding="utf-8")
    monkeypatch.setenv("MAPDIFF_CONFIG", str(path))
    config.reload()
    yield path
    config.reload()
