from pathlib import Path

import pytest

from modmaven.cache import Cache


@pytest.fixture
def cache(tmp_path: Path) -> Cache:
    return Cache(tmp_path / "cache")


@pytest.fixture
def output(tmp_path: Path) -> Path:
    return tmp_path / "output"


@pytest.fixture
def make_file(tmp_path: Path):
    """Return a callable that writes `content` to a scratch file and returns it."""

    def _make(name: str, content: str) -> Path:
        path = tmp_path / "scratch" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _make
