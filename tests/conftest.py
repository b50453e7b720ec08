import logging

import pytest
from fastapi.testclient import TestClient

import log_setup
from app import create_app
from settings import Settings


@pytest.fixture(autouse=True)
def isolated_logging():
    """Drop the JSON handler a lifespan or test installed on the root logger"""
    root = logging.getLogger()
    level = root.level
    yield root
    if log_setup._handler is not None:
        root.removeHandler(log_setup._handler)
        log_setup._handler = None
    root.setLevel(level)


@pytest.fixture
def asset_root(tmp_path):
    root = tmp_path / "static"
    (root / "docs").mkdir(parents=True)
    (root / "index.html").write_text("<h1>root index</h1>")
    (root / "docs" / "index.html").write_text("<h1>docs index</h1>")
    (root / "style.css").write_text("body { color: red; }")
    return root


@pytest.fixture
def make_client(asset_root):
    def _make(**overrides):
        settings = Settings(**{"static_dir": asset_root, **overrides})
        return TestClient(create_app(settings))
    return _make


@pytest.fixture
def client(make_client):
    return make_client()
