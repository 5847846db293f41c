from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from backend.app import create_app
from vanguard.storage import Storage


@pytest.fixture
def storage(tmp_path: Path) -> Storage:
    """A fresh JSON store per test."""
    return Storage(tmp_path / "data")


@pytest.fixture
def client(tmp_path: Path) -> TestClient:
    """API client backed by its own data directory."""
    return TestClient(create_app(tmp_path / "api-data"))
