# Shared pytest fixtures
from __future__ import annotations

import json
import tempfile
from pathlib import Path
from unittest.mock import MagicMock

import pytest
import requests

from bulkupload.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        monkeypatch.delenv("BULKUPLOAD_API_URL", raising=False)
        monkeypatch.delenv("BULKUPLOAD_ACCESS_TOKEN", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _clean_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """api:
  base_url: https://api.example.test/api
  timeout_seconds: 5
  access_token: test-token
profiles:
  customers:
    endpoint: /customers/bulk-upload
invoice_polling:
  interval_seconds: 0
  max_polls: 3
logs_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "upload.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def write_csv(temp_workdir: Path):
    def _write(name: str, text: str) -> Path:
        path = temp_workdir / "data" / name
        path.write_text(text, encoding="utf-8")
        return path
    return _write


def make_response(status: int = 200, body=None, *, raw: bytes | None = None, reason: str = "OK") -> requests.Response:
    """Build a real requests.Response carrying ``body`` as JSON."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.encoding = "utf-8"
    if raw is not None:
        resp._content = raw
    elif body is not None:
        resp._content = json.dumps(body).encode("utf-8")
    else:
        resp._content = b""
    return resp


@pytest.fixture()
def mock_session() -> MagicMock:
    return MagicMock(spec=requests.Session)


@pytest.fixture()
def response_factory():
    return make_response
