"""Shared pytest fixtures for accessfilter tests."""
from __future__ import annotations

import json
from datetime import date
from pathlib import Path

import pytest

from accessfilter.models import LogLine


@pytest.fixture()
def make_line():
    """Return a factory for LogLines with sensible defaults."""

    def _make(**overrides) -> LogLine:
        fields = {
            "date": date(2024, 3, 15),
            "remote_addr": "10.0.0.5",
            "method": "GET",
            "path": "/index.html",
            "referer": "-",
            "status": 200,
        }
        fields.update(overrides)
        return LogLine(**fields)

    return _make


@pytest.fixture()
def tmp_records_file(tmp_path: Path):
    """Return a factory that writes records (dicts or raw strings) as NDJSON."""

    def _make(records: list, name: str = "access.ndjson") -> Path:
        p = tmp_path / name
        rows = [r if isinstance(r, str) else json.dumps(r) for r in records]
        p.write_text("\n".join(rows) + "\n", encoding="utf-8")
        return p

    return _make


@pytest.fixture()
def access_records() -> list[dict]:
    return [
        {"date": "2024-03-14", "remote_addr": "10.0.0.5", "method": "GET",
         "path": "/blog/first", "referer": "https://example.com/", "status": 200},
        {"date": "2024-03-15", "remote_addr": "10.0.0.5", "method": "GET",
         "path": "/missing", "referer": "-", "status": 404},
        {"date": "2024-03-15T10:00:01+00:00", "remote_addr": "192.168.0.1", "method": "POST",
         "path": "/api/v1/jobs", "referer": "-", "status": 404},
        {"date": "2024-03-16", "remote_addr": "10.0.0.7", "method": "HEAD",
         "path": "/static/app.css", "referer": "-", "status": 503},
    ]


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path: Path) -> None:
    """Keep ACCESSFILTER_* variables and stray .env files out of the tests."""
    monkeypatch.chdir(tmp_path)
    for name in ("DATE", "IP", "METHOD", "PATH", "REFERER", "STATUS", "LOG_LEVEL"):
        monkeypatch.delenv(f"ACCESSFILTER_{name}", raising=False)
