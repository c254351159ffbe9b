"""Tests for the dataset download script."""

import pytest
import requests

from boundary_api import fetch_datasets
from boundary_api.datasets import NATURAL_EARTH
from conftest import COUNTRIES, FakeResponse, FakeSession


@pytest.fixture
def env(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("LOCK_DIR", str(tmp_path / "locks"))
    return tmp_path / "data"


@pytest.fixture
def upstream(monkeypatch):
    session = FakeSession({r.url: FakeResponse(200, COUNTRIES) for r in NATURAL_EARTH.downloads})
    monkeypatch.setattr(requests, "Session", lambda: session)
    return session


def test_download_all(env, upstream, capsys):
    assert fetch_datasets.main([]) == 0
    assert sorted(p.name for p in env.iterdir()) == sorted(NATURAL_EARTH.stored_filenames())
    assert "Successfully processed 3 files" in capsys.readouterr().out


def test_download_failure_exit_code(env, upstream):
    upstream.responses[NATURAL_EARTH.downloads[2].url] = FakeResponse(404, b"")
    assert fetch_datasets.main(["--dataset", "NATURAL_EARTH"]) == 1


def test_status(env, upstream, capsys):
    assert fetch_datasets.main(["--status"]) == 0
    out = capsys.readouterr().out
    assert "NATURAL_EARTH: incomplete" in out
    assert upstream.calls == []


def test_clear(env, upstream, capsys):
    fetch_datasets.main([])
    assert fetch_datasets.main(["--clear"]) == 0
    assert list(env.iterdir()) == []
    assert "Cleared 3 files." in capsys.readouterr().out


def test_unknown_dataset(env, upstream):
    assert fetch_datasets.main(["--dataset", "NOPE"]) == 2
