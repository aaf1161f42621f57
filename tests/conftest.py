"""Shared test fixtures and helpers."""

from datetime import date

import pytest

import lamaison_app.llm_client as llm_client
from lamaison_app.calendar_grid import CalendarController
from lamaison_app.storage import init_storage, LocalStorage

TODAY = date(2026, 10, 19)


@pytest.fixture
def conn(tmp_path):
    connection = init_storage(str(tmp_path / "storage.db"))
    yield connection
    connection.close()


@pytest.fixture
def storage(conn):
    return LocalStorage(conn, "client-a")


@pytest.fixture
def calendar():
    return CalendarController(today=TODAY)


class FakeResponse:
    """Minimal stand-in for requests.Response."""

    def __init__(self, payload=None, status_code=200, text=""):
        self._payload = payload
        self.status_code = status_code
        self.text = text

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 400

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


@pytest.fixture
def fake_post(monkeypatch):
    """Patch requests.post in the LLM client; returns the list of captured calls."""
    calls = []

    def install(payload=None, status_code=200, exc=None):
        response = FakeResponse(payload, status_code)

        def _post(url, headers=None, json=None, timeout=None):
            calls.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
            if exc is not None:
                raise exc
            return response

        monkeypatch.setattr(llm_client.requests, "post", _post)
        return calls

    return install
