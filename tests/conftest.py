"""
Shared pytest fixtures for all tests.

Provides in-memory transports so no test needs a running CouchDB server.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import unquote, urlsplit

import pytest

from couch_connector.clients.couch.CouchConnector import CouchConnector
from couch_connector.clients.transport.TransportInterface import QueryParams, TransportInterface
from couch_connector.clients.transport.models.TransportResponse import TransportResponse
from couch_connector.helper.HelperConfig import HelperConfig
from couch_connector.models.config import EnvConfig


def make_response(status: int, body: Any = None, message: str = "") -> TransportResponse:
    raw = b"" if body is None else json.dumps(body).encode("utf-8")
    return TransportResponse(status=status, message=message, raw_body=raw)


# =============================================================================
# TRANSPORTS
# =============================================================================

@dataclass
class SentRequest:
    method: str
    url: str
    params: QueryParams = field(default_factory=list)
    body: str | None = None

    @property
    def json_body(self) -> Any:
        return json.loads(self.body) if self.body is not None else None


class RecordingTransport(TransportInterface):
    """Answers requests with queued responses and records what was sent."""

    def __init__(self):
        super().__init__(helper_config=HelperConfig(logger=logging.getLogger("tests")))
        self.requests: list[SentRequest] = []
        self.responses: list[TransportResponse] = []
        self.closed = False

    def _get_engine_name(self) -> str:
        return "Recording"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    def queue(self, status: int, body: Any = None, message: str = "") -> None:
        self.responses.append(make_response(status, body, message))

    def close(self) -> None:
        self.closed = True

    def send(self, method, url, params=None, body=None) -> TransportResponse:
        self.requests.append(SentRequest(method, url, list(params or []), body))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        return self.responses.pop(0)


class FakeCouchServer(TransportInterface):
    """Minimal in-memory server for database administration requests."""

    def __init__(self):
        super().__init__(helper_config=HelperConfig(logger=logging.getLogger("tests")))
        self.databases: set[str] = set()

    def _get_engine_name(self) -> str:
        return "Fake"

    def _get_required_config(self) -> list[EnvConfig]:
        return []

    def send(self, method, url, params=None, body=None) -> TransportResponse:
        path = urlsplit(url).path
        if path == "/":
            return make_response(200, {"couchdb": "Welcome", "version": "3.3.3"}, "OK")
        if path == "/_all_dbs":
            return make_response(200, sorted(self.databases), "OK")

        name = unquote(path.strip("/"))
        if method == "PUT":
            if name in self.databases:
                return make_response(409, {"error": "file_exists"}, "Conflict")
            self.databases.add(name)
            return make_response(201, {"ok": True}, "Created")
        if method == "DELETE":
            if name not in self.databases:
                return make_response(404, {"error": "not_found"}, "Object Not Found")
            self.databases.remove(name)
            return make_response(202, {"ok": True}, "Accepted")
        if method == "GET":
            if name not in self.databases:
                return make_response(404, {"error": "not_found"}, "Object Not Found")
            return make_response(200, {"db_name": name, "doc_count": 0}, "OK")
        return make_response(405, {"error": "method_not_allowed"}, "Method Not Allowed")


# =============================================================================
# FIXTURES
# =============================================================================

@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def connector(transport) -> CouchConnector:
    return CouchConnector("mydb", "localhost", 5984, transport=transport)


@pytest.fixture
def server() -> FakeCouchServer:
    return FakeCouchServer()
