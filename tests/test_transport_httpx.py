"""Tests for the httpx transport, using httpx.MockTransport instead of a network."""

import base64
import json

import httpx
import pytest

from couch_connector.clients.couch.CouchConnector import CouchConnector
from couch_connector.clients.couch.couch_admin import list_databases
from couch_connector.clients.transport.httpx.TransportHttpx import TransportHttpx


class RecordingHandler:
    """MockTransport handler returning a fixed response and keeping the requests."""

    def __init__(self, status: int = 200, body: bytes = b"{}"):
        self.status = status
        self.body = body
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return httpx.Response(self.status, content=self.body)


@pytest.fixture
def handler() -> RecordingHandler:
    return RecordingHandler()


@pytest.fixture
def httpx_transport(handler):
    transport = TransportHttpx(transport=httpx.MockTransport(handler))
    transport.boot()
    yield transport
    transport.close()


class TestTransportHttpx:

    def test_requires_boot(self, handler):
        transport = TransportHttpx(transport=httpx.MockTransport(handler))

        with pytest.raises(RuntimeError):
            transport.send("GET", "http://localhost:5984/")
        assert handler.requests == []

    def test_response_is_not_decoded(self, handler, httpx_transport):
        handler.status = 404
        handler.body = b'{"error":"not_found"}'

        response = httpx_transport.send("GET", "http://localhost:5984/mydb/a")

        assert response.status == 404
        assert response.message == "Not Found"
        assert response.raw_body == b'{"error":"not_found"}'
        assert response.is_success is False

    def test_percent_encoding_is_preserved(self, handler, httpx_transport):
        httpx_transport.send("GET", "http://localhost:5984/fu%2Fgu/a%2Fb")

        assert handler.requests[0].url.raw_path == b"/fu%2Fgu/a%2Fb"

    def test_repeated_query_params(self, handler, httpx_transport):
        httpx_transport.send("GET", "http://localhost:5984/mydb/_all_docs", params=[("key", '"a"'), ("key", '"b"')])

        assert handler.requests[0].url.params.get_list("key") == ['"a"', '"b"']

    def test_json_body(self, handler, httpx_transport):
        httpx_transport.send("PUT", "http://localhost:5984/mydb/a", body='{"n": 1}')

        request = handler.requests[0]
        assert request.method == "PUT"
        assert request.headers["content-type"] == "application/json"
        assert json.loads(request.content) == {"n": 1}

    def test_basic_auth_from_config(self, monkeypatch, handler):
        monkeypatch.setenv("COUCHDB_HTTPX_USERNAME", "admin")
        monkeypatch.setenv("COUCHDB_HTTPX_PASSWORD", "secret")

        with TransportHttpx(transport=httpx.MockTransport(handler)) as transport:
            transport.send("GET", "http://localhost:5984/")

        expected = "Basic " + base64.b64encode(b"admin:secret").decode()
        assert handler.requests[0].headers["authorization"] == expected

    def test_timeout_from_config(self, monkeypatch):
        monkeypatch.setenv("COUCHDB_TIMEOUT", "2.5")

        assert TransportHttpx().timeout == 2.5


class TestConnectorOverHttpx:

    def test_view_over_the_wire(self, handler, httpx_transport):
        handler.body = json.dumps({"total_rows": 1, "offset": 0, "rows": [{"id": "a", "key": "a", "value": 1}]}).encode()
        connector = CouchConnector("mydb", transport=httpx_transport)

        result = connector.view("blog/by_title", {"key": "a"})

        request = handler.requests[0]
        assert request.url.path == "/mydb/_view/blog/by_title"
        assert request.url.params["key"] == '"a"'
        assert list(result) == [1]

    def test_list_databases_over_the_wire(self, handler, httpx_transport):
        handler.body = b'["_users", "mydb"]'

        assert list_databases(transport=httpx_transport) == ["_users", "mydb"]
        assert str(handler.requests[0].url) == "http://localhost:5984/_all_dbs"


class TestTransportConfig:

    def test_unsupported_value_type(self):
        """Only string and number configuration values are supported."""
        transport = TransportHttpx()

        assert transport.get_config_val("USERNAME", default="", val_type="string") == ""
        with pytest.raises(ValueError):
            transport.get_config_val("VERIFY", default=True, val_type="bool")
