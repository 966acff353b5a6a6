"""Database administration on a CouchDB server.

These functions work without a CouchConnector: they create, delete and list
databases on a host. URLs are built with the same validation the connector uses.
"""

from contextlib import contextmanager
from typing import Any, Iterator

from couch_connector.clients.couch.CouchConnector import CouchConnector
from couch_connector.clients.couch.exceptions import AlreadyExistsError, NotFoundError, UnexpectedResponseError
from couch_connector.clients.couch.url_helper import COUCH_PORT, make_database_url, make_server_url
from couch_connector.clients.transport.TransportInterface import TransportInterface
from couch_connector.clients.transport.httpx.TransportHttpx import TransportHttpx
from couch_connector.clients.transport.models.TransportResponse import TransportResponse
from couch_connector.helper.JsonCodec import JsonCodec

_codec = JsonCodec()


@contextmanager
def _transport_scope(transport: TransportInterface | None) -> Iterator[TransportInterface]:
    """Yield the given transport, or a temporary httpx transport that is closed afterwards."""
    if transport is not None:
        yield transport
        return
    with TransportHttpx() as temporary:
        yield temporary


def _unexpected(transport: TransportInterface, url: str, response: TransportResponse) -> UnexpectedResponseError:
    transport.logging.error("Unexpected response from %s: %d %s", url, response.status, response.message)
    return UnexpectedResponseError(response.status, response.message)


def create_database(name: str, host: str = "localhost", port: Any = COUCH_PORT, transport: TransportInterface | None = None) -> CouchConnector:
    """
    Create a database on a host.

    Returns:
        CouchConnector: A connector to the new database. It uses the given transport, or its own one.

    Raises:
        AlreadyExistsError: If the database already exists.
        UnexpectedResponseError: On any other status than 201.
    """
    url = make_database_url(name, host, port)
    with _transport_scope(transport) as active:
        response = active.send("PUT", url)
        if response.status == 201:
            active.logging.info("Created database '%s' on %s", name, host)
            return CouchConnector(name, host, port, transport=transport)
        if response.status == 409:
            raise AlreadyExistsError(f"Database '{name}' already exists", response.status)
        raise _unexpected(active, url, response)


def delete_database(name: str, host: str = "localhost", port: Any = COUCH_PORT, transport: TransportInterface | None = None) -> bool:
    """
    Delete a database from a host.

    Returns:
        bool: True if the database was deleted.

    Raises:
        NotFoundError: If the database does not exist.
        UnexpectedResponseError: On any other status than 202.
    """
    url = make_database_url(name, host, port)
    with _transport_scope(transport) as active:
        response = active.send("DELETE", url)
        if response.status == 202:
            active.logging.info("Deleted database '%s' on %s", name, host)
            return True
        if response.status == 404:
            raise NotFoundError(f"Database '{name}' does not exist", response.status)
        raise _unexpected(active, url, response)


def list_databases(host: str = "localhost", port: Any = COUCH_PORT, transport: TransportInterface | None = None) -> list[str]:
    """
    List the names of all databases on a host.

    Raises:
        UnexpectedResponseError: On any non-success status.
    """
    url = make_server_url(host, port) + "_all_dbs"
    with _transport_scope(transport) as active:
        response = active.send("GET", url)
        if not response.is_success:
            raise _unexpected(active, url, response)
        return list(_codec.decode(response.raw_body))


def get_server_info(host: str = "localhost", port: Any = COUCH_PORT, transport: TransportInterface | None = None) -> dict:
    """
    Fetch the welcome document of a server, which names its version.

    Raises:
        UnexpectedResponseError: On any non-success status.
    """
    url = make_server_url(host, port)
    with _transport_scope(transport) as active:
        response = active.send("GET", url)
        if not response.is_success:
            raise _unexpected(active, url, response)
        return _codec.decode(response.raw_body)
