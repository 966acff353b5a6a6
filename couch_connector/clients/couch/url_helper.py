"""Validated construction of server, database and document URLs.

These functions are the only place where CouchDB URLs are assembled. Both
CouchConnector and the couch_admin functions call them.
"""

import re
from typing import Any
from urllib.parse import quote

from couch_connector.clients.couch.exceptions import InvalidHostError, InvalidNameError, InvalidPortError

COUCH_PORT = 5984

# names starting with "_" are reserved for server endpoints like _all_dbs
_NAME_PATTERN = re.compile(r"[a-z0-9][a-z0-9_$()+\-/]*")
_HOST_LABEL = r"[a-zA-Z0-9](?:[a-zA-Z0-9\-]{0,61}[a-zA-Z0-9])?"
_HOST_PATTERN = re.compile(rf"{_HOST_LABEL}(?:\.{_HOST_LABEL})*")
_HOST_MAX_LENGTH = 254


def validate_name(name: Any) -> str:
    """
    Validates a database name.

    Raises:
        InvalidNameError: If the name contains characters other than lowercase letters, digits and _$()+-/ or starts with "_".
    """
    if not isinstance(name, str) or not _NAME_PATTERN.fullmatch(name):
        raise InvalidNameError(f"Invalid db name: '{name}'")
    return name


def validate_host(host: Any) -> str:
    """
    Validates a host name: dot separated labels of 1-63 letters, digits or hyphens, 254 characters at most.

    Raises:
        InvalidHostError: If the host does not follow that grammar.
    """
    if not isinstance(host, str) or len(host) > _HOST_MAX_LENGTH or not _HOST_PATTERN.fullmatch(host):
        raise InvalidHostError(f"Invalid host name: '{host}'")
    return host


def validate_port(port: Any) -> int:
    """
    Coerces a port to an integer. None and 0 select the default CouchDB port.

    Raises:
        InvalidPortError: If the port is not numeric or outside 1-65535.
    """
    if port is None:
        return COUCH_PORT
    if isinstance(port, bool):
        raise InvalidPortError(f"Invalid db port: '{port}'")
    try:
        number = int(port.strip()) if isinstance(port, str) else int(port)
    except (TypeError, ValueError):
        raise InvalidPortError(f"Invalid db port: '{port}'")
    if number == 0:
        return COUCH_PORT
    if number < 0x1 or number > 0xFFFF:
        raise InvalidPortError(f"Invalid db port: '{port}'")
    return number


def make_server_url(host: str, port: Any = COUCH_PORT) -> str:
    """
    Returns the root URL of a CouchDB server, e.g. "http://localhost:5984/".
    """
    return f"http://{validate_host(host)}:{validate_port(port)}/"


def make_database_url(name: str, host: str = "localhost", port: Any = COUCH_PORT) -> str:
    """
    Validates all parts and returns the URL of a database.

    Example:
        >>> make_database_url("fu/gu", "couch.example.net", 13)
        'http://couch.example.net:13/fu%2Fgu/'

    Returns:
        str: An absolute URL which always ends with "/".

    Raises:
        InvalidNameError: If the name is invalid.
        InvalidHostError: If the host is invalid.
        InvalidPortError: If the port is invalid.
    """
    name = validate_name(name)
    return make_server_url(host, port) + name.replace("/", "%2F") + "/"


def make_document_url(database_url: str, doc_id: str) -> str:
    """
    Returns the URL of a document inside a database. The id is fully percent encoded, so "/" becomes "%2F".
    """
    return database_url + quote(str(doc_id), safe="")
