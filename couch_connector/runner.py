"""Runner entry point.

Checks the CouchDB server configured by COUCHDB_HOST / COUCHDB_PORT: logs its
version and databases and, if COUCHDB_DATABASE is set, that database's info.

Usage:
    python -m couch_connector.runner
"""

import sys

from couch_connector.clients.couch.CouchConnector import CouchConnector
from couch_connector.clients.couch.couch_admin import get_server_info, list_databases
from couch_connector.clients.couch.exceptions import CouchError
from couch_connector.clients.couch.url_helper import COUCH_PORT
from couch_connector.clients.transport.httpx.TransportHttpx import TransportHttpx
from couch_connector.helper.HelperConfig import HelperConfig
from couch_connector.logging.logging_setup import setup_logging


def main() -> int:
    """Run the server check and return the process exit status."""
    logger = setup_logging()
    config = HelperConfig(logger=logger)

    host = config.get_string_val("COUCHDB_HOST", default="localhost")
    port = config.get_number_val("COUCHDB_PORT", default=COUCH_PORT)
    database = config.get_string_val("COUCHDB_DATABASE", default="")

    try:
        with TransportHttpx(helper_config=config) as transport:
            server = get_server_info(host, port, transport=transport)
            logger.info("Connected to %s:%s, CouchDB version %s", host, port, server.get("version", "unknown"), color="green")

            databases = list_databases(host, port, transport=transport)
            logger.info("%d databases: %s", len(databases), ", ".join(databases))

            if database:
                with CouchConnector(database, host, port, transport=transport) as connector:
                    info = connector.get_info()
                    logger.info("Database '%s' holds %s documents", database, info.get("doc_count"), color="cyan")
    except CouchError as e:
        logger.error("CouchDB check failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
