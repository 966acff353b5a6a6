from collections.abc import Mapping
from typing import Any

from couch_connector.clients.couch.exceptions import (
    InvalidArgumentError,
    NotFoundError,
    RevisionConflictError,
    TypeMismatchError,
    UnexpectedResponseError,
    ViewNotFoundError,
)
from couch_connector.clients.couch.models.Document import Document
from couch_connector.clients.couch.models.ViewResult import ReturnMode, ViewResult
from couch_connector.clients.couch.models.responses import _AllDocsResponse, _CreateResponse, _UpdateResponse
from couch_connector.clients.couch.url_helper import COUCH_PORT, make_database_url, make_document_url
from couch_connector.clients.transport.TransportInterface import QueryParams, TransportInterface
from couch_connector.clients.transport.httpx.TransportHttpx import TransportHttpx
from couch_connector.clients.transport.models.TransportResponse import TransportResponse
from couch_connector.helper.HelperConfig import HelperConfig
from couch_connector.helper.JsonCodec import JsonCodec


class CouchConnector:
    """
    Connector to a single CouchDB database.

    Every operation issues exactly one HTTP request through the transport and maps the
    response status to a return value or a CouchError. Revision conflicts are detected by
    the server and reported as RevisionConflictError, they are never retried here.
    """

    def __init__(
        self,
        name: str,
        host: str = "localhost",
        port: Any = COUCH_PORT,
        transport: TransportInterface | None = None,
        codec: JsonCodec | None = None,
    ):
        self._url = make_database_url(name, host, port)
        self._name = name
        self._codec = codec if codec is not None else JsonCodec()

        # a transport created here is owned and closed by this connector
        self._owns_transport = transport is None
        if transport is None:
            transport = TransportHttpx()
            transport.boot()
        self._transport = transport
        self.logging = transport.logging

    @classmethod
    def from_config(cls, name: str, helper_config: HelperConfig) -> "CouchConnector":
        """
        Build a connector from COUCHDB_HOST and COUCHDB_PORT with an httpx transport.
        """
        host = helper_config.get_string_val("COUCHDB_HOST", default="localhost")
        port = helper_config.get_number_val("COUCHDB_PORT", default=COUCH_PORT)
        # validated before the transport is booted
        make_database_url(name, host, port)
        transport = TransportHttpx(helper_config=helper_config)
        transport.boot()
        connector = cls(name, host, port, transport=transport)
        connector._owns_transport = True
        return connector

    ##########################################
    ################ GETTER ##################
    ##########################################

    def get_url(self) -> str:
        """
        Returns:
            str: The URL of this database, always ending with "/".
        """
        return self._url

    @property
    def name(self) -> str:
        return self._name

    ##########################################
    ############### DATABASE #################
    ##########################################

    def get_info(self) -> dict:
        """
        Fetch the information document of this database (doc_count, update_seq, ...).

        Raises:
            NotFoundError: If the database does not exist.
            UnexpectedResponseError: On any other non-success status.
        """
        response = self._request("GET", self._url)
        if not response.is_success:
            if response.status == 404:
                raise NotFoundError(f"Database '{self._name}' does not exist")
            raise self._unexpected(response)
        return self._decode(response)

    def get_all_documents(self, start_key: str | None = None, limit: int | None = None, descending: bool = False) -> list[dict]:
        """
        List the rows of the _all_docs index.

        Args:
            start_key (str | None): Key to start from, sent as given without JSON encoding.
            limit (int | None): Maximum number of rows.
            descending (bool): Return rows in descending key order.

        Returns:
            list[dict]: The rows, each with "id", "key" and "value".
        """
        params: QueryParams = []
        if start_key is not None:
            params.append(("startkey", start_key))
        if limit is not None:
            params.append(("limit", str(int(limit))))
        if descending:
            params.append(("descending", "true"))

        response = self._request("GET", self._url + "_all_docs", params=params)
        if not response.is_success:
            if response.status == 404:
                raise NotFoundError(f"Database '{self._name}' does not exist")
            raise self._unexpected(response)
        return _AllDocsResponse.model_validate(self._decode(response)).rows

    ##########################################
    ############### DOCUMENTS ################
    ##########################################

    def retrieve(
        self,
        doc_id: str,
        document_class: type[Document] = Document,
        revision: str | None = None,
        full: bool = False,
    ) -> Document | None:
        """
        Fetch a document.

        Args:
            doc_id (str): The document id.
            document_class (type[Document]): Class of the returned document, must extend Document.
            revision (str | None): Fetch this revision instead of the latest one.
            full (bool): Ask the server for the full document information.

        Returns:
            Document | None: The document, or None if it does not exist.

        Raises:
            TypeMismatchError: If document_class does not extend Document.
            UnexpectedResponseError: On any status other than 200 and 404.
        """
        if not isinstance(document_class, type) or not issubclass(document_class, Document):
            raise TypeMismatchError(f"Class {document_class!r} is expected to extend Document")

        url = make_document_url(self._url, doc_id)
        params: QueryParams = []
        if revision is not None:
            params.append(("rev", revision))
        if full:
            params.append(("full", "true"))

        response = self._request("GET", url, params=params)
        if response.status == 200:
            return document_class(self._decode(response), url, self)
        if response.status == 404:
            self.logging.debug("Document '%s' not found in %s", doc_id, self._url)
            return None
        raise self._unexpected(response)

    def create(self, content: Mapping[str, Any] | Document, doc_id: str | None = None) -> Document:
        """
        Store a new document. Without an id the server assigns one.

        Returns:
            Document: The stored document with its id and first revision.

        Raises:
            UnexpectedResponseError: If the server does not answer with 201, e.g. 409 for an existing id.
        """
        data = content.to_dict() if isinstance(content, Document) else dict(content)
        body = self._codec.encode(data)

        if doc_id:
            response = self._request("PUT", make_document_url(self._url, doc_id), body=body)
        else:
            response = self._request("POST", self._url, body=body)

        if response.status != 201:
            raise self._unexpected(response)

        created = _CreateResponse.model_validate(self._decode(response))
        data["_id"] = created.id
        data["_rev"] = created.rev
        return Document(data, make_document_url(self._url, created.id), self)

    def update(self, data: Mapping[str, Any] | Document, url: str | None = None) -> str:
        """
        Store a changed document.

        The data must either be a Document, or a mapping with an "_id" member (or an explicit url).
        In both cases the revision the change is based on ("_rev") must be known.

        Returns:
            str: The new revision. A passed Document is updated to it as well.

        Raises:
            InvalidArgumentError: If no URL or no revision can be determined.
            RevisionConflictError: If the revision is not the latest one on the server.
            UnexpectedResponseError: On any other status than 201.
        """
        document = None
        if isinstance(data, Document):
            document = data
            if not url:
                url = data.url
            payload = data.to_dict(include_meta=True)
        elif isinstance(data, Mapping):
            payload = dict(data)
            if not url and payload.get("_id") is not None:
                url = make_document_url(self._url, payload["_id"])
        else:
            raise InvalidArgumentError("Data is expected to be either a mapping or a Document")

        # the bare database URL does not address a document
        if not url or url == self._url:
            raise InvalidArgumentError("Unable to update a document without a known URL")
        if payload.get("_rev") is None:
            raise InvalidArgumentError("Unable to update a document without a known revision")

        response = self._request("PUT", url, body=self._codec.encode(payload))
        if response.status == 201:
            revision = _UpdateResponse.model_validate(self._decode(response)).rev
            if document is not None:
                document.set_revision(revision)
            return revision
        if response.status == 409:
            self.logging.warning("Revision conflict while updating %s", url)
            raise RevisionConflictError()
        raise self._unexpected(response)

    def delete(self, doc_id: str, revision: str) -> bool:
        """
        Delete a document at the given revision.

        Returns:
            bool: True if deleted, False if the document does not exist.

        Raises:
            UnexpectedResponseError: On any status other than 202 and 404, e.g. 409 for an outdated revision.
        """
        response = self._request("DELETE", make_document_url(self._url, doc_id), params=[("rev", revision)])
        if response.status == 202:
            return True
        if response.status == 404:
            self.logging.debug("Document '%s' to delete not found in %s", doc_id, self._url)
            return False
        raise self._unexpected(response)

    ##########################################
    ################# VIEWS ##################
    ##########################################

    def view(
        self,
        view_name: str,
        params: Mapping[str, Any] | None = None,
        return_mode: ReturnMode = ReturnMode.VALUE,
        document_class: type[Document] = Document,
    ) -> ViewResult:
        """
        Query a view.

        Every parameter value is sent JSON encoded, so strings are sent quoted, e.g. key="a" becomes key=%22a%22.

        Args:
            view_name (str): The view path below _view/, e.g. "blog/by_date".
            params (Mapping[str, Any] | None): View query parameters like key, startkey or limit.
            return_mode (ReturnMode): Whether the result yields row values or documents.
            document_class (type[Document]): Class of resolved documents.

        Raises:
            TypeMismatchError: If document_class does not extend Document.
            ViewNotFoundError: If the server answers 500, its reply for a missing view.
            UnexpectedResponseError: On any other status than 200.
        """
        if not isinstance(document_class, type) or not issubclass(document_class, Document):
            raise TypeMismatchError(f"Class {document_class!r} is expected to extend Document")

        query: QueryParams = [(key, self._codec.encode(value)) for key, value in (params or {}).items()]
        response = self._request("GET", f"{self._url}_view/{view_name}", params=query)

        if response.status == 200:
            return ViewResult(self._decode(response), return_mode=return_mode, connector=self, document_class=document_class)
        if response.status == 500:
            raise ViewNotFoundError(f"View document '{view_name}' does not exist", response.status)
        raise self._unexpected(response)

    ##########################################
    ############### INTERNALS ################
    ##########################################

    def _request(self, method: str, url: str, params: QueryParams | None = None, body: str | None = None) -> TransportResponse:
        return self._transport.send(method, url, params=params or None, body=body)

    def _decode(self, response: TransportResponse) -> Any:
        return self._codec.decode(response.raw_body)

    def _unexpected(self, response: TransportResponse) -> UnexpectedResponseError:
        self.logging.error("Unexpected response from %s: %d %s", self._url, response.status, response.message)
        return UnexpectedResponseError(response.status, response.message)

    def close(self) -> None:
        """Close the transport if this connector created it."""
        if self._owns_transport:
            self._transport.close()

    def __enter__(self) -> "CouchConnector":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"CouchConnector(url={self._url!r})"
