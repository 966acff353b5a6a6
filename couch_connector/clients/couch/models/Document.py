"""Generic CouchDB document model."""

from collections.abc import Mapping
from typing import TYPE_CHECKING, Any, Iterator

from couch_connector.clients.couch.exceptions import InvalidArgumentError
from couch_connector.clients.couch.url_helper import make_document_url

if TYPE_CHECKING:
    from couch_connector.clients.couch.CouchConnector import CouchConnector


class Document:
    """
    A single document of a database: its id, its current revision, its URL and its content.

    The "_id" and "_rev" members of the raw data become id and revision. All other members,
    including other "_" prefixed ones like "_attachments", are the content of the document.
    Subclasses must keep the constructor signature, since CouchConnector.retrieve() builds them.
    """

    def __init__(self, data: Mapping[str, Any] | None = None, url: str | None = None, connector: "CouchConnector | None" = None):
        fields = dict(data or {})
        self._id: str | None = fields.pop("_id", None)
        self._revision: str | None = fields.pop("_rev", None)
        self._fields: dict[str, Any] = fields
        self._connector = connector

        if url is None and connector is not None:
            url = make_document_url(connector.get_url(), self._id) if self._id is not None else connector.get_url()
        self._url = url

    @property
    def id(self) -> str | None:
        return self._id

    @property
    def revision(self) -> str | None:
        return self._revision

    @property
    def url(self) -> str | None:
        return self._url

    @property
    def connector(self) -> "CouchConnector | None":
        return self._connector

    @property
    def content(self) -> dict[str, Any]:
        """A copy of the document fields without _id and _rev."""
        return dict(self._fields)

    def set_revision(self, revision: str) -> None:
        """Replace the revision after a successful write."""
        self._revision = revision

    def to_dict(self, include_meta: bool = False) -> dict[str, Any]:
        """
        Serialize the document back to a plain mapping.

        Args:
            include_meta (bool): Add "_id" and "_rev" when known, as needed to submit an update.

        Returns:
            dict[str, Any]: The document data.
        """
        data = dict(self._fields)
        if include_meta:
            if self._id is not None:
                data["_id"] = self._id
            if self._revision is not None:
                data["_rev"] = self._revision
        return data

    ################ PERSISTENCE ##################
    def save(self) -> str:
        """
        Store the local changes of this document.

        Returns:
            str: The new revision.

        Raises:
            InvalidArgumentError: If the document is not bound to a connector or has no revision.
            RevisionConflictError: If the document was changed on the server in the meantime.
        """
        if self._connector is None:
            raise InvalidArgumentError("Unable to save a document that is not bound to a database")
        return self._connector.update(self)

    def delete(self) -> bool:
        """
        Delete this document at its current revision.

        Returns:
            bool: True if deleted, False if the document did not exist.
        """
        if self._connector is None:
            raise InvalidArgumentError("Unable to delete a document that is not bound to a database")
        if self._id is None or self._revision is None:
            raise InvalidArgumentError("Unable to delete a document without a known id and revision")
        return self._connector.delete(self._id, self._revision)

    ################ FIELD ACCESS ##################
    def get(self, key: str, default: Any = None) -> Any:
        return self._fields.get(key, default)

    def __getitem__(self, key: str) -> Any:
        return self._fields[key]

    def __setitem__(self, key: str, value: Any) -> None:
        if key in ("_id", "_rev"):
            raise KeyError(f"'{key}' is managed by the database and cannot be set")
        self._fields[key] = value

    def __delitem__(self, key: str) -> None:
        del self._fields[key]

    def __contains__(self, key: object) -> bool:
        return key in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self._id!r}, revision={self._revision!r})"
