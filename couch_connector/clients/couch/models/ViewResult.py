"""Decoded result of a view query."""

from enum import Enum
from typing import TYPE_CHECKING, Any, Iterator

from pydantic import BaseModel, ConfigDict

from couch_connector.clients.couch.models.Document import Document
from couch_connector.clients.couch.models.responses import _ViewResponse, _ViewRowResponse
from couch_connector.clients.couch.url_helper import make_document_url

if TYPE_CHECKING:
    from couch_connector.clients.couch.CouchConnector import CouchConnector


class ReturnMode(str, Enum):
    """What iterating a ViewResult yields: the raw row values or documents built from them."""
    VALUE = "value"
    DOCUMENT = "document"


class ViewRow(BaseModel):
    """
    Represents a single row of a view result, in the order returned by the server.
    """
    model_config = ConfigDict(arbitrary_types_allowed=True)

    key: Any = None
    value: Any = None
    id: str | None = None
    document: Document | None = None


class ViewResult:
    """
    Rows of a view query.

    Iteration, indexing and len() work on the rows. Depending on the return mode a row is
    represented by its value or by the Document resolved from it.
    """

    def __init__(
        self,
        data: dict,
        return_mode: ReturnMode = ReturnMode.VALUE,
        connector: "CouchConnector | None" = None,
        document_class: type[Document] = Document,
    ):
        response = _ViewResponse.model_validate(data)
        self.return_mode = ReturnMode(return_mode)
        self.offset = response.offset

        rows = []
        for item in response.rows:
            document = None
            if self.return_mode == ReturnMode.DOCUMENT:
                document = self._resolve_document(item, connector, document_class)
            rows.append(ViewRow(key=item.key, value=item.value, id=item.id, document=document))
        self.rows: list[ViewRow] = rows

        # reduced views do not report total_rows
        self.total_rows: int = response.total_rows if response.total_rows is not None else len(rows)

    @staticmethod
    def _resolve_document(item: _ViewRowResponse, connector: "CouchConnector | None", document_class: type[Document]) -> Document | None:
        """
        Build a document from the included doc of a row, or from its value if that is a mapping.
        """
        source = item.doc if item.doc is not None else item.value
        if not isinstance(source, dict):
            return None
        if source.get("_id") is None and item.id is not None:
            source = {**source, "_id": item.id}
        doc_id = source.get("_id")
        url = make_document_url(connector.get_url(), doc_id) if connector is not None and doc_id is not None else None
        return document_class(source, url, connector)

    def _represent(self, row: ViewRow) -> Any:
        return row.document if self.return_mode == ReturnMode.DOCUMENT else row.value

    @property
    def values(self) -> list[Any]:
        return [row.value for row in self.rows]

    @property
    def documents(self) -> list[Document | None]:
        return [row.document for row in self.rows]

    def __iter__(self) -> Iterator[Any]:
        for row in self.rows:
            yield self._represent(row)

    def __len__(self) -> int:
        return len(self.rows)

    def __getitem__(self, index: int) -> Any:
        return self._represent(self.rows[index])

    def __repr__(self) -> str:
        return f"ViewResult(total_rows={self.total_rows}, rows={len(self.rows)}, return_mode={self.return_mode.value})"
