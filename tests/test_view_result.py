"""Tests for view result decoding."""

from couch_connector.clients.couch.models.Document import Document
from couch_connector.clients.couch.models.ViewResult import ReturnMode, ViewResult


class TestViewResult:

    def test_value_mode(self):
        result = ViewResult({"total_rows": 2, "offset": 0, "rows": [
            {"id": "a", "key": "k1", "value": 1},
            {"id": "b", "key": "k2", "value": 2},
        ]})

        assert len(result) == 2
        assert list(result) == [1, 2]
        assert result[1] == 2
        assert result.values == [1, 2]
        assert result.documents == [None, None]
        assert result.offset == 0

    def test_reduced_view_without_total_rows(self):
        result = ViewResult({"rows": [{"key": None, "value": 42}]})

        assert result.total_rows == 1
        assert result.rows[0].id is None
        assert list(result) == [42]

    def test_document_mode_prefers_included_doc(self, connector):
        result = ViewResult({"total_rows": 1, "rows": [
            {"id": "a", "key": "a", "value": {"rev": "1-a"}, "doc": {"_id": "a", "_rev": "1-a", "title": "T"}},
        ]}, return_mode=ReturnMode.DOCUMENT, connector=connector)

        doc = result[0]
        assert isinstance(doc, Document)
        assert doc["title"] == "T"
        assert doc.url == "http://localhost:5984/mydb/a"

    def test_document_mode_uses_row_id_for_url(self, connector):
        result = ViewResult({"rows": [{"id": "x/y", "key": 1, "value": {"n": 1, "_rev": "1-a"}}]},
                            return_mode="document", connector=connector)

        doc = result[0]
        assert result.return_mode == ReturnMode.DOCUMENT
        assert doc.url == "http://localhost:5984/mydb/x%2Fy"
        assert doc.id == "x/y"
        assert doc.revision == "1-a"
        assert doc.content == {"n": 1}

    def test_document_mode_does_not_modify_row_value(self):
        result = ViewResult({"rows": [{"id": "a", "key": 1, "value": {"n": 1}}]}, return_mode=ReturnMode.DOCUMENT)

        assert result[0].id == "a"
        assert result.rows[0].value == {"n": 1}

    def test_document_mode_without_mapping(self):
        result = ViewResult({"rows": [{"id": "a", "key": 1, "value": 5}]}, return_mode=ReturnMode.DOCUMENT)

        assert list(result) == [None]
        assert result.rows[0].value == 5

    def test_document_mode_preserves_order(self):
        rows = [{"id": str(i), "key": -i, "value": {"_id": str(i)}} for i in range(10)]

        result = ViewResult({"total_rows": 10, "rows": rows}, return_mode=ReturnMode.DOCUMENT)

        assert [doc.id for doc in result] == [str(i) for i in range(10)]
        assert [row.key for row in result.rows] == [-i for i in range(10)]

    def test_custom_document_class(self):
        class Post(Document):
            pass

        result = ViewResult({"rows": [{"id": "a", "key": 1, "value": {"_id": "a"}}]},
                            return_mode=ReturnMode.DOCUMENT, document_class=Post)

        assert isinstance(result[0], Post)
