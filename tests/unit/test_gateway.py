"""Unit tests for the persistence gateway."""

import pytest
from sqlalchemy.exc import OperationalError

from harbourmaster.errors import MissingReferenceError, PersistenceError, RecordNotFoundError
from harbourmaster.models import Shape
from harbourmaster.pipeline.stages import to_columns, validate_record


@pytest.fixture
def qna_columns(qna_cleaned, kioni_id) -> dict:
    return to_columns(Shape.QNA, validate_record(Shape.QNA, qna_cleaned), kioni_id, "row-1")


class TestHarbourRegistry:

    def test_find_harbours(self, gateway, kioni_id, add_harbour):
        add_harbour("Vathi")
        assert gateway.find_harbours("kioni") == [(kioni_id, "Kioni")]
        assert gateway.find_harbours("Fiskardo") == []

    def test_harbour_names(self, gateway, kioni_id, add_harbour):
        add_harbour("Vathi")
        assert sorted(gateway.harbour_names()) == ["Kioni", "Vathi"]


class TestInsert:

    def test_insert_and_read_back(self, gateway, qna_columns):
        record_id = gateway.insert(Shape.QNA, qna_columns)

        row = gateway.get_record(Shape.QNA, record_id)
        assert row["question"] == qna_columns["question"]
        assert row["tags"] == qna_columns["tags"]
        assert row["source_row_id"] == "row-1"
        assert row["embedding"] is None
        assert gateway.count(Shape.QNA) == 1

    def test_vanished_harbour(self, gateway, qna_columns):
        qna_columns["harbour_id"] = "00000000-0000-0000-0000-000000000000"

        with pytest.raises(MissingReferenceError) as exc_info:
            gateway.insert(Shape.QNA, qna_columns)

        assert exc_info.value.payload == qna_columns
        assert gateway.count(Shape.QNA) == 0

    def test_storage_failure(self, gateway, qna_columns, monkeypatch):
        def broken_flush(self, *args, **kwargs):
            raise OperationalError("INSERT", {}, Exception("disk I/O error"))

        monkeypatch.setattr("sqlalchemy.orm.Session.flush", broken_flush)

        with pytest.raises(PersistenceError) as exc_info:
            gateway.insert(Shape.QNA, qna_columns)

        error = exc_info.value
        assert error.status_code == 500
        assert error.payload == qna_columns
        assert "disk I/O error" in error.details["db_error"]


class TestEmbeddingColumn:

    def test_set_embedding_overwrites(self, gateway, qna_columns):
        record_id = gateway.insert(Shape.QNA, qna_columns)

        gateway.set_embedding(Shape.QNA, record_id, [1.0, 2.0])
        gateway.set_embedding(Shape.QNA, record_id, [3.0])

        assert gateway.get_record(Shape.QNA, record_id)["embedding"] == [3.0]
        assert gateway.count(Shape.QNA) == 1

    def test_unknown_row(self, gateway):
        with pytest.raises(RecordNotFoundError):
            gateway.set_embedding(Shape.MEDIA, "missing", [1.0])

    def test_shape_without_embeddings(self, gateway, kioni_id):
        with pytest.raises(ValueError):
            gateway.set_embedding(Shape.HARBOUR, kioni_id, [1.0])
