"""Unit tests for the Embedding Trigger."""

import pytest

from harbourmaster.errors import RecordNotFoundError
from harbourmaster.models import ErrorSeverity, Shape
from harbourmaster.pipeline.stages import to_columns, trigger_embedding, validate_record
from harbourmaster.pipeline.stages.embedding import EMBEDDING_TEXT, embedding_text


@pytest.fixture
def qna_id(gateway, kioni_id, qna_cleaned) -> str:
    record = validate_record(Shape.QNA, qna_cleaned)
    return gateway.insert(Shape.QNA, to_columns(Shape.QNA, record, kioni_id, None))


class TestEmbeddingText:

    def test_every_shape_listed(self):
        assert set(EMBEDDING_TEXT) == set(Shape)

    def test_qna(self):
        assert embedding_text(Shape.QNA, {"question": "Q?", "answer": "A."}) == "Q?\nA."

    def test_media(self):
        row = {"title": "Approach", "description": None, "tags": ["media:drone", "wind:n"]}
        assert embedding_text(Shape.MEDIA, row) == "Approach\nmedia:drone wind:n"

    def test_no_embedding_for_harbours(self):
        assert embedding_text(Shape.HARBOUR, {"name": "Vathi"}) is None


class TestTriggerEmbedding:
    """Tests for trigger_embedding."""

    def test_stores_vector(self, gateway, fake_embedder, settings, qna_id, qna_cleaned):
        assert trigger_embedding(Shape.QNA, qna_id, gateway, fake_embedder, settings) is True

        row = gateway.get_record(Shape.QNA, qna_id)
        assert row["embedding"] == [0.1, 0.2, 0.3]
        assert fake_embedder.texts == [f"{qna_cleaned['question']}\n{qna_cleaned['answer']}"]

    def test_idempotent(self, gateway, fake_embedder, settings, qna_id):
        trigger_embedding(Shape.QNA, qna_id, gateway, fake_embedder, settings)
        fake_embedder.vector = [0.9, 0.8]
        trigger_embedding(Shape.QNA, qna_id, gateway, fake_embedder, settings)

        assert gateway.count(Shape.QNA) == 1
        assert gateway.get_record(Shape.QNA, qna_id)["embedding"] == [0.9, 0.8]

    def test_retries_then_succeeds(self, gateway, fake_embedder, settings, qna_id):
        fake_embedder.failures = 1

        assert trigger_embedding(Shape.QNA, qna_id, gateway, fake_embedder, settings) is True
        assert len(fake_embedder.texts) == 2

    def test_final_failure_is_logged_not_raised(
        self, gateway, fake_embedder, settings, router, review_store, qna_id
    ):
        fake_embedder.failures = settings.embedding_max_attempts

        embedded = trigger_embedding(
            Shape.QNA, qna_id, gateway, fake_embedder, settings, router=router, transcript="QUESTION: x"
        )

        assert embedded is False
        assert gateway.get_record(Shape.QNA, qna_id)["embedding"] is None
        [entry] = review_store.list_errors()
        assert entry.level == ErrorSeverity.MEDIUM.value
        assert entry.error_type == "embedding_failure"
        assert review_store.list_items() == []

    def test_skips_shapes_without_embeddings(self, gateway, fake_embedder, settings, kioni_id):
        assert trigger_embedding(Shape.HARBOUR, kioni_id, gateway, fake_embedder, settings) is False
        assert fake_embedder.texts == []

    def test_unknown_row(self, gateway, fake_embedder, settings):
        with pytest.raises(RecordNotFoundError):
            trigger_embedding(Shape.MEDIA, "missing", gateway, fake_embedder, settings)
