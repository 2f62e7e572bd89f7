"""Unit tests for harbour reference resolution."""

import pytest

from harbourmaster.errors import MissingReferenceError
from harbourmaster.models import Shape
from harbourmaster.pipeline.stages.resolver import resolve_reference, suggest_names
from harbourmaster.pipeline.stages.validator import validate_record


class TestResolveReference:
    """Tests for resolve_reference."""

    def test_exact_match(self, gateway, kioni_id, qna_cleaned):
        record = validate_record(Shape.QNA, qna_cleaned)
        assert resolve_reference(Shape.QNA, record, None, gateway) == kioni_id

    def test_case_insensitive(self, gateway, kioni_id, qna_cleaned):
        record = validate_record(Shape.QNA, {**qna_cleaned, "harbour": "  KIONI "})
        assert resolve_reference(Shape.QNA, record, None, gateway) == kioni_id

    def test_harbour_master_exempt(self, gateway, vathi_cleaned):
        record = validate_record(Shape.HARBOUR, vathi_cleaned)
        assert resolve_reference(Shape.HARBOUR, record, None, gateway) is None

    def test_not_found_with_suggestions(self, gateway, kioni_id, qna_cleaned):
        record = validate_record(Shape.QNA, {**qna_cleaned, "harbour": "Kionni"})

        with pytest.raises(MissingReferenceError) as exc_info:
            resolve_reference(Shape.QNA, record, None, gateway)

        error = exc_info.value
        assert error.details["harbour_name"] == "Kionni"
        assert error.details["matches"] == 0
        assert error.details["suggestions"] == ["Kioni"]
        assert error.payload["harbour"] == "Kionni"

    def test_never_substitutes_close_name(self, gateway, kioni_id, qna_cleaned):
        record = validate_record(Shape.QNA, {**qna_cleaned, "harbour": "Kion"})
        with pytest.raises(MissingReferenceError):
            resolve_reference(Shape.QNA, record, None, gateway)

    def test_ambiguous(self, gateway, add_harbour, qna_cleaned):
        add_harbour("Kioni")
        add_harbour("kioni")
        record = validate_record(Shape.QNA, qna_cleaned)

        with pytest.raises(MissingReferenceError) as exc_info:
            resolve_reference(Shape.QNA, record, None, gateway)

        assert exc_info.value.details["matches"] == 2

    def test_weather_profile_uses_harbour_name(self, gateway, kioni_id):
        record = validate_record(
            Shape.WEATHER_PROFILE,
            {
                "harbour_name": "Kioni",
                "wind_directions": {"sheltered_from": ["n"], "exposed_to": []},
                "shelter_quality": "good",
            },
        )
        assert resolve_reference(Shape.WEATHER_PROFILE, record, None, gateway) == kioni_id


class TestSuggestNames:

    def test_ranked_and_limited(self):
        names = ["Kioni", "Kiona", "Vathi", "Kionia", "Frikes"]
        suggestions = suggest_names("Kioni", names)
        assert suggestions[0] == "Kioni"
        assert "Vathi" not in suggestions
        assert len(suggestions) <= 3

    def test_nothing_close(self):
        assert suggest_names("Fiskardo", ["Kioni", "Vathi"]) == []
