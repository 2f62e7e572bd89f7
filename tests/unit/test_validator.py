"""Unit tests for schema validation."""

import pytest

from harbourmaster.errors import SchemaValidationError
from harbourmaster.models import HarbourRecord, QnARecord, Shape, Tier
from harbourmaster.pipeline.stages.validator import RECORD_MODELS, validate_record


def _violation_paths(error: SchemaValidationError) -> list[str]:
    return [v["path"] for v in error.details["violations"]]


class TestValidateRecord:
    """Tests for validate_record."""

    def test_every_shape_has_a_model(self):
        assert set(RECORD_MODELS) == set(Shape)

    def test_valid_qna(self, qna_cleaned):
        record = validate_record(Shape.QNA, qna_cleaned)
        assert isinstance(record, QnARecord)
        assert record.tier is Tier.PRO

    def test_valid_harbour(self, vathi_cleaned):
        record = validate_record(Shape.HARBOUR, vathi_cleaned)
        assert isinstance(record, HarbourRecord)
        assert record.coordinates.lat == 38.3667

    def test_coordinates_out_of_range(self, vathi_cleaned):
        vathi_cleaned["coordinates"] = {"lat": 9999, "lng": 20.7}

        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.HARBOUR, vathi_cleaned)

        error = exc_info.value
        assert "/coordinates/lat" in _violation_paths(error)
        assert error.details["table"] == "harbours"
        assert error.payload == vathi_cleaned

    def test_unknown_property_rejected(self, qna_cleaned):
        qna_cleaned["confidence"] = 0.9
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.QNA, qna_cleaned)
        assert "/confidence" in _violation_paths(exc_info.value)

    def test_enum_values_are_exact(self, qna_cleaned):
        qna_cleaned["category"] = "approach & entry"
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.QNA, qna_cleaned)
        assert "/category" in _violation_paths(exc_info.value)

    def test_uppercase_tier_rejected(self, qna_cleaned):
        qna_cleaned["tier"] = "PRO"
        with pytest.raises(SchemaValidationError):
            validate_record(Shape.QNA, qna_cleaned)

    def test_numbers_not_coerced_from_strings(self, vathi_cleaned):
        vathi_cleaned["capacity"] = "80"
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.HARBOUR, vathi_cleaned)
        assert "/capacity" in _violation_paths(exc_info.value)

    def test_all_violations_reported(self, qna_cleaned):
        qna_cleaned["question"] = ""
        qna_cleaned["tags"] = ["NoPrefix"]
        del qna_cleaned["answer"]

        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.QNA, qna_cleaned)

        paths = _violation_paths(exc_info.value)
        assert "/question" in paths
        assert "/tags/0" in paths
        assert "/answer" in paths

    def test_media_patterns(self):
        media = {
            "harbour_name": "Kioni",
            "media_type": "video",
            "title": "Kioni approach",
            "url": "not a url",
            "tags": [],
            "tier": "free",
            "duration": "3:75",
        }
        with pytest.raises(SchemaValidationError) as exc_info:
            validate_record(Shape.MEDIA, media)
        paths = _violation_paths(exc_info.value)
        assert "/url" in paths
        assert "/duration" in paths

    def test_weather_profile(self):
        record = validate_record(
            Shape.WEATHER_PROFILE,
            {
                "harbour_name": "Kioni",
                "wind_directions": {"sheltered_from": ["n", "nw"], "exposed_to": ["e"]},
                "shelter_quality": "good",
                "swell_surge": {"susceptible": True, "conditions": "Easterly swell"},
            },
        )
        assert record.swell_surge.susceptible is True
