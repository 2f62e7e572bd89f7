"""Unit tests for shape classification."""

import pytest

from harbourmaster.errors import ClassifierParseError, CollaboratorError, LowConfidenceError
from harbourmaster.models import ClassificationMethod, Shape
from harbourmaster.pipeline.stages.classifier import (
    KEYWORD_CONFIDENCE,
    classify,
    classify_by_keywords,
    classify_by_prefix,
)


class TestPrefixRule:
    """Reserved prefixes classify with full confidence."""

    @pytest.mark.parametrize(
        "text,shape",
        [
            ("QUESTION: where is fuel in Kioni?", Shape.QNA),
            ("HARBOUR: Vathi is the main port of Ithaca", Shape.HARBOUR),
            ("weather: Kioni is sheltered from the north", Shape.WEATHER_PROFILE),
            ("  MEDIA: drone video of Fiskardo", Shape.MEDIA),
        ],
    )
    def test_prefix(self, text, shape):
        result = classify_by_prefix(text)
        assert result.shape is shape
        assert result.confidence == 1.0
        assert result.method is ClassificationMethod.PREFIX

    def test_no_prefix(self):
        assert classify_by_prefix("Kioni has a nice taverna") is None

    def test_prefix_never_calls_llm(self, fake_llm, settings):
        result = classify("QUESTION: where is fuel?", fake_llm, settings)
        assert result.confidence == 1.0
        assert fake_llm.calls == []


class TestKeywordRule:
    """Spoken question/answer markers classify as Q&A."""

    def test_both_markers(self):
        result = classify_by_keywords("The question is where to anchor, and the answer is the bay")
        assert result.shape is Shape.QNA
        assert result.confidence == KEYWORD_CONFIDENCE
        assert result.method is ClassificationMethod.KEYWORD

    def test_single_marker_is_not_enough(self):
        assert classify_by_keywords("A question about Kioni") is None

    def test_markers_must_be_whole_words(self):
        assert classify_by_keywords("questionable answers") is None


class TestFallback:
    """LLM fallback classification."""

    def test_confident_fallback(self, fake_llm, settings):
        fake_llm.script_classifier(
            {"shape": "harbour_weather_profiles", "confidence": 0.95, "reasoning": "wind talk"}
        )
        result = classify("Kioni is sheltered from the meltemi", fake_llm, settings)

        assert result.shape is Shape.WEATHER_PROFILE
        assert result.method is ClassificationMethod.FALLBACK
        assert result.reasoning == "wind talk"
        assert fake_llm.classifier_calls[0]["temperature"] == settings.classifier_temperature

    def test_low_confidence_raises(self, fake_llm, settings):
        fake_llm.script_classifier({"shape": "harbour_media", "confidence": 0.6, "reasoning": "maybe"})

        with pytest.raises(LowConfidenceError) as exc_info:
            classify("something about a picture", fake_llm, settings)

        error = exc_info.value
        assert error.details["suggested_shape"] == "harbour_media"
        assert error.details["confidence"] == 0.6
        body = error.to_response()
        assert body["error"] == "low_confidence"
        assert body["suggested_shape"] == "harbour_media"
        assert body["reasoning"] == "maybe"

    def test_threshold_is_inclusive(self, fake_llm, settings):
        fake_llm.script_classifier({"shape": "harbours", "confidence": 0.90})
        assert classify("Vathi info", fake_llm, settings).shape is Shape.HARBOUR

    def test_unparseable_reply(self, fake_llm, settings):
        fake_llm.script_classifier("I think it is a harbour")
        with pytest.raises(ClassifierParseError):
            classify("Vathi info", fake_llm, settings)

    @pytest.mark.parametrize(
        "reply",
        [
            {"shape": "harbour_tides", "confidence": 0.99},
            {"shape": "harbours", "confidence": 1.5},
            {"confidence": 0.99},
        ],
    )
    def test_invalid_reply(self, fake_llm, settings, reply):
        fake_llm.script_classifier(reply)
        with pytest.raises(ClassifierParseError):
            classify("Vathi info", fake_llm, settings)

    def test_llm_unreachable(self, fake_llm, settings):
        fake_llm.script_classifier(ConnectionError("refused"))
        with pytest.raises(CollaboratorError):
            classify("Vathi info", fake_llm, settings)
