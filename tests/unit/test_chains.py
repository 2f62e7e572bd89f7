"""Unit tests for LLM reply parsing and chain invocation."""

import pytest

from harbourmaster.config.prompts import CLASSIFIER_SYSTEM_PROMPT, CLEANING_PROMPTS
from harbourmaster.llm.chains import (
    LLMChainError,
    LLMInvocationError,
    parse_json_object,
    run_classification_chain,
    run_cleaning_chain,
)
from harbourmaster.models import Shape


class TestParseJsonObject:
    """Tests for parse_json_object."""

    def test_plain_object(self):
        assert parse_json_object('{"shape": "harbours"}') == {"shape": "harbours"}

    def test_code_fence(self):
        reply = 'Here you go:\n```json\n{"a": 1}\n```'
        assert parse_json_object(reply) == {"a": 1}

    def test_preamble_and_trailing_prose(self):
        reply = 'Sure! {"a": {"b": "x}y"}} Hope that helps.'
        assert parse_json_object(reply) == {"a": {"b": "x}y"}}

    def test_trailing_comma(self):
        assert parse_json_object('{"a": [1, 2,],}') == {"a": [1, 2]}

    def test_bom_stripped(self):
        assert parse_json_object('\ufeff{"a": 1}') == {"a": 1}

    @pytest.mark.parametrize("reply", ["", "   ", "no json here", "{broken"])
    def test_unparseable(self, reply):
        with pytest.raises(LLMChainError):
            parse_json_object(reply)

    def test_top_level_array_rejected(self):
        with pytest.raises(LLMChainError) as exc_info:
            parse_json_object("[1, 2]")
        assert exc_info.value.raw_response == "[1, 2]"


class TestChains:
    """Chains pass the right instructions and temperatures."""

    def test_classification_chain(self, fake_llm, settings):
        fake_llm.script_classifier({"shape": "harbours", "confidence": 0.97})

        reply = run_classification_chain(fake_llm, "Vathi is a deep harbour", settings)

        assert reply == {"shape": "harbours", "confidence": 0.97}
        call = fake_llm.calls[0]
        assert call["system"] == CLASSIFIER_SYSTEM_PROMPT
        assert "Vathi is a deep harbour" in call["user"]
        assert call["temperature"] == 0.1

    @pytest.mark.parametrize("shape", list(Shape))
    def test_cleaning_chain_uses_shape_instructions(self, fake_llm, settings, shape):
        fake_llm.script_cleaner({"ok": True})

        run_cleaning_chain(fake_llm, shape, "some transcript", settings)

        call = fake_llm.cleaner_calls[0]
        assert call["system"] == CLEANING_PROMPTS[shape]
        assert call["user"].endswith("some transcript")
        assert call["temperature"] == 0.2

    def test_transport_failure(self, fake_llm, settings):
        fake_llm.script_cleaner(TimeoutError("slow"))
        with pytest.raises(LLMInvocationError):
            run_cleaning_chain(fake_llm, Shape.QNA, "text", settings)
