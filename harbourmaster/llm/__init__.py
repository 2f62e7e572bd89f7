"""LLM client and chain configurations."""

from .client import Embedder, OllamaTextGenerator, TextGenerator, create_embedder, create_llm_client
from .chains import (
    LLMChainError,
    LLMInvocationError,
    parse_json_object,
    run_classification_chain,
    run_cleaning_chain,
)

__all__ = [
    "TextGenerator",
    "Embedder",
    "OllamaTextGenerator",
    "create_llm_client",
    "create_embedder",
    "LLMChainError",
    "LLMInvocationError",
    "parse_json_object",
    "run_classification_chain",
    "run_cleaning_chain",
]
