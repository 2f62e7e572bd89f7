"""Ollama LLM and embedding client configuration."""

from typing import Protocol

import structlog
from langchain_core.output_parsers import StrOutputParser
from langchain_core.prompts import ChatPromptTemplate
from langchain_ollama import OllamaEmbeddings, OllamaLLM

from harbourmaster.config.settings import Settings, get_settings

logger = structlog.get_logger(__name__)


class TextGenerator(Protocol):
    """Text-completion collaborator: system instruction + user text in, raw text out."""

    def complete(self, system: str, user: str, temperature: float) -> str:
        ...


class Embedder(Protocol):
    """Vector-embedding collaborator (matches the LangChain ``Embeddings`` interface)."""

    def embed_query(self, text: str) -> list[float]:
        ...


def create_llm_client(temperature: float, settings: Settings | None = None) -> OllamaLLM:
    """Create configured Ollama LLM client.

    Args:
        temperature: Sampling temperature for this call.
        settings: Optional custom settings. Uses defaults if not provided.

    Returns:
        Configured OllamaLLM instance.
    """
    settings = settings or get_settings()

    return OllamaLLM(
        model=settings.llm_model_name,
        base_url=settings.llm_ollama_base_url,
        temperature=temperature,
        timeout=settings.llm_request_timeout,
        num_ctx=settings.llm_num_ctx,
        num_predict=settings.llm_num_predict,
        # format="json" is not used: JSON extraction is handled in chains.py
        streaming=False,
    )


def create_embedder(settings: Settings | None = None) -> OllamaEmbeddings:
    """Create the embedding client used by the Embedding Trigger."""
    settings = settings or get_settings()

    return OllamaEmbeddings(
        model=settings.embedding_model_name,
        base_url=settings.llm_ollama_base_url,
    )


class OllamaTextGenerator:
    """TextGenerator backed by a LangChain prompt | Ollama | str-parser chain."""

    _prompt = ChatPromptTemplate.from_messages([
        ("system", "{system}"),
        ("human", "{user}"),
    ])

    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()

    def complete(self, system: str, user: str, temperature: float) -> str:
        llm = create_llm_client(temperature, self.settings)
        chain = self._prompt | llm | StrOutputParser()

        logger.debug(
            "llm_invoke",
            model=self.settings.llm_model_name,
            temperature=temperature,
            user_length=len(user),
        )
        response = chain.invoke({"system": system, "user": user})
        return response or ""
