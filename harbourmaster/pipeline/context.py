"""Collaborator handles shared by every ingestion request."""

from dataclasses import dataclass

from harbourmaster.config.settings import Settings, get_settings
from harbourmaster.llm.client import Embedder, OllamaTextGenerator, TextGenerator, create_embedder
from harbourmaster.pipeline.router import ErrorRouter
from harbourmaster.storage.database import create_db_engine, create_session_factory, init_db
from harbourmaster.storage.gateway import PersistenceGateway
from harbourmaster.storage.review_store import ReviewStore


@dataclass
class IngestContext:
    """Everything a pipeline run needs, passed in rather than looked up."""

    llm: TextGenerator
    embedder: Embedder
    gateway: PersistenceGateway
    review_store: ReviewStore
    router: ErrorRouter
    settings: Settings


def build_context(settings: Settings | None = None, create_tables: bool = True) -> IngestContext:
    """Wire the production collaborators from settings."""
    settings = settings or get_settings()

    engine = create_db_engine(settings.database_url)
    if create_tables:
        init_db(engine)
    session_factory = create_session_factory(engine)

    review_store = ReviewStore(session_factory)
    return IngestContext(
        llm=OllamaTextGenerator(settings),
        embedder=create_embedder(settings),
        gateway=PersistenceGateway(session_factory),
        review_store=review_store,
        router=ErrorRouter(review_store),
        settings=settings,
    )
