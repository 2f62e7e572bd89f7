"""
Persistence Gateway

Single-insert access to the per-shape tables and the harbour registry.

Design Decisions:
- One transaction per insert; nothing is written in pieces
- The referenced harbour is re-read inside the insert transaction, so a
  harbour deleted after resolution can never be referenced by a new row
- Storage failures surface as PersistenceError carrying the payload
"""

from typing import Any, Optional

import structlog
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from harbourmaster.errors import MissingReferenceError, PersistenceError, RecordNotFoundError
from harbourmaster.models.enums import Shape
from harbourmaster.storage.tables import TABLES_BY_SHAPE, Harbour

logger = structlog.get_logger(__name__)

EMBEDDING_SHAPES = frozenset({Shape.QNA, Shape.MEDIA})


def _row_to_dict(row: Any) -> dict[str, Any]:
    return {column.name: getattr(row, column.name) for column in row.__table__.columns}


class PersistenceGateway:
    """Insert/select/update access to shape tables."""

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    # =========================================================================
    # Harbour registry
    # =========================================================================

    def find_harbours(self, name: str) -> list[tuple[str, str]]:
        """Case-insensitive exact-name lookup.

        Returns:
            All (id, name) pairs whose name matches, so callers can tell
            "none" from "ambiguous".
        """
        with self._session_factory() as session:
            rows = session.execute(
                select(Harbour.id, Harbour.name).where(
                    func.lower(Harbour.name) == name.strip().lower()
                )
            ).all()
        return [(row.id, row.name) for row in rows]

    def harbour_names(self) -> list[str]:
        with self._session_factory() as session:
            return list(session.execute(select(Harbour.name)).scalars())

    # =========================================================================
    # Records
    # =========================================================================

    def insert(self, shape: Shape, columns: dict[str, Any]) -> str:
        """Insert one transformed record and return its id.

        Raises:
            MissingReferenceError: The referenced harbour no longer exists.
            PersistenceError: The insert failed.
        """
        table = TABLES_BY_SHAPE[shape]

        try:
            with self._session_factory() as session, session.begin():
                if shape is not Shape.HARBOUR:
                    harbour_id = columns.get("harbour_id")
                    harbour = (
                        session.get(Harbour, harbour_id, with_for_update={"read": True})
                        if harbour_id else None
                    )
                    if harbour is None:
                        raise MissingReferenceError(
                            f"Harbour no longer exists: {columns.get('harbour_name')}",
                            details={
                                "harbour_name": columns.get("harbour_name"),
                                "harbour_id": harbour_id,
                                "table": shape.value,
                            },
                            payload=columns,
                        )

                row = table(**columns)
                session.add(row)
                session.flush()
                record_id = row.id
        except SQLAlchemyError as e:
            logger.error("insert_failed", table=shape.value, error=str(e))
            raise PersistenceError(
                "Database insert failed",
                details={"db_error": str(e), "table": shape.value},
                payload=columns,
            ) from e

        logger.info("record_inserted", table=shape.value, id=record_id)
        return record_id

    def get_record(self, shape: Shape, record_id: str) -> Optional[dict[str, Any]]:
        with self._session_factory() as session:
            row = session.get(TABLES_BY_SHAPE[shape], record_id)
            return _row_to_dict(row) if row is not None else None

    def count(self, shape: Shape) -> int:
        with self._session_factory() as session:
            return session.execute(
                select(func.count()).select_from(TABLES_BY_SHAPE[shape])
            ).scalar_one()

    def set_embedding(self, shape: Shape, record_id: str, vector: list[float]) -> None:
        """Overwrite the embedding of an existing row.

        Raises:
            ValueError: The shape has no embedding column.
            RecordNotFoundError: No row with that id.
        """
        if shape not in EMBEDDING_SHAPES:
            raise ValueError(f"{shape.value} does not store embeddings")

        with self._session_factory() as session, session.begin():
            row = session.get(TABLES_BY_SHAPE[shape], record_id)
            if row is None:
                raise RecordNotFoundError(f"{shape.value} record not found: {record_id}")
            row.embedding = list(vector)
