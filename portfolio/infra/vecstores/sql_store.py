"""
Vector store SQLAlchemy (PostgreSQL + pgvector, SQLite en JSON/numpy).

Sur PostgreSQL, la distance cosinus est calculée en SQL (`<=>` via `cosine_distance`), filtrée
par seuil, triée et limitée côté base. Sur SQLite (dev/tests), les vecteurs sont stockés en JSON
et classés avec numpy. L'upsert repose sur `INSERT ... ON CONFLICT DO UPDATE`: les autres
dialectes sont refusés. Toute erreur SQLAlchemy est convertie en `StorageError`.
"""

from __future__ import annotations

import threading
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

import structlog
from sqlalchemy import delete, func, select
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from portfolio.app.metrics import observe_vecstore
from portfolio.domain.content import ChunkResult, EmbeddingChunk, as_utc
from portfolio.domain.errors import StorageError
from portfolio.domain.languages import normalize_embedding_language
from portfolio.infra.repo.db import get_session_factory, session_scope
from portfolio.infra.repo.models import EmbeddingORM
from portfolio.infra.vecstores.base import VectorStore
from portfolio.infra.vecstores.scoring import as_matrix, cosine_distances, rank

_KEY_COLUMNS = ["source_type", "source_id", "language", "chunk_index"]


class SqlVectorStore(VectorStore):
    """Index vectoriel persistant dans la table `embeddings`."""

    backend = "sql"

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None) -> None:
        """Initialise le store sur un moteur SQLAlchemy.

        Args:
            engine: Moteur de la base (le dialecte choisit la stratégie de recherche).
            session_factory: Factory de sessions (construite depuis `engine` si absente).
        """
        self.engine = engine
        self.session_factory = session_factory or get_session_factory(engine)
        self._local = threading.local()
        self._log = structlog.get_logger(__name__).bind(
            component="sql_vector_store", dialect=engine.dialect.name
        )

    @property
    def _native_vectors(self) -> bool:
        return self.engine.dialect.name == "postgresql"

    @contextmanager
    def _session(self, operation: str) -> Iterator[Session]:
        active: Session | None = getattr(self._local, "session", None)
        if active is not None:
            yield active
            return
        try:
            with session_scope(self.session_factory) as session:
                yield session
        except SQLAlchemyError as exc:
            self._log.error("vecstore_operation_failed", operation=operation, error=str(exc))
            raise StorageError(operation) from exc

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Partage une session (et donc une transaction) entre les écritures du bloc."""
        if getattr(self._local, "session", None) is not None:
            yield
            return
        try:
            with session_scope(self.session_factory) as session:
                self._local.session = session
                try:
                    yield
                finally:
                    self._local.session = None
        except SQLAlchemyError as exc:
            self._log.error("vecstore_transaction_failed", error=str(exc))
            raise StorageError("transaction") from exc

    def _insert(self):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            from sqlalchemy.dialects.postgresql import insert  # noqa: PLC0415
        elif dialect == "sqlite":
            from sqlalchemy.dialects.sqlite import insert  # noqa: PLC0415
        else:
            raise StorageError("upsert", f"unsupported dialect for atomic upsert: {dialect}")
        return insert

    def upsert(
        self,
        source_type: str,
        source_id: str,
        language: str,
        chunk_index: int,
        chunk_text: str,
        embedding: list[float],
    ) -> None:
        start = time.perf_counter()
        now = datetime.now(UTC)
        vector = [float(x) for x in embedding]
        insert = self._insert()
        with self._session("upsert") as session:
            stmt = insert(EmbeddingORM).values(
                id=str(uuid.uuid4()),
                source_type=source_type,
                source_id=source_id,
                language=language,
                chunk_index=chunk_index,
                chunk_text=chunk_text,
                embedding=vector,
                created_at=now,
                updated_at=now,
            )
            stmt = stmt.on_conflict_do_update(
                index_elements=_KEY_COLUMNS,
                set_={
                    "chunk_text": stmt.excluded.chunk_text,
                    "embedding": stmt.excluded.embedding,
                    "updated_at": stmt.excluded.updated_at,
                },
            )
            session.execute(stmt)
        observe_vecstore("upsert", self.backend, start)

    def search(
        self,
        query_embedding: list[float],
        language: str,
        limit: int,
        threshold: float,
    ) -> list[ChunkResult]:
        start = time.perf_counter()
        lang = normalize_embedding_language(language)
        if limit <= 0:
            return []
        query = [float(x) for x in query_embedding]
        with self._session("search") as session:
            if self._native_vectors:
                distance = EmbeddingORM.embedding.cosine_distance(query)
                stmt = (
                    select(
                        EmbeddingORM.id,
                        EmbeddingORM.source_type,
                        EmbeddingORM.source_id,
                        EmbeddingORM.language,
                        EmbeddingORM.chunk_text,
                        distance.label("distance"),
                    )
                    .where(EmbeddingORM.language == lang)
                    .where(distance < threshold)
                    .order_by(distance)
                    .limit(limit)
                )
                scored = [(row, float(row.distance)) for row in session.execute(stmt)]
            else:
                rows = session.execute(
                    select(
                        EmbeddingORM.id,
                        EmbeddingORM.source_type,
                        EmbeddingORM.source_id,
                        EmbeddingORM.language,
                        EmbeddingORM.chunk_text,
                        EmbeddingORM.embedding,
                    ).where(EmbeddingORM.language == lang)
                ).all()
                if rows:
                    matrix, q = as_matrix([r.embedding for r in rows], query)
                    distances = cosine_distances(matrix, q)
                    scored = [(rows[i], d) for i, d in rank(distances, threshold, limit)]
                else:
                    scored = []
        observe_vecstore("search", self.backend, start)
        return [
            ChunkResult(
                id=row.id,
                source_type=row.source_type,
                source_id=row.source_id,
                language=row.language,
                chunk_text=row.chunk_text,
                similarity=1.0 - d,
            )
            for row, d in scored
        ]

    def delete_by_source(self, source_type: str, source_id: str) -> int:
        start = time.perf_counter()
        with self._session("delete") as session:
            result = session.execute(
                delete(EmbeddingORM).where(
                    EmbeddingORM.source_type == source_type,
                    EmbeddingORM.source_id == source_id,
                )
            )
        observe_vecstore("delete", self.backend, start)
        return int(result.rowcount or 0)

    def delete_all(self) -> int:
        start = time.perf_counter()
        with self._session("delete_all") as session:
            result = session.execute(delete(EmbeddingORM))
        observe_vecstore("delete_all", self.backend, start)
        return int(result.rowcount or 0)

    def count(self) -> int:
        with self._session("count") as session:
            return int(session.scalar(select(func.count()).select_from(EmbeddingORM)) or 0)

    def count_by_source_type(self) -> dict[str, int]:
        with self._session("count_by_source_type") as session:
            rows = session.execute(
                select(EmbeddingORM.source_type, func.count()).group_by(EmbeddingORM.source_type)
            ).all()
        return {stype: int(n) for stype, n in rows}

    def last_updated_by_source(self) -> dict[tuple[str, str], datetime]:
        with self._session("last_updated_by_source") as session:
            rows = session.execute(
                select(
                    EmbeddingORM.source_type,
                    EmbeddingORM.source_id,
                    func.max(EmbeddingORM.updated_at),
                ).group_by(EmbeddingORM.source_type, EmbeddingORM.source_id)
            ).all()
        return {(stype, sid): as_utc(ts) for stype, sid, ts in rows if ts is not None}

    def list_chunks(self, source_type: str, source_id: str) -> list[EmbeddingChunk]:
        with self._session("list_chunks") as session:
            rows = session.scalars(
                select(EmbeddingORM)
                .where(
                    EmbeddingORM.source_type == source_type,
                    EmbeddingORM.source_id == source_id,
                )
                .order_by(EmbeddingORM.language, EmbeddingORM.chunk_index)
            ).all()
            return [
                EmbeddingChunk(
                    id=r.id,
                    source_type=r.source_type,
                    source_id=r.source_id,
                    language=r.language,
                    chunk_index=r.chunk_index,
                    chunk_text=r.chunk_text,
                    embedding=[float(x) for x in r.embedding],
                    updated_at=as_utc(r.updated_at),
                )
                for r in rows
            ]

    def source_ids(self, source_type: str) -> set[str]:
        with self._session("source_ids") as session:
            rows = session.scalars(
                select(EmbeddingORM.source_id)
                .where(EmbeddingORM.source_type == source_type)
                .distinct()
            ).all()
        return set(rows)
