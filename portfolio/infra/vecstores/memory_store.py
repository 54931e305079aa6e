"""
In-memory vector store.

Implémente `VectorStore` pour le développement et les tests: dictionnaire indexé par clé
composite, classement cosinus via numpy, verrou réentrant pour les unités de travail.
"""

from __future__ import annotations

import copy
import threading
import time
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import UTC, datetime

from portfolio.app.metrics import observe_vecstore
from portfolio.domain.content import ChunkResult, EmbeddingChunk
from portfolio.domain.languages import normalize_embedding_language
from portfolio.infra.vecstores.base import VectorStore
from portfolio.infra.vecstores.scoring import as_matrix, cosine_distances, rank

ChunkKey = tuple[str, str, str, int]


class MemoryVectorStore(VectorStore):
    """Index vectoriel en mémoire, sûr entre threads."""

    backend = "memory"

    def __init__(self) -> None:
        """Initialise un index vide."""
        self._chunks: dict[ChunkKey, EmbeddingChunk] = {}
        self._lock = threading.RLock()

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Unité de travail: les lecteurs concurrents attendent, un échec restaure l'état."""
        with self._lock:
            snapshot = copy.copy(self._chunks)
            try:
                yield
            except BaseException:
                self._chunks = snapshot
                raise

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
        key: ChunkKey = (source_type, source_id, language, chunk_index)
        now = datetime.now(UTC)
        with self._lock:
            existing = self._chunks.get(key)
            self._chunks[key] = EmbeddingChunk(
                id=existing.id if existing else str(uuid.uuid4()),
                source_type=source_type,
                source_id=source_id,
                language=language,
                chunk_index=chunk_index,
                chunk_text=chunk_text,
                embedding=list(embedding),
                updated_at=now,
            )
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
        with self._lock:
            candidates = [c for c in self._chunks.values() if c.language == lang]
        results: list[ChunkResult] = []
        if candidates:
            matrix, query = as_matrix([c.embedding for c in candidates], query_embedding)
            for idx, distance in rank(cosine_distances(matrix, query), threshold, limit):
                c = candidates[idx]
                results.append(
                    ChunkResult(
                        id=c.id,
                        source_type=c.source_type,
                        source_id=c.source_id,
                        language=c.language,
                        chunk_text=c.chunk_text,
                        similarity=1.0 - distance,
                    )
                )
        observe_vecstore("search", self.backend, start)
        return results

    def delete_by_source(self, source_type: str, source_id: str) -> int:
        start = time.perf_counter()
        with self._lock:
            keys = [k for k in self._chunks if k[0] == source_type and k[1] == source_id]
            for k in keys:
                del self._chunks[k]
        observe_vecstore("delete", self.backend, start)
        return len(keys)

    def delete_all(self) -> int:
        start = time.perf_counter()
        with self._lock:
            n = len(self._chunks)
            self._chunks.clear()
        observe_vecstore("delete_all", self.backend, start)
        return n

    def count(self) -> int:
        with self._lock:
            return len(self._chunks)

    def count_by_source_type(self) -> dict[str, int]:
        counts: dict[str, int] = {}
        with self._lock:
            for stype, *_ in self._chunks:
                counts[stype] = counts.get(stype, 0) + 1
        return counts

    def last_updated_by_source(self) -> dict[tuple[str, str], datetime]:
        latest: dict[tuple[str, str], datetime] = {}
        with self._lock:
            for c in self._chunks.values():
                key = (c.source_type, c.source_id)
                if key not in latest or c.updated_at > latest[key]:
                    latest[key] = c.updated_at
        return latest

    def list_chunks(self, source_type: str, source_id: str) -> list[EmbeddingChunk]:
        with self._lock:
            chunks = [
                c
                for c in self._chunks.values()
                if c.source_type == source_type and c.source_id == source_id
            ]
        return sorted(chunks, key=lambda c: (c.language, c.chunk_index))
