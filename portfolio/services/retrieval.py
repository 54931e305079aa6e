"""
Façade de recherche sémantique.

Point d'entrée unique utilisé par le chat: embedding de la requête avec le même générateur que
l'indexation, puis recherche dans la partition de langue normalisée. Les erreurs du fournisseur ou
du stockage sont journalisées et dégradées en liste vide: le chat doit pouvoir répondre sans
contexte plutôt que d'échouer.
"""

from __future__ import annotations

import time
from dataclasses import dataclass

import structlog

from portfolio.app.metrics import (
    RETRIEVAL_ERRORS,
    RETRIEVAL_HITS_TOTAL,
    RETRIEVAL_LATENCY,
    RETRIEVAL_REQUESTS,
)
from portfolio.core.constants import (
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_SEARCH_THRESHOLD,
    MAX_SEARCH_LIMIT,
)
from portfolio.domain.content import ChunkResult
from portfolio.domain.errors import EmbeddingProviderError, StorageError
from portfolio.domain.languages import normalize_embedding_language
from portfolio.infra.embeddings.generator import EmbeddingGenerator
from portfolio.infra.vecstores.base import VectorStore


@dataclass(frozen=True)
class SourceHit:
    """Meilleure similarité obtenue par une source dans un jeu de résultats."""

    source_type: str
    source_id: str
    similarity: float


class RetrievalService:
    """Recherche des chunks pertinents pour une question."""

    def __init__(
        self,
        generator: EmbeddingGenerator,
        store: VectorStore,
        default_limit: int = DEFAULT_SEARCH_LIMIT,
        default_threshold: float = DEFAULT_SEARCH_THRESHOLD,
    ) -> None:
        """Initialise la façade avec le générateur partagé et l'index vectoriel."""
        self.generator = generator
        self.store = store
        self.default_limit = default_limit
        self.default_threshold = default_threshold
        self._log = structlog.get_logger(__name__).bind(component="retrieval")

    def retrieve(
        self,
        query_text: str,
        language: str | None,
        limit: int | None = None,
        threshold: float | None = None,
    ) -> list[ChunkResult]:
        """Retourne les chunks les plus proches de `query_text`.

        Args:
            query_text: Question de l'utilisateur (vide -> aucun résultat).
            language: Langue demandée (`tr`, toute autre valeur -> `en`).
            limit: Nombre maximal de résultats.
            threshold: Distance cosinus maximale (exclusive).

        Returns:
            list[ChunkResult]: Résultats triés par similarité décroissante, éventuellement vides.
        """
        if not (query_text or "").strip():
            return []
        lang = normalize_embedding_language(language)
        k = self.default_limit if limit is None else limit
        k = max(0, min(int(k), MAX_SEARCH_LIMIT))
        thr = self.default_threshold if threshold is None else float(threshold)
        backend = self.store.backend
        RETRIEVAL_REQUESTS.labels(backend=backend, language=lang).inc()
        start = time.perf_counter()
        try:
            vector = self.generator.embed(query_text)
            results = self.store.search(vector, lang, k, thr)
        except EmbeddingProviderError as exc:
            RETRIEVAL_ERRORS.labels(backend=backend, code="embedding").inc()
            self._log.warning("retrieval_degraded", reason="embedding", error=str(exc))
            return []
        except StorageError as exc:
            RETRIEVAL_ERRORS.labels(backend=backend, code="storage").inc()
            self._log.warning("retrieval_degraded", reason="storage", error=str(exc))
            return []
        finally:
            RETRIEVAL_LATENCY.labels(backend=backend).observe(time.perf_counter() - start)
        if results:
            RETRIEVAL_HITS_TOTAL.labels(backend=backend, language=lang).inc()
        self._log.debug("retrieval_done", language=lang, hits=len(results), limit=k)
        return results

    @staticmethod
    def group_sources(results: list[ChunkResult]) -> list[SourceHit]:
        """Une entrée par source avec sa meilleure similarité, par similarité décroissante."""
        best: dict[tuple[str, str], float] = {}
        for r in results:
            key = (r.source_type, r.source_id)
            if key not in best or r.similarity > best[key]:
                best[key] = r.similarity
        hits = [SourceHit(st, sid, sim) for (st, sid), sim in best.items()]
        return sorted(hits, key=lambda h: h.similarity, reverse=True)

    @staticmethod
    def format_context(results: list[ChunkResult]) -> str:
        """Rend les chunks sous forme de bloc de contexte pour un prompt."""
        return "\n\n---\n\n".join(
            f"[{r.source_type}:{r.source_id}] {r.chunk_text}" for r in results
        )
