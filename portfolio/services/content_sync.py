"""
Moteur de synchronisation des embeddings.

Maintient l'index vectoriel cohérent avec les contenus traduisibles:
- pour chaque entité éligible et chaque traduction `tr`/`en`, compose le texte, le découpe,
  calcule l'embedding de chaque chunk et l'écrit avec son rang comme `chunk_index`;
- une source est toujours remplacée en bloc (suppression + écritures dans une même transaction),
  ce qui empêche la survie de chunks de fin obsolètes;
- les erreurs du fournisseur sont retentées avec backoff puis le chunk est ignoré; les erreurs de
  stockage remontent à l'appelant.
"""

from __future__ import annotations

import random as _rand
import time
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime

import structlog

from portfolio.app.metrics import (
    EMBEDDING_RETRIES,
    SYNC_CHUNKS_FAILED,
    SYNC_CHUNKS_WRITTEN,
    SYNC_DURATION,
    SYNC_SOURCES_PRUNED,
)
from portfolio.core.constants import (
    DEFAULT_CHUNK_SIZE,
    RETRY_BASE_DELAY,
    RETRY_MAX_DELAY,
    RETRY_RANDOM_FACTOR,
    STATUS_TOLERANCE_SECONDS,
)
from portfolio.domain.chunking import chunk_text
from portfolio.domain.content import SourceType, TranslatableEntity, as_utc
from portfolio.domain.errors import EmbeddingProviderError
from portfolio.domain.languages import is_embedding_language
from portfolio.domain.source_specs import spec_for
from portfolio.infra.content_repo import ContentSource
from portfolio.infra.embeddings.generator import EmbeddingGenerator
from portfolio.infra.vecstores.base import VectorStore

STATUS_MISSING = "missing"
STATUS_OUTDATED = "outdated"
STATUS_SYNCED = "synced"

ChunkKey = tuple[str, str, str, int]


def classify_status(
    entity_updated_at: datetime,
    chunks_updated_at: datetime | None,
    tolerance_s: float = STATUS_TOLERANCE_SECONDS,
) -> str:
    """Statut de synchronisation d'une source.

    `missing` sans chunk, `outdated` si l'entité est plus récente que ses chunks de plus de
    `tolerance_s` secondes, `synced` sinon.
    """
    if chunks_updated_at is None:
        return STATUS_MISSING
    delta = (as_utc(entity_updated_at) - as_utc(chunks_updated_at)).total_seconds()
    return STATUS_OUTDATED if delta > tolerance_s else STATUS_SYNCED


@dataclass
class SyncReport:
    """Bilan d'une synchronisation."""

    entities: int = 0
    chunks_written: int = 0
    chunks_failed: int = 0
    sources_pruned: int = 0
    failed_chunks: list[ChunkKey] = field(default_factory=list)

    def as_dict(self) -> dict:
        """Représentation sérialisable (réponses API, logs)."""
        return {
            "entities": self.entities,
            "chunks_written": self.chunks_written,
            "chunks_failed": self.chunks_failed,
            "sources_pruned": self.sources_pruned,
            "failed_chunks": [list(k) for k in self.failed_chunks],
        }


@dataclass(frozen=True)
class _PlannedChunk:
    language: str
    chunk_index: int
    text: str


class ContentSyncEngine:
    """Synchronise les contenus traduisibles vers l'index vectoriel."""

    def __init__(
        self,
        content_source: ContentSource,
        generator: EmbeddingGenerator,
        store: VectorStore,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_retries: int = 2,
        concurrency: int = 1,
        prune_stale: bool = True,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """Initialise le moteur.

        Args:
            content_source: Dépôt des entités traduisibles.
            generator: Générateur d'embeddings (le même que pour la recherche).
            store: Index vectoriel.
            chunk_size: Taille maximale d'un chunk en caractères.
            max_retries: Nombre de nouvelles tentatives par chunk après une erreur du fournisseur.
            concurrency: Nombre d'appels d'embedding simultanés.
            prune_stale: Supprimer, lors de `sync_all`, les chunks des sources devenues
                inéligibles ou supprimées.
            sleep: Fonction d'attente entre deux tentatives (injectable pour les tests).
        """
        self.content_source = content_source
        self.generator = generator
        self.store = store
        self.chunk_size = chunk_size
        self.max_retries = max(0, max_retries)
        self.concurrency = max(1, concurrency)
        self.prune_stale = prune_stale
        self._sleep = sleep
        self._log = structlog.get_logger(__name__).bind(component="content_sync")

    def sync_single(self, source_type: SourceType | str, source_id: str) -> SyncReport:
        """Resynchronise une source: suppression de ses chunks puis réindexation si éligible.

        Une entité absente ou inéligible laisse la source sans aucun chunk (sans erreur).

        Raises:
            ValueError: Type de source inconnu.
            StorageError: Échec de l'index vectoriel.
        """
        start = time.perf_counter()
        stype = SourceType(source_type)
        report = SyncReport()
        entity = self.content_source.find_entity_by_id(stype, source_id)
        if entity is None or not spec_for(stype).is_eligible(entity):
            with self.store.transaction():
                removed = self.store.delete_by_source(stype.value, source_id)
            self._log.info(
                "sync_single_cleared",
                source_type=stype.value,
                source_id=source_id,
                found=entity is not None,
                removed=removed,
            )
        else:
            self._replace(entity, report)
        SYNC_DURATION.labels(mode="single").observe(time.perf_counter() - start)
        return report

    def sync_all(self) -> SyncReport:
        """Réindexe toutes les entités éligibles de tous les types de source.

        Raises:
            StorageError: Échec de l'index vectoriel.
        """
        start = time.perf_counter()
        report = SyncReport()
        for stype in SourceType:
            entities = self.content_source.find_entities_by_type(stype, eligible_only=True)
            for entity in entities:
                self._replace(entity, report)
            if self.prune_stale:
                self._prune(stype, {e.id for e in entities}, report)
        duration = time.perf_counter() - start
        SYNC_DURATION.labels(mode="all").observe(duration)
        self._log.info("sync_all_completed", duration_s=round(duration, 3), **report.as_dict())
        return report

    def _prune(self, stype: SourceType, keep: set[str], report: SyncReport) -> None:
        stale = self.store.source_ids(stype.value) - keep
        for source_id in sorted(stale):
            with self.store.transaction():
                self.store.delete_by_source(stype.value, source_id)
            report.sources_pruned += 1
            SYNC_SOURCES_PRUNED.labels(source_type=stype.value).inc()
            self._log.info("sync_source_pruned", source_type=stype.value, source_id=source_id)

    def _plan(self, entity: TranslatableEntity) -> list[_PlannedChunk]:
        spec = spec_for(entity.source_type)
        planned: list[_PlannedChunk] = []
        for translation in entity.translations:
            if not is_embedding_language(translation.language):
                continue
            text = spec.extract(entity, translation).render()
            for index, chunk in enumerate(chunk_text(text, self.chunk_size)):
                planned.append(_PlannedChunk(translation.language, index, chunk))
        return planned

    def _replace(self, entity: TranslatableEntity, report: SyncReport) -> None:
        stype = entity.source_type.value
        planned = self._plan(entity)

        def _embed(chunk: _PlannedChunk) -> list[float] | None:
            return self._embed_with_retry(stype, entity.id, chunk)

        if self.concurrency > 1 and len(planned) > 1:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                vectors = list(pool.map(_embed, planned))
        else:
            vectors = [_embed(c) for c in planned]

        written = 0
        with self.store.transaction():
            self.store.delete_by_source(stype, entity.id)
            for chunk, vector in zip(planned, vectors, strict=True):
                if vector is None:
                    continue
                self.store.upsert(
                    stype, entity.id, chunk.language, chunk.chunk_index, chunk.text, vector
                )
                written += 1

        failed = [
            (stype, entity.id, c.language, c.chunk_index)
            for c, v in zip(planned, vectors, strict=True)
            if v is None
        ]
        report.entities += 1
        report.chunks_written += written
        report.chunks_failed += len(failed)
        report.failed_chunks.extend(failed)
        if written:
            SYNC_CHUNKS_WRITTEN.labels(source_type=stype).inc(written)
        if failed:
            SYNC_CHUNKS_FAILED.labels(source_type=stype).inc(len(failed))
        self._log.info(
            "sync_entity_indexed",
            source_type=stype,
            source_id=entity.id,
            chunks=written,
            failed=len(failed),
        )

    def _embed_with_retry(
        self, source_type: str, source_id: str, chunk: _PlannedChunk
    ) -> list[float] | None:
        attempts = 0
        while True:
            attempts += 1
            try:
                return self.generator.embed(chunk.text)
            except EmbeddingProviderError as exc:
                if attempts > self.max_retries:
                    self._log.warning(
                        "embedding_chunk_skipped",
                        source_type=source_type,
                        source_id=source_id,
                        language=chunk.language,
                        chunk_index=chunk.chunk_index,
                        attempts=attempts,
                        error=str(exc),
                    )
                    return None
                delay = min(
                    RETRY_MAX_DELAY,
                    (2 ** (attempts - 1)) * RETRY_BASE_DELAY
                    + _rand.random() * RETRY_RANDOM_FACTOR,
                )
                EMBEDDING_RETRIES.labels(model=self.generator.model_name).inc()
                self._sleep(delay)
