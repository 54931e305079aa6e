"""
Service d'administration de l'index d'embeddings.

Statistiques, état de synchronisation par source, détail des chunks, suppressions et
déclenchement des synchronisations. L'authentification est assurée en amont.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

import structlog
from pydantic import BaseModel

from portfolio.core.constants import STATUS_TOLERANCE_SECONDS
from portfolio.domain.content import SourceType, TranslatableEntity
from portfolio.domain.resolver import resolve_field
from portfolio.domain.source_specs import spec_for
from portfolio.infra.content_repo import ContentSource
from portfolio.infra.vecstores.base import VectorStore
from portfolio.services.content_sync import (
    STATUS_MISSING,
    STATUS_OUTDATED,
    ContentSyncEngine,
    SyncReport,
    classify_status,
)

_STATUS_RANK = {STATUS_MISSING: 0, STATUS_OUTDATED: 1}
ADMIN_TITLE_LANGUAGE = "en"


class AdminItem(BaseModel):
    """Ligne de la vue d'état de synchronisation."""

    id: str
    source_type: str
    title: str
    last_updated: datetime
    status: str


def admin_title(entity: TranslatableEntity) -> str:
    """Titre affiché dans l'administration (traduction anglaise, sinon la première)."""
    spec = spec_for(entity.source_type)
    value = resolve_field(
        entity, ADMIN_TITLE_LANGUAGE, spec.title_field, default_language=ADMIN_TITLE_LANGUAGE
    )
    if entity.source_type is SourceType.EXPERIENCE:
        return f"{entity.meta.get('company') or ''} - {value or spec.label}"
    return value or str(entity.meta.get("slug") or spec.label)


class EmbeddingAdminService:
    """Opérations d'administration sur l'index vectoriel."""

    def __init__(
        self,
        content_source: ContentSource,
        store: VectorStore,
        sync_engine: ContentSyncEngine,
        tolerance_s: float = STATUS_TOLERANCE_SECONDS,
    ) -> None:
        """Initialise le service avec le dépôt, l'index et le moteur de synchronisation."""
        self.content_source = content_source
        self.store = store
        self.sync_engine = sync_engine
        self.tolerance_s = tolerance_s
        self._log = structlog.get_logger(__name__).bind(component="embedding_admin")

    def stats(self) -> dict[str, Any]:
        """Nombre total de chunks et répartition par type de source."""
        return {"total": self.store.count(), "by_source_type": self.store.count_by_source_type()}

    def items(self) -> list[AdminItem]:
        """État de chaque entité: `missing`, puis `outdated`, puis `synced`, récentes d'abord."""
        chunk_times = self.store.last_updated_by_source()
        items: list[AdminItem] = []
        for stype in SourceType:
            for entity in self.content_source.find_entities_by_type(stype):
                status = classify_status(
                    entity.updated_at,
                    chunk_times.get((stype.value, entity.id)),
                    self.tolerance_s,
                )
                items.append(
                    AdminItem(
                        id=entity.id,
                        source_type=stype.value,
                        title=admin_title(entity),
                        last_updated=entity.updated_at,
                        status=status,
                    )
                )
        items.sort(key=lambda i: i.last_updated, reverse=True)
        items.sort(key=lambda i: _STATUS_RANK.get(i.status, 2))
        return items

    def details(self, source_type: str, source_id: str) -> list[dict[str, Any]]:
        """Chunks d'une source (sans les vecteurs), triés par langue puis rang."""
        return [
            {
                "id": c.id,
                "language": c.language,
                "chunk_index": c.chunk_index,
                "chunk_text": c.chunk_text,
                "updated_at": c.updated_at,
            }
            for c in self.store.list_chunks(source_type, source_id)
        ]

    def delete(self, source_type: str, source_id: str) -> int:
        """Supprime les chunks d'une source."""
        removed = self.store.delete_by_source(source_type, source_id)
        self._log.info(
            "embeddings_deleted", source_type=source_type, source_id=source_id, removed=removed
        )
        return removed

    def delete_all(self) -> int:
        """Vide l'index."""
        removed = self.store.delete_all()
        self._log.info("embeddings_deleted_all", removed=removed)
        return removed

    def sync_all(self) -> SyncReport:
        """Synchronisation complète."""
        return self.sync_engine.sync_all()

    def sync_single(self, source_type: str, source_id: str) -> SyncReport:
        """Synchronisation d'une source.

        Raises:
            ValueError: Type de source inconnu.
        """
        return self.sync_engine.sync_single(source_type, source_id)
