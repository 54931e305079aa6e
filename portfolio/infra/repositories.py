"""
Dépôt de contenus en mémoire.

Implémentation de `ContentSource` pour le développement et les tests: non persistante, mêmes
règles de tri et de filtrage d'éligibilité que la version SQL.
"""

from __future__ import annotations

from datetime import UTC, datetime

from portfolio.domain.content import SourceType, TranslatableEntity
from portfolio.domain.source_specs import spec_for


class InMemoryContentRepository:
    """
    Dépôt d'entités traduisibles en mémoire (utilisé pour dev/tests).

    Stocke les entités dans un dict par type de source.
    """

    def __init__(self, entities: list[TranslatableEntity] | None = None):
        """Initialise le dépôt, éventuellement pré-rempli."""
        self._db: dict[SourceType, dict[str, TranslatableEntity]] = {t: {} for t in SourceType}
        for entity in entities or []:
            self.save(entity)

    def save(self, entity: TranslatableEntity) -> TranslatableEntity:
        """Enregistre/écrase une entité et la renvoie."""
        self._db[entity.source_type][entity.id] = entity
        return entity

    def remove(self, source_type: SourceType, entity_id: str) -> None:
        """Supprime une entité si elle existe."""
        self._db[SourceType(source_type)].pop(entity_id, None)

    def find_entities_by_type(
        self, source_type: SourceType, eligible_only: bool = False
    ) -> list[TranslatableEntity]:
        source_type = SourceType(source_type)
        entities = list(self._db[source_type].values())
        if eligible_only:
            entities = [e for e in entities if spec_for(source_type).is_eligible(e)]
        epoch = datetime.min.replace(tzinfo=UTC)
        return sorted(entities, key=lambda e: e.created_at or e.updated_at or epoch, reverse=True)

    def find_entity_by_id(
        self, source_type: SourceType, entity_id: str
    ) -> TranslatableEntity | None:
        return self._db[SourceType(source_type)].get(entity_id)
