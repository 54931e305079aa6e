"""Interface de base pour les magasins vectoriels.

Ce module définit l'interface abstraite de l'index d'embeddings: un chunk est identifié par la clé
composite `(source_type, source_id, language, chunk_index)`; la recherche classe par distance
cosinus croissante dans une seule partition de langue.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime

from portfolio.domain.content import ChunkResult, EmbeddingChunk


class VectorStore(ABC):
    """Interface abstraite pour les magasins vectoriels."""

    backend: str = "unknown"

    @abstractmethod
    def upsert(
        self,
        source_type: str,
        source_id: str,
        language: str,
        chunk_index: int,
        chunk_text: str,
        embedding: list[float],
    ) -> None:
        """Insère ou remplace le chunk de clé composite donnée (opération atomique).

        Raises:
            StorageError: Échec du stockage.
        """
        raise NotImplementedError

    @abstractmethod
    def search(
        self,
        query_embedding: list[float],
        language: str,
        limit: int,
        threshold: float,
    ) -> list[ChunkResult]:
        """Retourne au plus `limit` chunks de distance cosinus `< threshold`, plus proches d'abord.

        La langue est normalisée (`tr` sinon `en`) avant filtrage.
        """
        raise NotImplementedError

    @abstractmethod
    def delete_by_source(self, source_type: str, source_id: str) -> int:
        """Supprime tous les chunks d'une source (toutes langues) et retourne leur nombre."""
        raise NotImplementedError

    @abstractmethod
    def delete_all(self) -> int:
        """Vide l'index et retourne le nombre de chunks supprimés."""
        raise NotImplementedError

    @contextmanager
    def transaction(self) -> Iterator[None]:
        """Regroupe plusieurs écritures en une unité atomique (par défaut: aucune)."""
        yield

    # Lectures administratives

    @abstractmethod
    def count(self) -> int:
        """Nombre total de chunks."""
        raise NotImplementedError

    @abstractmethod
    def count_by_source_type(self) -> dict[str, int]:
        """Nombre de chunks par type de source."""
        raise NotImplementedError

    @abstractmethod
    def last_updated_by_source(self) -> dict[tuple[str, str], datetime]:
        """Date de mise à jour la plus récente des chunks de chaque source."""
        raise NotImplementedError

    @abstractmethod
    def list_chunks(self, source_type: str, source_id: str) -> list[EmbeddingChunk]:
        """Chunks d'une source, triés par `(language, chunk_index)`."""
        raise NotImplementedError

    def source_ids(self, source_type: str) -> set[str]:
        """Identifiants des sources d'un type ayant au moins un chunk."""
        return {sid for (stype, sid) in self.last_updated_by_source() if stype == source_type}
