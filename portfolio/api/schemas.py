# Schémas Pydantic exposés par l'API (requêtes et réponses).

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from portfolio.core.constants import (
    DEFAULT_SEARCH_LIMIT,
    DEFAULT_SEARCH_THRESHOLD,
    MAX_SEARCH_LIMIT,
)


class _CamelModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class DeleteEmbeddingsRequest(_CamelModel):
    """Suppression: `all=true` vide l'index, sinon `sourceType` + `sourceId` ciblent une source."""

    all: bool = False
    source_type: str | None = Field(default=None, alias="sourceType")
    source_id: str | None = Field(default=None, alias="sourceId")


class SyncSingleRequest(_CamelModel):
    """Synchronisation d'une source unique."""

    source_type: str | None = Field(default=None, alias="sourceType")
    source_id: str | None = Field(default=None, alias="sourceId")


class SearchRequest(BaseModel):
    """Payload pour la recherche sémantique.

    Champs:
    - query: question en texte libre
    - language: langue demandée (`tr`, toute autre valeur est ramenée à `en`)
    - limit: nombre maximal de chunks
    - threshold: distance cosinus maximale (exclusive)
    """

    query: str = ""
    language: str = "en"
    limit: int = Field(default=DEFAULT_SEARCH_LIMIT, ge=1, le=MAX_SEARCH_LIMIT)
    threshold: float = Field(default=DEFAULT_SEARCH_THRESHOLD, gt=0.0, le=2.0)


class ChunkOut(BaseModel):
    """Chunk retourné par la recherche."""

    id: str
    source_type: str
    source_id: str
    language: str
    chunk_text: str
    similarity: float


class SourceOut(BaseModel):
    """Source citée avec sa meilleure similarité."""

    source_type: str
    source_id: str
    similarity: float


class SearchResponse(BaseModel):
    """Réponse de la recherche: chunks, sources regroupées et bloc de contexte pour le prompt."""

    results: list[ChunkOut]
    sources: list[SourceOut]
    context: str = ""


class ChunkDetail(BaseModel):
    """Chunk affiché dans le détail d'une source (sans vecteur)."""

    id: str
    language: str
    chunk_index: int
    chunk_text: str
    updated_at: datetime
