"""
Types de données pour les contenus traduisibles et l'index d'embeddings.

Ce module définit les modèles Pydantic partagés par le dépôt de contenus, le moteur de
synchronisation et la recherche: entités traduisibles (projets, articles, profil, expériences),
leurs traductions, les chunks indexés et les résultats de recherche avec similarité.
"""

from __future__ import annotations

from datetime import UTC, datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field, field_validator, model_validator


class SourceType(str, Enum):
    """Type de source indexable."""

    BLOG = "blog"
    PROJECT = "project"
    PROFILE = "profile"
    EXPERIENCE = "experience"


def as_utc(value: datetime) -> datetime:
    """Retourne un datetime aware en UTC (les datetimes naïfs sont supposés UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class Translation(BaseModel):
    """
    Surface textuelle localisée d'une entité.

    Les noms de champs dépendent du type de source (ex: `title`, `short_description` et
    `full_description` pour un projet).
    """

    language: str
    fields: dict[str, str] = Field(default_factory=dict)

    @field_validator("language")
    @classmethod
    def _lower_language(cls, value: str) -> str:
        return value.strip().lower()

    def get(self, name: str, default: str = "") -> str:
        """Retourne la valeur d'un champ textuel, ou `default` s'il est absent."""
        value = self.fields.get(name)
        return value if value is not None else default


class TranslatableEntity(BaseModel):
    """
    Entité traduisible opaque (projet, article de blog, profil, expérience).

    L'ordre de `translations` est l'ordre d'insertion; il sert d'ordre déterministe pour le repli
    de résolution des traductions.
    """

    id: str
    source_type: SourceType
    updated_at: datetime
    created_at: datetime | None = None
    status: str | None = None
    translations: list[Translation] = Field(default_factory=list)
    meta: dict[str, Any] = Field(default_factory=dict)

    @field_validator("updated_at", "created_at")
    @classmethod
    def _utc_dates(cls, value: datetime | None) -> datetime | None:
        return as_utc(value) if value is not None else None

    @model_validator(mode="after")
    def _unique_languages(self) -> TranslatableEntity:
        seen: set[str] = set()
        for t in self.translations:
            if t.language in seen:
                raise ValueError(f"duplicate translation for language {t.language!r}")
            seen.add(t.language)
        return self

    def translation_for(self, language: str) -> Translation | None:
        """Retourne la traduction exacte pour une langue, ou None."""
        lang = language.strip().lower()
        return next((t for t in self.translations if t.language == lang), None)


class EmbeddingChunk(BaseModel):
    """Chunk stocké dans l'index vectoriel, identifié par sa clé composite."""

    id: str
    source_type: str
    source_id: str
    language: str
    chunk_index: int
    chunk_text: str
    embedding: list[float] = Field(default_factory=list)
    updated_at: datetime

    @property
    def key(self) -> tuple[str, str, str, int]:
        """Clé composite `(source_type, source_id, language, chunk_index)`."""
        return (self.source_type, self.source_id, self.language, self.chunk_index)


class ChunkResult(BaseModel):
    """Résultat de recherche: chunk et similarité (`1 - distance`)."""

    id: str
    source_type: str
    source_id: str
    language: str
    chunk_text: str
    similarity: float
