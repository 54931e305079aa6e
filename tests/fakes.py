"""
Fakes et fabriques pour les tests unitaires.

Ce module fournit des implémentations factices de l'interface Embeddings avec comportement
déterministe, et des fabriques d'entités traduisibles (projets, articles, profil, expériences).
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from portfolio.domain.content import SourceType, TranslatableEntity, Translation
from portfolio.infra.embeddings.base import Embeddings

PAST = datetime(2024, 1, 1, tzinfo=UTC)


class FakeEmbeddings(Embeddings):
    """
    Implémentation factice d'Embeddings pour les tests.

    Génère des embeddings déterministes basés sur la longueur du texte pour faciliter les tests
    unitaires.
    """

    model_name = "fake-length"

    def __init__(self) -> None:
        """Initialise le compteur d'appels."""
        self.calls: list[str] = []

    def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Génère des embeddings factices basés sur la longueur.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding factices.
        """
        self.calls.extend(texts)
        # simple length-based vector for determinism
        return [[float(len(t)), 1.0] for t in texts]


class FlakyEmbeddings(FakeEmbeddings):
    """Échoue pour les textes contenant `marker`, au plus `failures` fois (None: toujours)."""

    model_name = "fake-flaky"

    def __init__(self, marker: str, failures: int | None = None) -> None:
        """Configure le marqueur déclenchant l'échec et le nombre d'échecs."""
        super().__init__()
        self.marker = marker
        self.failures = failures
        self.failed = 0

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Lève une erreur réseau simulée tant que le quota d'échecs n'est pas atteint."""
        if any(self.marker in t for t in texts) and (
            self.failures is None or self.failed < self.failures
        ):
            self.failed += 1
            raise ConnectionError("simulated provider outage")
        return super().embed(texts)


class StaticEmbeddings(Embeddings):
    """Retourne toujours le même vecteur (réponses malformées incluses)."""

    model_name = "fake-static"

    def __init__(self, vector: list[Any]) -> None:
        """Mémorise le vecteur à renvoyer."""
        self.vector = vector

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Renvoie `vector` pour chaque texte."""
        return [list(self.vector) for _ in texts]


def words(count: int, word: str = "abcdefghi") -> str:
    """Texte de `count` mots identiques séparés par un espace."""
    return " ".join([word] * count)


def make_entity(
    source_type: SourceType,
    entity_id: str,
    translations: dict[str, dict[str, str]],
    status: str | None = None,
    updated_at: datetime = PAST,
    created_at: datetime | None = None,
    **meta: Any,
) -> TranslatableEntity:
    """Construit une entité traduisible (ordre des traductions = ordre du dict)."""
    return TranslatableEntity(
        id=entity_id,
        source_type=source_type,
        status=status,
        updated_at=updated_at,
        created_at=created_at or updated_at,
        translations=[Translation(language=lang, fields=f) for lang, f in translations.items()],
        meta=meta,
    )


def make_project(
    entity_id: str = "p1",
    status: str = "Completed",
    title: str = "Portfolio",
    full_description: str = "A personal portfolio site",
    languages: tuple[str, ...] = ("en",),
    **kwargs: Any,
) -> TranslatableEntity:
    """Projet avec les mêmes textes dans chaque langue demandée."""
    kwargs.setdefault("slug", entity_id)
    kwargs.setdefault("category", "Web")
    kwargs.setdefault("featured", False)
    kwargs.setdefault("technologies", ["python"])
    fields = {
        "title": title,
        "short_description": "Short",
        "full_description": full_description,
    }
    return make_entity(
        SourceType.PROJECT, entity_id, {lang: dict(fields) for lang in languages}, status, **kwargs
    )


def make_blog(
    entity_id: str = "b1",
    status: str = "published",
    title: str = "Hello",
    content: str = "Blog content",
    languages: tuple[str, ...] = ("en",),
    **kwargs: Any,
) -> TranslatableEntity:
    """Article de blog avec les mêmes textes dans chaque langue demandée."""
    kwargs.setdefault("slug", entity_id)
    kwargs.setdefault("tags", [])
    kwargs.setdefault("featured", False)
    fields = {"title": title, "description": "Intro", "content": content}
    return make_entity(
        SourceType.BLOG, entity_id, {lang: dict(fields) for lang in languages}, status, **kwargs
    )
