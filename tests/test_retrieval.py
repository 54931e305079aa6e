"""
Tests de la façade de recherche sémantique.

Vérifie la normalisation de langue, la dégradation en liste vide et le regroupement des sources.
"""

from unittest.mock import Mock

from portfolio.domain.content import ChunkResult
from portfolio.domain.errors import StorageError
from portfolio.infra.embeddings.generator import EmbeddingGenerator
from portfolio.services.retrieval import RetrievalService
from tests.fakes import FlakyEmbeddings


def _result(source_id: str, similarity: float, text: str = "t") -> ChunkResult:
    return ChunkResult(
        id=f"{source_id}-{similarity}",
        source_type="project",
        source_id=source_id,
        language="en",
        chunk_text=text,
        similarity=similarity,
    )


def test_retrieve_returns_nearest_chunks(generator, store) -> None:
    """Les chunks proches de la requête sont retournés."""
    store.upsert("project", "p1", "en", 0, "abc", generator.embed("abc"))
    service = RetrievalService(generator, store)
    results = service.retrieve("xyz", "en")
    assert [r.source_id for r in results] == ["p1"]


def test_retrieve_normalizes_language() -> None:
    """Une langue autre que `tr` est recherchée en anglais."""
    store = Mock()
    store.backend = "mock"
    store.search.return_value = []
    gen = Mock()
    gen.embed.return_value = [1.0, 0.0]
    RetrievalService(gen, store).retrieve("question", "de", limit=3, threshold=0.4)
    store.search.assert_called_once_with([1.0, 0.0], "en", 3, 0.4)


def test_blank_query_returns_empty() -> None:
    """Requête vide: aucun appel au fournisseur."""
    gen = Mock()
    assert RetrievalService(gen, Mock()).retrieve("   ", "en") == []
    gen.embed.assert_not_called()


def test_provider_failure_degrades_to_empty(memory_store) -> None:
    """Une panne du fournisseur donne une liste vide."""
    service = RetrievalService(EmbeddingGenerator(FlakyEmbeddings("q")), memory_store)
    assert service.retrieve("q", "en") == []


def test_dimension_mismatch_degrades_to_empty(generator, store) -> None:
    """Un index construit avec un autre modèle (autre dimension) donne une liste vide."""
    store.upsert("project", "p1", "en", 0, "portfolio", [1.0, 0.0, 0.0])
    assert RetrievalService(generator, store).retrieve("portfolio", "en") == []


def test_storage_failure_degrades_to_empty(generator) -> None:
    """Une erreur de stockage donne une liste vide."""
    store = Mock()
    store.backend = "mock"
    store.search.side_effect = StorageError("search")
    assert RetrievalService(generator, store).retrieve("question", "tr") == []


def test_group_sources_keeps_best_similarity() -> None:
    """Une entrée par source, meilleure similarité, tri décroissant."""
    hits = RetrievalService.group_sources(
        [_result("a", 0.7), _result("b", 0.9), _result("a", 0.95)]
    )
    assert [(h.source_id, h.similarity) for h in hits] == [("a", 0.95), ("b", 0.9)]


def test_format_context_lists_chunks() -> None:
    """Le contexte cite chaque chunk avec sa source."""
    ctx = RetrievalService.format_context([_result("a", 0.9, "hello"), _result("b", 0.8, "bye")])
    assert "[project:a] hello" in ctx
    assert "[project:b] bye" in ctx
