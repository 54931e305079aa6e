"""
Tests du générateur d'embeddings.

Vérifie la validation des vecteurs et la conversion des erreurs du fournisseur.
"""

import math

import pytest

from portfolio.domain.errors import EmbeddingProviderError
from portfolio.infra.embeddings.generator import EmbeddingGenerator
from tests.fakes import FakeEmbeddings, FlakyEmbeddings, StaticEmbeddings

EXPECTED_DIM = 2


def test_embed_returns_vector_and_locks_dimension() -> None:
    """Le premier appel fixe la dimension."""
    gen = EmbeddingGenerator(FakeEmbeddings())
    assert gen.dimension is None
    assert gen.embed("abc") == [3.0, 1.0]
    assert gen.dimension == EXPECTED_DIM
    assert gen.model_name == "fake-length"


def test_provider_exception_is_wrapped() -> None:
    """Une exception du fournisseur devient EmbeddingProviderError."""
    gen = EmbeddingGenerator(FlakyEmbeddings("boom"))
    with pytest.raises(EmbeddingProviderError):
        gen.embed("boom")


def test_dimension_mismatch_is_rejected() -> None:
    """Un vecteur de dimension inattendue est rejeté."""
    gen = EmbeddingGenerator(FakeEmbeddings(), expected_dim=3)
    with pytest.raises(EmbeddingProviderError):
        gen.embed("abc")


@pytest.mark.parametrize("vector", [[], [1.0, math.nan], [1.0, math.inf], ["a", 1.0]])
def test_malformed_vectors_are_rejected(vector) -> None:
    """Vide, non fini ou non numérique: erreur fournisseur."""
    gen = EmbeddingGenerator(StaticEmbeddings(vector))
    with pytest.raises(EmbeddingProviderError):
        gen.embed("x")


def test_missing_vector_is_rejected() -> None:
    """Aucun vecteur retourné: erreur fournisseur."""

    class _Empty(FakeEmbeddings):
        def embed(self, texts):
            return []

    with pytest.raises(EmbeddingProviderError):
        EmbeddingGenerator(_Empty()).embed("x")


def test_openai_embedder_orders_by_index() -> None:
    """L'embedder OpenAI réordonne les vecteurs selon `index`."""
    from unittest.mock import Mock  # noqa: PLC0415

    from portfolio.infra.embeddings.openai_embedder import OpenAIEmbedder  # noqa: PLC0415

    client = Mock()
    client.embeddings.create.return_value = Mock(
        data=[Mock(index=1, embedding=[2.0]), Mock(index=0, embedding=[1.0])]
    )
    emb = OpenAIEmbedder(client, model="m")
    assert emb.embed(["a", "b"]) == [[1.0], [2.0]]
    client.embeddings.create.assert_called_once_with(model="m", input=["a", "b"])
    assert emb.embed([]) == []
