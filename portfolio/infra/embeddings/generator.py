"""Générateur d'embeddings validés.

Enveloppe un fournisseur `Embeddings` et garantit un vecteur numérique de dimension fixe. Toute
erreur du fournisseur ou réponse malformée devient une `EmbeddingProviderError`.
"""

from __future__ import annotations

import math
import threading

import structlog

from portfolio.domain.errors import EmbeddingProviderError
from portfolio.infra.embeddings.base import Embeddings


class EmbeddingGenerator:
    """Transforme un texte en vecteur de dimension fixe via un fournisseur injecté."""

    def __init__(self, provider: Embeddings, expected_dim: int | None = None) -> None:
        """Initialise le générateur.

        Args:
            provider: Fournisseur d'embeddings.
            expected_dim: Dimension attendue. Si None, la première réponse valide fixe la
                dimension pour les appels suivants.
        """
        self.provider = provider
        self._dim = expected_dim
        self._lock = threading.Lock()
        self._log = structlog.get_logger(__name__).bind(
            component="embedding_generator", model=self.model_name
        )

    @property
    def model_name(self) -> str:
        """Nom du modèle du fournisseur (doit être identique à l'indexation et en requête)."""
        return getattr(self.provider, "model_name", "unknown")

    @property
    def dimension(self) -> int | None:
        """Dimension des vecteurs, connue après le premier appel si non configurée."""
        return self._dim

    def embed(self, text: str) -> list[float]:
        """Génère l'embedding d'un texte.

        Raises:
            EmbeddingProviderError: Échec du fournisseur ou vecteur malformé.
        """
        try:
            vectors = self.provider.embed([text])
        except EmbeddingProviderError:
            raise
        except Exception as exc:
            self._log.warning("embedding_provider_failed", error=type(exc).__name__)
            raise EmbeddingProviderError(f"embedding provider failed: {exc}") from exc
        if not vectors or len(vectors) != 1:
            raise EmbeddingProviderError("embedding provider returned no vector")
        return self._validate(vectors[0])

    def _validate(self, raw: list[float]) -> list[float]:
        try:
            vector = [float(x) for x in raw]
        except (TypeError, ValueError) as exc:
            raise EmbeddingProviderError("embedding contains non-numeric values") from exc
        if not vector:
            raise EmbeddingProviderError("embedding provider returned an empty vector")
        if not all(math.isfinite(x) for x in vector):
            raise EmbeddingProviderError("embedding contains non-finite values")
        with self._lock:
            if self._dim is None:
                self._dim = len(vector)
            elif len(vector) != self._dim:
                raise EmbeddingProviderError(
                    f"embedding dimension mismatch: got {len(vector)}, expected {self._dim}"
                )
        return vector
