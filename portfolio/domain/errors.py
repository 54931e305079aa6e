"""Erreurs du sous-système d'embeddings."""

from __future__ import annotations


class EmbeddingProviderError(RuntimeError):
    """Échec de l'appel au fournisseur d'embeddings ou réponse malformée.

    Récupérée localement par la synchronisation: le chunk concerné est ignoré.
    """


class StorageError(RuntimeError):
    """Échec d'une opération sur l'index vectoriel (connexion, contrainte)."""

    def __init__(self, operation: str, message: str | None = None) -> None:
        """Initialise l'erreur avec le nom de l'opération en échec."""
        self.operation = operation
        super().__init__(message or f"vector store operation failed: {operation}")
