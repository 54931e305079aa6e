"""Embedder local utilisant Sentence Transformers.

Nécessite l'extra `local` (`sentence-transformers`). Utile hors ligne ou sans clé OpenAI.
"""

from __future__ import annotations

from sentence_transformers import SentenceTransformer

from portfolio.infra.embeddings.base import Embeddings


class LocalEmbedder(Embeddings):
    """Embedder local utilisant Sentence Transformers.

    Le modèle est chargé une fois à la construction et normalise les vecteurs pour la distance
    cosinus.
    """

    def __init__(self, model_name: str = "all-MiniLM-L6-v2", device: str | None = None):
        """Initialise l'embedder local avec le modèle spécifié.

        Args:
            model_name: Nom du modèle Sentence Transformers à utiliser.
            device: Périphérique (`cpu`, `cuda`), auto-détecté si None.
        """
        self.model_name = model_name
        self.model = SentenceTransformer(model_name, device=device)

    def embed(self, texts: list[str]) -> list[list[float]]:
        """Génère des embeddings vectoriels pour une liste de textes.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding.
        """
        if not texts:
            return []
        vectors = self.model.encode(texts, convert_to_numpy=True, normalize_embeddings=True)
        return vectors.tolist()
