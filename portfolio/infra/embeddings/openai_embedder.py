"""
Embedder OpenAI pour la génération d'embeddings.

Ce module implémente un embedder utilisant l'API OpenAI. Le client est construit une seule fois par
le conteneur et injecté ici: aucun client global n'est créé paresseusement.
"""

from __future__ import annotations

from openai import OpenAI

from portfolio.infra.embeddings.base import Embeddings


def build_openai_client(api_key: str, timeout_s: float) -> OpenAI:
    """Construit le client OpenAI utilisé pour les embeddings.

    Les retries du SDK sont désactivés: la politique de retry appartient au moteur de
    synchronisation. Le timeout s'applique à chaque appel.
    """
    return OpenAI(api_key=api_key, timeout=timeout_s, max_retries=0)


class OpenAIEmbedder(Embeddings):
    """
    Embedder OpenAI pour la génération d'embeddings.

    Utilise l'endpoint `embeddings.create` avec le modèle configuré.
    """

    def __init__(self, client: OpenAI, model: str = "text-embedding-3-small"):
        """
        Initialise l'embedder avec un client déjà construit.

        Args:
            client: Client OpenAI (injecté).
            model: Nom du modèle d'embedding.
        """
        self.client = client
        self.model_name = model

    def embed(self, texts: list[str]) -> list[list[float]]:
        """
        Génère des embeddings vectoriels via l'API OpenAI.

        Args:
            texts: Liste des textes à convertir en embeddings.

        Returns:
            list[list[float]]: Liste des vecteurs d'embedding, dans l'ordre des textes.
        """
        if not texts:
            return []
        resp = self.client.embeddings.create(model=self.model_name, input=texts)
        data = sorted(resp.data, key=lambda d: d.index)
        return [list(d.embedding) for d in data]
