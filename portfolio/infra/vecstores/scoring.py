"""Calcul de distance cosinus avec numpy (backends sans opérateur vectoriel natif)."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from portfolio.domain.errors import StorageError


def as_matrix(
    vectors: Sequence[Sequence[float]], query: Sequence[float]
) -> tuple[np.ndarray, np.ndarray]:
    """Empile les vecteurs stockés et la requête après contrôle des dimensions.

    Un index qui mélange des dimensions (changement de modèle sans resynchronisation) échoue
    comme sur PostgreSQL, par une `StorageError`.

    Raises:
        StorageError: Dimension d'un vecteur stocké différente de celle de la requête.
    """
    dim = len(query)
    stored_dims = {len(v) for v in vectors}
    if stored_dims - {dim}:
        raise StorageError(
            "search",
            f"embedding dimension mismatch: query={dim}, stored={sorted(stored_dims)}",
        )
    return (
        np.asarray(vectors, dtype=np.float64).reshape(len(vectors), dim),
        np.asarray(query, dtype=np.float64),
    )


def cosine_distances(matrix: np.ndarray, query: np.ndarray) -> np.ndarray:
    """Distances cosinus `1 - cos(q, m_i)` entre une requête et chaque ligne de `matrix`.

    Un vecteur de norme nulle donne une distance NaN, donc jamais retenu par le seuil.
    """
    if matrix.size == 0:
        return np.empty(0, dtype=np.float64)
    q_norm = np.linalg.norm(query)
    m_norms = np.linalg.norm(matrix, axis=1)
    denom = m_norms * q_norm
    with np.errstate(divide="ignore", invalid="ignore"):
        sims = (matrix @ query) / denom
    sims = np.where(denom == 0, np.nan, sims)
    return 1.0 - sims


def rank(
    distances: np.ndarray, threshold: float, limit: int
) -> list[tuple[int, float]]:
    """Indices et distances `< threshold`, triés par distance croissante, tronqués à `limit`."""
    if limit <= 0 or distances.size == 0:
        return []
    keep = np.flatnonzero(distances < threshold)
    order = keep[np.argsort(distances[keep], kind="stable")]
    return [(int(i), float(distances[i])) for i in order[:limit]]
