"""Découpage de texte en chunks bornés pour l'indexation.

Découpage par mots uniquement, sans recouvrement ni détection de phrases: un appelant qui a besoin
de frontières sémantiques doit pré-segmenter son texte.
"""

from __future__ import annotations

from portfolio.core.constants import DEFAULT_CHUNK_SIZE


def chunk_text(text: str | None, max_chunk_size: int = DEFAULT_CHUNK_SIZE) -> list[str]:
    """Découpe `text` en segments d'au plus `max_chunk_size` caractères.

    Les mots (séparés par des blancs) sont accumulés avec un espace simple; dès que l'ajout du mot
    suivant dépasserait la taille maximale, le tampon est émis et un nouveau commence avec ce mot.
    Un mot seul plus long que la limite forme son propre chunk.

    Args:
        text: Texte brut (None ou blanc -> aucune sortie).
        max_chunk_size: Taille maximale d'un chunk en caractères.

    Returns:
        list[str]: Chunks dans l'ordre du texte.

    Raises:
        ValueError: Si `max_chunk_size` est inférieur à 1.
    """
    if max_chunk_size < 1:
        raise ValueError("max_chunk_size doit être >= 1")
    words = (text or "").split()
    chunks: list[str] = []
    current = ""
    for word in words:
        if current and len(current) + 1 + len(word) > max_chunk_size:
            chunks.append(current)
            current = word
        else:
            current = f"{current} {word}" if current else word
    if current:
        chunks.append(current)
    return chunks
