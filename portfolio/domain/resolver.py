"""Résolution de la traduction à afficher pour une entité.

Règle unique partagée par le catalogue public, l'administration des embeddings et l'extraction des
titres: langue demandée, sinon langue par défaut, sinon première traduction (ordre d'insertion).
"""

from __future__ import annotations

from portfolio.domain.content import TranslatableEntity, Translation

DEFAULT_LANGUAGE = "en"


def resolve_translation(
    entity: TranslatableEntity,
    requested_language: str | None,
    default_language: str = DEFAULT_LANGUAGE,
) -> Translation | None:
    """Retourne la meilleure traduction pour `requested_language`.

    Returns:
        Translation | None: None uniquement si l'entité n'a aucune traduction.
    """
    if not entity.translations:
        return None
    if requested_language:
        exact = entity.translation_for(requested_language)
        if exact is not None:
            return exact
    fallback = entity.translation_for(default_language)
    if fallback is not None:
        return fallback
    return entity.translations[0]


def resolve_field(
    entity: TranslatableEntity,
    requested_language: str | None,
    field: str,
    default: str = "",
    default_language: str = DEFAULT_LANGUAGE,
) -> str:
    """Retourne un champ de la traduction résolue, ou `default` si absent/vide."""
    translation = resolve_translation(entity, requested_language, default_language)
    if translation is None:
        return default
    return translation.get(field) or default
