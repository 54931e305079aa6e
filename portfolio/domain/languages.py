"""Langues supportées par le site et par l'index d'embeddings.

Le site est servi dans 12 locales, mais l'index vectoriel est volontairement restreint au turc et à
l'anglais: toute autre langue demandée en recherche est ramenée à l'anglais.
"""

from __future__ import annotations

SUPPORTED_LOCALES: tuple[str, ...] = (
    "tr",
    "en",
    "de",
    "fr",
    "es",
    "it",
    "pt",
    "ru",
    "ja",
    "ko",
    "ar",
    "zh",
)
DEFAULT_LOCALE = "tr"

EMBEDDING_LANGUAGES: tuple[str, ...] = ("tr", "en")
EMBEDDING_FALLBACK_LANGUAGE = "en"


def is_supported_locale(language: str | None) -> bool:
    """Indique si la langue fait partie des 12 locales du site."""
    return (language or "").strip().lower() in SUPPORTED_LOCALES


def is_embedding_language(language: str | None) -> bool:
    """Indique si une traduction dans cette langue doit être indexée."""
    return (language or "").strip().lower() in EMBEDDING_LANGUAGES


def normalize_embedding_language(language: str | None) -> str:
    """Ramène une langue demandée à la partition de recherche (`tr`, sinon `en`)."""
    return "tr" if (language or "").strip().lower() == "tr" else EMBEDDING_FALLBACK_LANGUAGE
