"""
Tests de la résolution de traduction.

Couvre la correspondance exacte, le repli sur la langue par défaut puis sur la première traduction.
"""

from portfolio.domain.content import SourceType
from portfolio.domain.resolver import resolve_field, resolve_translation
from tests.fakes import make_entity


def _entity(translations):
    return make_entity(SourceType.PROJECT, "p1", translations, status="Completed")


def test_exact_match_wins() -> None:
    """La langue demandée est retournée si elle existe."""
    e = _entity({"en": {"title": "Hello"}, "de": {"title": "Hallo"}})
    assert resolve_translation(e, "de").language == "de"


def test_falls_back_to_default_language() -> None:
    """Sans la langue demandée, l'anglais est utilisé."""
    e = _entity({"tr": {"title": "Merhaba"}, "en": {"title": "Hello"}})
    assert resolve_translation(e, "fr").language == "en"


def test_falls_back_to_first_translation() -> None:
    """Ni demandée ni défaut: première traduction dans l'ordre d'insertion."""
    e = _entity({"de": {"title": "Hallo"}, "tr": {"title": "Merhaba"}})
    assert resolve_translation(e, "fr").language == "de"


def test_no_translation_returns_none() -> None:
    """Aucune traduction: None."""
    assert resolve_translation(_entity({}), "en") is None


def test_language_matching_is_case_insensitive() -> None:
    """Les codes de langue sont normalisés en minuscules."""
    e = _entity({"en": {"title": "Hello"}, "tr": {"title": "Merhaba"}})
    assert resolve_translation(e, "TR").language == "tr"


def test_resolve_field_uses_default_when_missing() -> None:
    """Champ absent ou vide: valeur par défaut."""
    e = _entity({"en": {"title": ""}})
    assert resolve_field(e, "en", "title", default="slug") == "slug"
    assert resolve_field(_entity({}), "en", "title", default="x") == "x"
