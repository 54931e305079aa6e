"""
Catalogue public des projets et articles.

Listes paginées et localisées (projets, articles de blog), lecture par slug et compteurs de
filtres. Les traductions sont résolues avec le même repli que partout ailleurs (langue demandée,
anglais, puis première traduction); une locale hors des 12 du site est traitée comme la locale par
défaut (`tr`). Une erreur du dépôt est journalisée et donne une page vide.
"""

from __future__ import annotations

import math
from collections import Counter
from typing import Any

import structlog
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError

from portfolio.core.constants import DEFAULT_PAGE, DEFAULT_PAGE_SIZE, FILTER_ALL, MAX_PAGE_SIZE
from portfolio.domain.content import SourceType, TranslatableEntity
from portfolio.domain.languages import DEFAULT_LOCALE, is_supported_locale
from portfolio.domain.resolver import DEFAULT_LANGUAGE, resolve_field, resolve_translation
from portfolio.infra.content_repo import ContentSource


class Page(BaseModel):
    """Page de résultats du catalogue."""

    items: list[dict[str, Any]] = Field(default_factory=list)
    total: int = 0
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_PAGE_SIZE
    total_pages: int = 0


class FilterCount(BaseModel):
    """Valeur de filtre et nombre d'éléments correspondants."""

    name: str
    count: int


def _matches(entity: TranslatableEntity, needle: str, fields: tuple[str, ...]) -> bool:
    for t in entity.translations:
        for f in fields:
            if needle in t.get(f).lower():
                return True
    return False


def _paginate(items: list[dict[str, Any]], page: int, limit: int) -> Page:
    total = len(items)
    offset = (page - 1) * limit
    return Page(
        items=items[offset : offset + limit],
        total=total,
        page=page,
        limit=limit,
        total_pages=math.ceil(total / limit),
    )


class ContentCatalog:
    """Lecture publique des contenus pour le site."""

    def __init__(self, content_source: ContentSource, default_language: str = DEFAULT_LANGUAGE):
        """Initialise le catalogue sur le dépôt de contenus."""
        self.content_source = content_source
        self.default_language = default_language
        self._log = structlog.get_logger(__name__).bind(component="catalog")

    def _localize(
        self, entity: TranslatableEntity, lang: str, fields: tuple[str, ...]
    ) -> dict[str, Any]:
        lang = lang.strip().lower() if is_supported_locale(lang) else DEFAULT_LOCALE
        translation = resolve_translation(entity, lang, self.default_language)
        slug = entity.meta.get("slug") or entity.id
        item: dict[str, Any] = {
            "id": entity.id,
            "status": entity.status,
            "created_at": entity.created_at,
            "updated_at": entity.updated_at,
            **entity.meta,
            "language": translation.language if translation else None,
        }
        for f in fields:
            item[f] = translation.get(f) if translation else ""
        item["title"] = resolve_field(
            entity, lang, "title", default=str(slug), default_language=self.default_language
        )
        return item

    @staticmethod
    def _bounds(page: int, limit: int) -> tuple[int, int]:
        return max(1, int(page)), max(1, min(int(limit), MAX_PAGE_SIZE))

    def list_projects(
        self,
        lang: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        status: str = FILTER_ALL,
        category: str = FILTER_ALL,
        featured: bool | None = None,
    ) -> Page:
        """Liste paginée des projets, plus récents d'abord."""
        page, limit = self._bounds(page, limit)
        try:
            entities = self.content_source.find_entities_by_type(SourceType.PROJECT)
        except SQLAlchemyError as exc:
            self._log.error("catalog_projects_failed", error=str(exc))
            return Page(page=page, limit=limit)
        needle = (search or "").strip().lower()
        selected = []
        for e in entities:
            if featured is not None and bool(e.meta.get("featured")) != featured:
                continue
            if status != FILTER_ALL and e.status != status:
                continue
            if category != FILTER_ALL and e.meta.get("category") != category:
                continue
            if needle and not (
                _matches(e, needle, ("title", "short_description"))
                or any(needle in str(t).lower() for t in e.meta.get("technologies", []))
            ):
                continue
            selected.append(
                self._localize(e, lang, ("title", "short_description", "full_description"))
            )
        return _paginate(selected, page, limit)

    def list_blog_posts(
        self,
        lang: str,
        page: int = DEFAULT_PAGE,
        limit: int = DEFAULT_PAGE_SIZE,
        search: str = "",
        tag: str = FILTER_ALL,
        featured: bool | None = None,
    ) -> Page:
        """Liste paginée des articles, plus récents d'abord."""
        page, limit = self._bounds(page, limit)
        try:
            entities = self.content_source.find_entities_by_type(SourceType.BLOG)
        except SQLAlchemyError as exc:
            self._log.error("catalog_blog_failed", error=str(exc))
            return Page(page=page, limit=limit)
        needle = (search or "").strip().lower()
        selected = []
        for e in entities:
            if featured is not None and bool(e.meta.get("featured")) != featured:
                continue
            if tag != FILTER_ALL and tag not in e.meta.get("tags", []):
                continue
            if needle and not _matches(e, needle, ("title", "description")):
                continue
            selected.append(
                self._localize(e, lang, ("title", "description", "content", "read_time"))
            )
        return _paginate(selected, page, limit)

    def _by_slug(self, source_type: SourceType, slug: str) -> TranslatableEntity | None:
        try:
            entities = self.content_source.find_entities_by_type(source_type)
        except SQLAlchemyError as exc:
            self._log.error(
                "catalog_slug_failed", source_type=source_type.value, slug=slug, error=str(exc)
            )
            return None
        return next((e for e in entities if e.meta.get("slug") == slug), None)

    def get_project_by_slug(self, slug: str, lang: str) -> dict[str, Any] | None:
        """Projet localisé par slug, ou None."""
        entity = self._by_slug(SourceType.PROJECT, slug)
        if entity is None:
            return None
        return self._localize(entity, lang, ("title", "short_description", "full_description"))

    def get_blog_post_by_slug(self, slug: str, lang: str) -> dict[str, Any] | None:
        """Article localisé par slug, ou None."""
        entity = self._by_slug(SourceType.BLOG, slug)
        if entity is None:
            return None
        return self._localize(entity, lang, ("title", "description", "content", "read_time"))

    def project_filters(self) -> dict[str, list[FilterCount]]:
        """Compteurs par statut et par catégorie de projet."""
        try:
            entities = self.content_source.find_entities_by_type(SourceType.PROJECT)
        except SQLAlchemyError as exc:
            self._log.error("catalog_project_filters_failed", error=str(exc))
            return {"statuses": [], "categories": []}
        statuses = Counter(e.status for e in entities if e.status)
        categories = Counter(e.meta.get("category") for e in entities if e.meta.get("category"))
        return {
            "statuses": [FilterCount(name=k, count=v) for k, v in statuses.items()],
            "categories": [FilterCount(name=k, count=v) for k, v in categories.items()],
        }

    def blog_filters(self) -> dict[str, list[FilterCount]]:
        """Compteurs par tag d'article."""
        try:
            entities = self.content_source.find_entities_by_type(SourceType.BLOG)
        except SQLAlchemyError as exc:
            self._log.error("catalog_blog_filters_failed", error=str(exc))
            return {"tags": []}
        tags: Counter[str] = Counter()
        for e in entities:
            tags.update(e.meta.get("tags", []))
        return {"tags": [FilterCount(name=k, count=v) for k, v in tags.items()]}
