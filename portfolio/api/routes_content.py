"""Routes publiques du catalogue (projets et articles de blog).

Listes paginées et localisées, lecture par slug, compteurs de filtres.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from portfolio.api.deps import app_container
from portfolio.core.constants import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    FILTER_ALL,
    HTTP_STATUS_NOT_FOUND,
    MAX_PAGE_SIZE,
)
from portfolio.domain.languages import DEFAULT_LOCALE

router = APIRouter(prefix="/content", tags=["content"])
_container_dep = Depends(app_container)


@router.get("/projects")
def list_projects(
    lang: str = DEFAULT_LOCALE,
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str = "",
    status: str = FILTER_ALL,
    category: str = FILTER_ALL,
    featured: bool | None = None,
    container=_container_dep,
) -> dict:
    """Projets paginés, plus récents d'abord."""
    result = container.catalog.list_projects(
        lang, page, limit, search=search, status=status, category=category, featured=featured
    )
    return result.model_dump(mode="json")


@router.get("/projects/filters")
def project_filters(container=_container_dep) -> dict:
    """Compteurs par statut et catégorie."""
    filters = container.catalog.project_filters()
    return {k: [f.model_dump() for f in v] for k, v in filters.items()}


@router.get("/projects/{slug}")
def get_project(slug: str, lang: str = DEFAULT_LOCALE, container=_container_dep) -> dict:
    """Projet localisé par slug."""
    item = container.catalog.get_project_by_slug(slug, lang)
    if item is None:
        raise HTTPException(status_code=HTTP_STATUS_NOT_FOUND, detail="project_not_found")
    return item


@router.get("/blog")
def list_blog_posts(
    lang: str = DEFAULT_LOCALE,
    page: int = Query(default=DEFAULT_PAGE, ge=1),
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    search: str = "",
    tag: str = FILTER_ALL,
    featured: bool | None = None,
    container=_container_dep,
) -> dict:
    """Articles paginés, plus récents d'abord."""
    result = container.catalog.list_blog_posts(
        lang, page, limit, search=search, tag=tag, featured=featured
    )
    return result.model_dump(mode="json")


@router.get("/blog/filters")
def blog_filters(container=_container_dep) -> dict:
    """Compteurs par tag."""
    filters = container.catalog.blog_filters()
    return {k: [f.model_dump() for f in v] for k, v in filters.items()}


@router.get("/blog/{slug}")
def get_blog_post(slug: str, lang: str = DEFAULT_LOCALE, container=_container_dep) -> dict:
    """Article localisé par slug."""
    item = container.catalog.get_blog_post_by_slug(slug, lang)
    if item is None:
        raise HTTPException(status_code=HTTP_STATUS_NOT_FOUND, detail="blog_post_not_found")
    return item
