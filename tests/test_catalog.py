"""
Tests du catalogue public (projets et articles).

Pagination, filtres, recherche insensible à la casse et repli de traduction.
"""

from datetime import timedelta
from unittest.mock import Mock

from sqlalchemy.exc import OperationalError

from portfolio.domain.content import SourceType
from portfolio.services.catalog import ContentCatalog
from tests.fakes import PAST, make_blog, make_entity, make_project

EXPECTED_TOTAL_7 = 7
EXPECTED_PAGES_2 = 2


def _seed_projects(repo, n: int = EXPECTED_TOTAL_7) -> None:
    for i in range(n):
        repo.save(
            make_project(
                f"p{i}",
                status="Completed" if i % 2 else "In Progress",
                title=f"Project {i}",
                created_at=PAST + timedelta(days=i),
                category="Web" if i < 5 else "AI",
            )
        )


def test_projects_are_paginated_newest_first(repo) -> None:
    """Page de 6 par défaut, tri par date de création décroissante."""
    _seed_projects(repo)
    catalog = ContentCatalog(repo)
    page1 = catalog.list_projects("en")
    assert page1.total == EXPECTED_TOTAL_7
    assert page1.total_pages == EXPECTED_PAGES_2
    assert page1.items[0]["id"] == "p6"
    page2 = catalog.list_projects("en", page=2)
    assert [i["id"] for i in page2.items] == ["p0"]


def test_projects_filters_and_search(repo) -> None:
    """Statut, catégorie, mise en avant et recherche sur titre/technologies."""
    _seed_projects(repo)
    repo.save(make_project("rust", title="Other", technologies=["Rust"], featured=True))
    catalog = ContentCatalog(repo)
    assert catalog.list_projects("en", status="Completed", category="AI").total == 1
    assert [i["id"] for i in catalog.list_projects("en", search="RUST").items] == ["rust"]
    assert catalog.list_projects("en", search="project 3").items[0]["id"] == "p3"
    assert catalog.list_projects("en", featured=True).total == 1


def test_items_use_translation_fallback(repo) -> None:
    """Langue absente: traduction anglaise plutôt que des champs vides."""
    repo.save(make_project("p1", title="English title", languages=("en",)))
    item = ContentCatalog(repo).list_projects("de").items[0]
    assert item["title"] == "English title"
    assert item["language"] == "en"


def test_unsupported_locale_uses_default_locale(repo) -> None:
    """Une locale hors du site est servie dans la locale par défaut (`tr`)."""
    fields = {"short_description": "", "full_description": ""}
    repo.save(
        make_entity(
            SourceType.PROJECT,
            "p1",
            {"en": {"title": "English", **fields}, "tr": {"title": "Türkçe", **fields}},
            "Completed",
            slug="p1",
        )
    )
    catalog = ContentCatalog(repo)
    assert catalog.get_project_by_slug("p1", "xx")["title"] == "Türkçe"
    assert catalog.get_project_by_slug("p1", " EN ")["title"] == "English"


def test_blog_tag_filter_and_slug(repo) -> None:
    """Filtre par tag, lecture par slug et absence."""
    repo.save(make_blog("b1", tags=["python", "ai"], slug="hello"))
    repo.save(make_blog("b2", tags=["python"], status="draft"))
    catalog = ContentCatalog(repo)
    assert catalog.list_blog_posts("en", tag="ai").total == 1
    assert catalog.get_blog_post_by_slug("hello", "tr")["id"] == "b1"
    assert catalog.get_blog_post_by_slug("missing", "en") is None
    tags = {f.name: f.count for f in catalog.blog_filters()["tags"]}
    assert tags == {"python": 2, "ai": 1}


def test_title_falls_back_to_slug(repo) -> None:
    """Sans titre traduit, le slug est affiché."""
    repo.save(make_entity(SourceType.PROJECT, "p1", {}, "Completed", slug="my-slug"))
    assert ContentCatalog(repo).get_project_by_slug("my-slug", "en")["title"] == "my-slug"


def test_project_filters_count_statuses(repo) -> None:
    """Compteurs par statut et catégorie."""
    _seed_projects(repo)
    filters = ContentCatalog(repo).project_filters()
    statuses = {f.name: f.count for f in filters["statuses"]}
    assert statuses == {"Completed": 3, "In Progress": 4}
    assert {f.name: f.count for f in filters["categories"]} == {"Web": 5, "AI": 2}


def test_repository_failure_returns_empty_page() -> None:
    """Une erreur de base donne une page vide."""
    repo = Mock()
    repo.find_entities_by_type.side_effect = OperationalError("select", {}, Exception("down"))
    catalog = ContentCatalog(repo)
    page = catalog.list_projects("en", page=3)
    assert page.items == []
    assert page.total == 0
    assert page.page == 3
    assert catalog.blog_filters() == {"tags": []}
