"""
Tests du service d'administration des embeddings.

État de synchronisation par source, titres affichés, statistiques et détail des chunks.
"""

from datetime import UTC, datetime, timedelta

from portfolio.domain.content import SourceType
from portfolio.services.embedding_admin import EmbeddingAdminService, admin_title
from tests.fakes import make_blog, make_entity, make_project

EXPECTED_TOTAL_2 = 2


def _service(repo, sync_engine, store) -> EmbeddingAdminService:
    return EmbeddingAdminService(repo, store, sync_engine)


def test_items_are_sorted_missing_outdated_synced(repo, sync_engine, store) -> None:
    """Ordre missing → outdated → synced, puis date décroissante."""
    repo.save(make_project("synced"))
    repo.save(make_project("outdated"))
    sync_engine.sync_all()
    future = datetime.now(UTC) + timedelta(minutes=5)
    repo.save(make_project("outdated", updated_at=future))
    repo.save(make_project("missing"))
    items = _service(repo, sync_engine, store).items()
    assert [(i.id, i.status) for i in items] == [
        ("missing", "missing"),
        ("outdated", "outdated"),
        ("synced", "synced"),
    ]


def test_admin_titles() -> None:
    """Titre anglais, sinon première traduction, sinon slug; expériences `société - poste`."""
    assert admin_title(make_project("p1", title="T", languages=("tr", "en"))) == "T"
    tr_only = make_entity(SourceType.BLOG, "b1", {"tr": {"title": "Merhaba"}}, "published")
    assert admin_title(tr_only) == "Merhaba"
    no_title = make_entity(SourceType.BLOG, "b2", {}, "published", slug="slug-b2")
    assert admin_title(no_title) == "slug-b2"
    exp = make_entity(SourceType.EXPERIENCE, "x", {"en": {"role": "Dev"}}, company="Acme")
    assert admin_title(exp) == "Acme - Dev"
    profile = make_entity(SourceType.PROFILE, "me", {})
    assert admin_title(profile) == "Profile"


def test_stats_and_details(repo, sync_engine, store) -> None:
    """Comptages par type et détail trié par langue puis rang."""
    repo.save(make_project("p1", languages=("tr", "en")))
    repo.save(make_blog("b1"))
    service = _service(repo, sync_engine, store)
    service.sync_all()
    stats = service.stats()
    assert stats["total"] == EXPECTED_TOTAL_2 + 1
    assert stats["by_source_type"] == {"project": 2, "blog": 1}
    details = service.details("project", "p1")
    assert [d["language"] for d in details] == ["en", "tr"]
    assert "embedding" not in details[0]


def test_delete_operations(repo, sync_engine, store) -> None:
    """Suppression ciblée puis totale."""
    repo.save(make_project("p1"))
    repo.save(make_blog("b1"))
    service = _service(repo, sync_engine, store)
    service.sync_all()
    assert service.delete("project", "p1") == 1
    assert service.delete_all() == 1
    assert service.stats()["total"] == 0
