"""
Tests des routes HTTP (TestClient).

Santé, administration des embeddings, recherche interne et catalogue public.
"""

from portfolio.core.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_INTERNAL_SERVER_ERROR,
    HTTP_STATUS_NOT_FOUND,
    HTTP_STATUS_OK,
    HTTP_STATUS_UNPROCESSABLE_ENTITY,
)
from portfolio.domain.errors import StorageError
from tests.fakes import make_blog, make_project, words


def test_health(client) -> None:
    """`/health` répond avec le backend vectoriel."""
    r = client.get("/health")
    assert r.status_code == HTTP_STATUS_OK
    assert r.json()["vector_backend"] == "memory"
    assert "X-Request-ID" in r.headers
    assert "X-Process-Time-ms" in r.headers


def test_sync_then_stats_items_and_details(client, repo) -> None:
    """Synchronisation complète puis lecture des statistiques, de l'état et du détail."""
    repo.save(make_project("p1", full_description=words(250)))
    repo.save(make_blog("b1", status="draft"))
    r = client.post("/admin/embeddings")
    assert r.status_code == HTTP_STATUS_OK
    assert r.json()["report"]["chunks_written"] == 3

    stats = client.get("/admin/embeddings").json()
    assert stats == {"total": 3, "by_source_type": {"project": 3}}

    items = {i["id"]: i["status"] for i in client.get("/admin/embeddings/items").json()["items"]}
    assert items == {"b1": "missing", "p1": "synced"}

    r = client.get("/admin/embeddings/details", params={"sourceType": "project", "sourceId": "p1"})
    assert [e["chunk_index"] for e in r.json()["embeddings"]] == [0, 1, 2]


def test_details_requires_both_params(client) -> None:
    """Paramètres manquants: 400."""
    r = client.get("/admin/embeddings/details", params={"sourceType": "project"})
    assert r.status_code == HTTP_STATUS_BAD_REQUEST


def test_sync_single_validation(client, repo) -> None:
    """Champ manquant → 400, type inconnu → 422, sinon synchronisation ciblée."""
    repo.save(make_project("p1"))
    r = client.post("/admin/embeddings/sync-single", json={"sourceType": "project"})
    assert r.status_code == HTTP_STATUS_BAD_REQUEST
    r = client.post("/admin/embeddings/sync-single", json={"sourceType": "video", "sourceId": "1"})
    assert r.status_code == HTTP_STATUS_UNPROCESSABLE_ENTITY
    payload = {"sourceType": "project", "sourceId": "p1"}
    r = client.post("/admin/embeddings/sync-single", json=payload)
    assert r.status_code == HTTP_STATUS_OK
    assert r.json()["report"]["chunks_written"] == 1


def test_delete_embeddings(client, repo) -> None:
    """Suppression ciblée, totale, et paramètres invalides."""
    repo.save(make_project("p1"))
    repo.save(make_blog("b1"))
    client.post("/admin/embeddings")
    r = client.request(
        "DELETE", "/admin/embeddings", json={"sourceType": "project", "sourceId": "p1"}
    )
    assert r.status_code == HTTP_STATUS_OK
    assert r.json()["removed"] == 1
    assert client.request("DELETE", "/admin/embeddings", json={}).status_code == (
        HTTP_STATUS_BAD_REQUEST
    )
    r = client.request("DELETE", "/admin/embeddings", json={"all": True})
    assert r.json()["removed"] == 1


def test_storage_failure_answers_500(client, container, monkeypatch) -> None:
    """Une erreur de stockage donne un 500 avec message générique."""

    def _boom():
        raise StorageError("count")

    monkeypatch.setattr(container.vector_store, "count", _boom)
    r = client.get("/admin/embeddings")
    assert r.status_code == HTTP_STATUS_INTERNAL_SERVER_ERROR
    assert r.json()["detail"] == "Failed to fetch stats."


def test_retrieval_search(client, repo) -> None:
    """La recherche renvoie les chunks et les sources regroupées."""
    repo.save(make_project("p1", languages=("en", "tr")))
    client.post("/admin/embeddings")
    r = client.post("/internal/retrieval/search", json={"query": "portfolio", "language": "de"})
    assert r.status_code == HTTP_STATUS_OK
    body = r.json()
    assert [c["language"] for c in body["results"]] == ["en"]
    assert body["sources"][0]["source_id"] == "p1"
    assert body["context"].startswith("[project:p1] Title: Portfolio")
    empty = client.post("/internal/retrieval/search", json={"query": "", "language": "en"})
    assert empty.json() == {"results": [], "sources": [], "context": ""}


def test_retrieval_search_validates_limit(client) -> None:
    """Limite hors bornes: 422."""
    r = client.post("/internal/retrieval/search", json={"query": "q", "limit": 0})
    assert r.status_code == HTTP_STATUS_UNPROCESSABLE_ENTITY


def test_content_routes(client, repo) -> None:
    """Listes paginées, lecture par slug et 404."""
    repo.save(make_project("p1", slug="portfolio"))
    repo.save(make_blog("b1", slug="hello", tags=["python"]))
    projects = client.get("/content/projects", params={"lang": "en"}).json()
    assert projects["total"] == 1
    assert projects["total_pages"] == 1
    assert client.get("/content/projects/portfolio").json()["id"] == "p1"
    assert client.get("/content/projects/nope").status_code == HTTP_STATUS_NOT_FOUND
    assert client.get("/content/blog", params={"tag": "python"}).json()["total"] == 1
    assert client.get("/content/blog/hello").json()["title"] == "Hello"
    assert client.get("/content/blog/nope").status_code == HTTP_STATUS_NOT_FOUND
    tags = client.get("/content/blog/filters").json()["tags"]
    assert tags == [{"name": "python", "count": 1}]


def test_metrics_endpoint(client) -> None:
    """`/metrics` expose les métriques Prometheus."""
    client.get("/health")
    r = client.get("/metrics")
    assert r.status_code == HTTP_STATUS_OK
    assert "http_requests_total" in r.text
