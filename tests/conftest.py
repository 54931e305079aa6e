"""Configuration de test pour pytest avec gestion des chemins.

Ce module configure pytest pour résoudre les imports `portfolio` en ajoutant la racine du projet au
sys.path, et fournit les fixtures partagées: moteur SQLite en mémoire, index vectoriels, dépôt de
contenus en mémoire, générateur d'embeddings factice et client HTTP.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from portfolio...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from portfolio.core.settings import Settings  # noqa: E402
from portfolio.infra.embeddings.generator import EmbeddingGenerator  # noqa: E402
from portfolio.infra.repo.db import create_schema, get_engine  # noqa: E402
from portfolio.infra.repositories import InMemoryContentRepository  # noqa: E402
from portfolio.infra.vecstores.memory_store import MemoryVectorStore  # noqa: E402
from portfolio.infra.vecstores.sql_store import SqlVectorStore  # noqa: E402
from portfolio.services.content_sync import ContentSyncEngine  # noqa: E402
from tests.fakes import FakeEmbeddings  # noqa: E402


@pytest.fixture
def engine():
    """Moteur SQLite en mémoire avec le schéma créé."""
    eng = get_engine("sqlite+pysqlite:///:memory:")
    create_schema(eng)
    yield eng
    eng.dispose()


@pytest.fixture(params=["memory", "sql"])
def store(request, engine):
    """Index vectoriel, testé sur les deux backends."""
    if request.param == "memory":
        return MemoryVectorStore()
    return SqlVectorStore(engine)


@pytest.fixture
def memory_store():
    """Index vectoriel en mémoire."""
    return MemoryVectorStore()


@pytest.fixture
def repo():
    """Dépôt de contenus en mémoire, vide."""
    return InMemoryContentRepository()


@pytest.fixture
def generator():
    """Générateur d'embeddings adossé au fournisseur factice."""
    return EmbeddingGenerator(FakeEmbeddings())


@pytest.fixture
def sync_engine(repo, generator, store):
    """Moteur de synchronisation sans attente entre tentatives."""
    return ContentSyncEngine(repo, generator, store, sleep=lambda _s: None)


@pytest.fixture
def test_settings():
    """Paramètres isolés de l'environnement (pas de fichier .env)."""
    return Settings(
        _env_file=None,
        APP_ENV="test",
        DATABASE_URL="sqlite+pysqlite:///:memory:",
        VECTOR_BACKEND="memory",
        EMBEDDINGS_MAX_RETRIES=0,
    )


@pytest.fixture
def container(test_settings, repo):
    """Conteneur complet avec fournisseur factice et dépôt en mémoire."""
    from portfolio.core.container import Container  # noqa: PLC0415

    return Container(settings=test_settings, embeddings=FakeEmbeddings(), content_repo=repo)


@pytest.fixture
def client(container):
    """Client HTTP de test sur une application branchée au conteneur de test."""
    from fastapi.testclient import TestClient  # noqa: PLC0415

    from portfolio.app.main import create_app  # noqa: PLC0415

    with TestClient(create_app(container)) as c:
        yield c
