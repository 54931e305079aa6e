"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, moteur SQL, dépôt de contenus, fournisseur
d'embeddings, index vectoriel, services) et expose `get_container()` utilisé par l'API et les
scripts. Le client du fournisseur d'embeddings est construit ici une seule fois et injecté.
"""

from __future__ import annotations

import os
from functools import lru_cache

import structlog
from sqlalchemy.engine import Engine

from portfolio.core.settings import Settings, get_settings
from portfolio.infra.content_repo import ContentSource, SqlContentRepository
from portfolio.infra.embeddings.base import Embeddings
from portfolio.infra.embeddings.generator import EmbeddingGenerator
from portfolio.infra.repo.db import create_schema, get_engine, get_session_factory
from portfolio.infra.vecstores.base import VectorStore
from portfolio.infra.vecstores.memory_store import MemoryVectorStore
from portfolio.infra.vecstores.sql_store import SqlVectorStore
from portfolio.services.catalog import ContentCatalog
from portfolio.services.content_sync import ContentSyncEngine
from portfolio.services.embedding_admin import EmbeddingAdminService
from portfolio.services.retrieval import RetrievalService

log = structlog.get_logger(__name__).bind(component="container")


def _env_or_settings(key: str, settings: Settings) -> str:
    """Retourne d'abord l'env, sinon l'attribut dans settings, sinon chaîne vide.

    Ne loggue jamais la valeur du secret.
    """
    val = os.getenv(key)
    if val:
        return val
    return getattr(settings, key, "") or ""


class Container:
    """Composition des dépendances de l'application."""

    def __init__(
        self,
        settings: Settings | None = None,
        engine: Engine | None = None,
        embeddings: Embeddings | None = None,
        content_repo: ContentSource | None = None,
        vector_store: VectorStore | None = None,
    ):
        """Construit les composants; chaque dépendance peut être fournie (tests, scripts)."""
        self.settings = settings or get_settings()
        s = self.settings
        self.engine = engine or get_engine(s.DATABASE_URL)
        self.session_factory = get_session_factory(self.engine)
        if s.DB_CREATE_ALL:
            create_schema(self.engine)

        self.content_repo = content_repo or SqlContentRepository(self.engine, self.session_factory)
        if vector_store is not None:
            self.vector_store = vector_store
        elif s.VECTOR_BACKEND == "memory":
            self.vector_store = MemoryVectorStore()
        else:
            self.vector_store = SqlVectorStore(self.engine, self.session_factory)

        self.embeddings = embeddings or self._build_embeddings()
        self.generator = EmbeddingGenerator(self.embeddings, expected_dim=s.EMBEDDINGS_DIM)
        self.sync_engine = ContentSyncEngine(
            self.content_repo,
            self.generator,
            self.vector_store,
            chunk_size=s.CHUNK_MAX_SIZE,
            max_retries=s.EMBEDDINGS_MAX_RETRIES,
            concurrency=s.SYNC_CONCURRENCY,
            prune_stale=s.SYNC_PRUNE_STALE,
        )
        self.retrieval = RetrievalService(
            self.generator,
            self.vector_store,
            default_limit=s.SEARCH_DEFAULT_LIMIT,
            default_threshold=s.SEARCH_DEFAULT_THRESHOLD,
        )
        self.catalog = ContentCatalog(self.content_repo, s.DEFAULT_CONTENT_LANGUAGE)
        self.admin = EmbeddingAdminService(
            self.content_repo,
            self.vector_store,
            self.sync_engine,
            tolerance_s=s.STATUS_TOLERANCE_S,
        )
        log.info(
            "container_ready",
            vector_backend=self.vector_store.backend,
            embeddings_model=self.generator.model_name,
            dialect=self.engine.dialect.name,
        )

    def _build_embeddings(self) -> Embeddings:
        s = self.settings
        if s.EMBEDDINGS_PROVIDER == "local":
            from portfolio.infra.embeddings.local_embedder import LocalEmbedder  # noqa: PLC0415

            return LocalEmbedder(s.LOCAL_EMBEDDINGS_MODEL)
        if s.EMBEDDINGS_PROVIDER != "openai":
            raise RuntimeError(f"Unknown EMBEDDINGS_PROVIDER: {s.EMBEDDINGS_PROVIDER}")
        from portfolio.infra.embeddings.openai_embedder import (  # noqa: PLC0415
            OpenAIEmbedder,
            build_openai_client,
        )

        api_key = self.resolve_secret("OPENAI_API_KEY")
        if not api_key:
            raise RuntimeError("OPENAI_API_KEY is required for the openai embeddings provider")
        client = build_openai_client(api_key, s.EMBEDDINGS_TIMEOUT_S)
        return OpenAIEmbedder(client, model=s.EMBEDDINGS_MODEL)

    def resolve_secret(self, key: str) -> str:
        """Résolution d'un secret: env → settings. Ne journalise jamais la valeur."""
        return _env_or_settings(key, self.settings)


@lru_cache(maxsize=1)
def get_container() -> Container:
    """Conteneur partagé du processus, construit au premier accès."""
    return Container()
