"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares,
routes, métriques et configuration de l'API de contenus.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, timing, métriques)
- Monter les routers (santé, catalogue, recherche, administration des embeddings)
"""

from __future__ import annotations

from fastapi import FastAPI

from portfolio.api.routes_content import router as content_router
from portfolio.api.routes_embeddings import router as embeddings_router
from portfolio.api.routes_health import router as health_router
from portfolio.api.routes_retrieval import router as retrieval_router
from portfolio.app.metrics import PrometheusMiddleware, metrics_router
from portfolio.core.container import Container
from portfolio.core.logging import setup_logging
from portfolio.core.settings import get_settings
from portfolio.middlewares.request_id import RequestIDMiddleware
from portfolio.middlewares.timing import TimingMiddleware


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Étapes:
    - Configure le logging structuré (structlog)
    - Lit les paramètres d'exécution
    - Ajoute les middlewares utiles au debug/traçabilité
    - Publie les routes

    Args:
        container: Conteneur à utiliser; le conteneur partagé est construit au premier appel
            d'une route sinon.
    """
    settings = container.settings if container is not None else get_settings()
    setup_logging(settings.APP_ENV)
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.state.container = container
    app.add_middleware(RequestIDMiddleware)
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.include_router(health_router)
    app.include_router(content_router)
    app.include_router(retrieval_router)
    app.include_router(embeddings_router)
    app.include_router(metrics_router)
    return app


app = create_app()
