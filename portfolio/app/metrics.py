"""
Métriques Prometheus pour l'application.

Ce module définit les métriques Prometheus du backend de contenus: requêtes HTTP, synchronisation
des embeddings, recherche sémantique et opérations de l'index vectoriel.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Synchronisation des embeddings
SYNC_CHUNKS_WRITTEN = Counter(
    "embeddings_sync_chunks_written_total",
    "Chunks embedded and written to the vector store",
    ["source_type"],
)
SYNC_CHUNKS_FAILED = Counter(
    "embeddings_sync_chunks_failed_total",
    "Chunks skipped after exhausting embedding retries",
    ["source_type"],
)
SYNC_SOURCES_PRUNED = Counter(
    "embeddings_sync_sources_pruned_total",
    "Stored sources removed because they are no longer eligible",
    ["source_type"],
)
SYNC_DURATION = Histogram(
    "embeddings_sync_duration_seconds",
    "Duration of sync runs",
    ["mode"],
)
EMBEDDING_RETRIES = Counter(
    "embeddings_provider_retries_total",
    "Retries of embedding provider calls",
    ["model"],
)

# Recherche
RETRIEVAL_REQUESTS = Counter(
    "retrieval_requests_total",
    "Total retrieval operations",
    ["backend", "language"],
)
RETRIEVAL_ERRORS = Counter(
    "retrieval_errors_total",
    "Total retrieval errors (degraded to empty results)",
    ["backend", "code"],
)
RETRIEVAL_HITS_TOTAL = Counter(
    "retrieval_hits_total",
    "Total retrieval queries that returned at least one chunk",
    ["backend", "language"],
)
RETRIEVAL_LATENCY = Histogram(
    "retrieval_latency_seconds",
    "Latency of retrieval operations",
    ["backend"],
)

# Index vectoriel
VECSTORE_OPS = Counter(
    "vecstore_ops_total",
    "Total vector store operations",
    ["op", "backend"],
)
VECSTORE_OP_LATENCY = Histogram(
    "vecstore_op_latency_seconds",
    "Latency of vecstore operations",
    ["op", "backend"],
)


def observe_vecstore(op: str, backend: str, start: float) -> None:
    """Enregistre une opération de l'index vectoriel démarrée à `start` (perf_counter)."""
    VECSTORE_OPS.labels(op=op, backend=backend).inc()
    VECSTORE_OP_LATENCY.labels(op=op, backend=backend).observe(time.perf_counter() - start)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Collecte les métriques de comptage des requêtes et de latence par route pour l'exposition
    Prometheus. La route est le gabarit FastAPI (ex: `/content/blog/{slug}`) quand il est connu.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Traite une requête HTTP et collecte les métriques.

        Args:
            request: Requête HTTP entrante.
            call_next: Fonction pour appeler le middleware suivant.

        Returns:
            Response: Réponse HTTP avec métriques collectées.
        """
        start = time.perf_counter()
        response: Response = await call_next(request)
        route_obj = request.scope.get("route")
        route = getattr(route_obj, "path", None) or request.scope.get("path", "unknown")
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
