# ============================================================
# Module : portfolio/api/routes_retrieval.py
# Objet  : Endpoint interne /internal/retrieval/search.
# Notes  : Ne jamais journaliser le texte de la requête.
# ============================================================
"""Route de recherche sémantique utilisée par le chat.

La recherche ne lève jamais d'erreur vers l'appelant: un échec du fournisseur ou du stockage
donne une liste vide.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request

from portfolio.api.deps import app_container
from portfolio.api.schemas import ChunkOut, SearchRequest, SearchResponse, SourceOut
from portfolio.services.retrieval import RetrievalService

router = APIRouter(prefix="/internal/retrieval", tags=["retrieval"])
_container_dep = Depends(app_container)


@router.post("/search", response_model=SearchResponse)
def search(req: SearchRequest, request: Request, container=_container_dep) -> SearchResponse:
    """Recherche sémantique sur les contenus indexés.

    Returns:
        SearchResponse: {"results": [...], "sources": [...], "context": "..."}
    """
    request_id = request.headers.get("X-Request-ID")
    logger = structlog.get_logger(__name__).bind(request_id=request_id)
    logger.info("retrieval_search", language=req.language, limit=req.limit)
    results = container.retrieval.retrieve(req.query, req.language, req.limit, req.threshold)
    sources = RetrievalService.group_sources(results)
    return SearchResponse(
        results=[ChunkOut(**r.model_dump()) for r in results],
        sources=[
            SourceOut(source_type=s.source_type, source_id=s.source_id, similarity=s.similarity)
            for s in sources
        ],
        context=RetrievalService.format_context(results),
    )
