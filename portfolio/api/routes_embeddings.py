"""Routes d'administration de l'index d'embeddings.

Statistiques, synchronisation (complète ou ciblée), suppression et état par source. Les erreurs
internes sont journalisées et renvoyées en 500 avec un message générique.
"""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Body, Depends, HTTPException, Query
from sqlalchemy.exc import SQLAlchemyError

from portfolio.api.deps import app_container
from portfolio.api.schemas import ChunkDetail, DeleteEmbeddingsRequest, SyncSingleRequest
from portfolio.core.constants import (
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_INTERNAL_SERVER_ERROR,
    HTTP_STATUS_UNPROCESSABLE_ENTITY,
)
from portfolio.domain.errors import StorageError

router = APIRouter(prefix="/admin/embeddings", tags=["admin-embeddings"])
_container_dep = Depends(app_container)
log = structlog.get_logger(__name__).bind(component="admin_embeddings_api")

_FAILURES = (StorageError, SQLAlchemyError)


def _internal_error(event: str, exc: Exception, detail: str) -> HTTPException:
    log.error(event, error=str(exc), error_type=type(exc).__name__)
    return HTTPException(status_code=HTTP_STATUS_INTERNAL_SERVER_ERROR, detail=detail)


@router.get("")
def stats(container=_container_dep) -> dict:
    """Nombre total de chunks et répartition par type de source."""
    try:
        return container.admin.stats()
    except _FAILURES as exc:
        raise _internal_error("embeddings_stats_failed", exc, "Failed to fetch stats.") from exc


@router.post("")
def sync_all(container=_container_dep) -> dict:
    """Synchronise tous les contenus éligibles."""
    try:
        report = container.admin.sync_all()
    except _FAILURES as exc:
        raise _internal_error("embeddings_sync_failed", exc, "Failed to sync embeddings.") from exc
    return {
        "success": True,
        "message": "Embeddings synced successfully.",
        "report": report.as_dict(),
    }


@router.delete("")
def delete_embeddings(
    payload: DeleteEmbeddingsRequest | None = Body(default=None), container=_container_dep
) -> dict:
    """Supprime tout l'index (`all`) ou les chunks d'une source (`sourceType` + `sourceId`)."""
    payload = payload or DeleteEmbeddingsRequest()
    try:
        if payload.all:
            removed = container.admin.delete_all()
            return {"success": True, "message": "All embeddings deleted.", "removed": removed}
        if payload.source_type and payload.source_id:
            removed = container.admin.delete(payload.source_type, payload.source_id)
            return {
                "success": True,
                "message": f"Embeddings for {payload.source_type} {payload.source_id} deleted.",
                "removed": removed,
            }
    except _FAILURES as exc:
        raise _internal_error(
            "embeddings_delete_failed", exc, "Failed to delete embeddings."
        ) from exc
    raise HTTPException(status_code=HTTP_STATUS_BAD_REQUEST, detail="Invalid parameters.")


@router.post("/sync-single")
def sync_single(payload: SyncSingleRequest, container=_container_dep) -> dict:
    """Resynchronise une source unique."""
    if not payload.source_type or not payload.source_id:
        raise HTTPException(
            status_code=HTTP_STATUS_BAD_REQUEST, detail="Missing sourceType or sourceId"
        )
    try:
        report = container.admin.sync_single(payload.source_type, payload.source_id)
    except ValueError as exc:
        raise HTTPException(
            status_code=HTTP_STATUS_UNPROCESSABLE_ENTITY,
            detail=f"Unknown source type: {payload.source_type}",
        ) from exc
    except _FAILURES as exc:
        raise _internal_error("embeddings_sync_single_failed", exc, "Failed to sync item.") from exc
    return {
        "success": True,
        "message": f"Synced {payload.source_type} {payload.source_id}",
        "report": report.as_dict(),
    }


@router.get("/items")
def items(container=_container_dep) -> dict:
    """État de synchronisation de chaque entité."""
    try:
        rows = container.admin.items()
    except _FAILURES as exc:
        raise _internal_error("embeddings_items_failed", exc, "Failed to fetch items.") from exc
    return {"items": [r.model_dump(mode="json") for r in rows]}


@router.get("/details")
def details(
    source_type: str | None = Query(default=None, alias="sourceType"),
    source_id: str | None = Query(default=None, alias="sourceId"),
    container=_container_dep,
) -> dict:
    """Chunks d'une source, triés par langue puis rang."""
    if not source_type or not source_id:
        raise HTTPException(
            status_code=HTTP_STATUS_BAD_REQUEST, detail="Missing sourceType or sourceId"
        )
    try:
        chunks = container.admin.details(source_type, source_id)
    except _FAILURES as exc:
        raise _internal_error("embeddings_details_failed", exc, "Failed to fetch details.") from exc
    return {"embeddings": [ChunkDetail(**c).model_dump(mode="json") for c in chunks]}
