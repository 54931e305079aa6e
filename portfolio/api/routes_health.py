"""
Endpoint de santé pour vérifier la disponibilité de l'API et du backend.

Expose `/health` pour signaler l'état général de l'application et de l'index vectoriel.
"""

from fastapi import APIRouter, Depends

from portfolio.api.deps import app_container

router = APIRouter(tags=["health"])
_container_dep = Depends(app_container)


@router.get("/health")
def health(container=_container_dep):
    """Vérifie la disponibilité de l'API et indique le backend vectoriel utilisé."""
    return {
        "status": "ok",
        "vector_backend": container.vector_store.backend,
        "embeddings_model": container.generator.model_name,
    }
