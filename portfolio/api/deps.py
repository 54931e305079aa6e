"""Dépendances partagées pour les routes de l'API.

Le conteneur utilisé par une application est celui passé à `create_app` (tests, scripts), sinon
le conteneur partagé du processus.
"""

from __future__ import annotations

from fastapi import Request

from portfolio.core.container import Container, get_container


def app_container(request: Request) -> Container:
    """Retourne le conteneur associé à l'application courante."""
    container = getattr(request.app.state, "container", None)
    return container if container is not None else get_container()
