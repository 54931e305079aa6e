"""Configuration de logging basée sur structlog.

Objectif du module
------------------
- Fournir une configuration de logs structurés lisibles en développement.
- Produire du JSON hors développement pour l'agrégation des logs.
"""

import logging
import sys

import structlog


def setup_logging(app_env: str = "dev", level: int = logging.DEBUG) -> None:
    """Configure structlog pour produire des logs détaillés et filtrables.

    Les variables de contexte (ex: `request_id`) liées via `structlog.contextvars` sont fusionnées
    dans chaque événement.
    """
    renderer = (
        structlog.dev.ConsoleRenderer()
        if app_env in {"dev", "test"}
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
