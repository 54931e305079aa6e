"""
Synchronise l'index d'embeddings avec les contenus.

Usage:
    python -m portfolio.scripts.sync_embeddings              # tous les contenus éligibles
    python -m portfolio.scripts.sync_embeddings --type project --id <uuid>
    python -m portfolio.scripts.sync_embeddings --reset      # vide l'index avant de tout refaire

Environment:
- DATABASE_URL: base cible (contenus + table embeddings)
- EMBEDDINGS_PROVIDER/OPENAI_API_KEY: fournisseur d'embeddings via le conteneur.

Le bilan de synchronisation est affiché en JSON; le code de sortie vaut 1 si des chunks ont été
ignorés après épuisement des tentatives.
"""

from __future__ import annotations

import argparse
import json
import sys

import structlog

from portfolio.core.container import Container, get_container
from portfolio.core.logging import setup_logging
from portfolio.core.settings import get_settings
from portfolio.domain.content import SourceType

log = structlog.get_logger(__name__).bind(component="sync_cli")


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Synchronise les embeddings des contenus")
    parser.add_argument("--type", dest="source_type", choices=[t.value for t in SourceType])
    parser.add_argument("--id", dest="source_id")
    parser.add_argument("--reset", action="store_true", help="vider l'index avant la synchro")
    args = parser.parse_args(argv)
    if bool(args.source_type) != bool(args.source_id):
        parser.error("--type et --id doivent être fournis ensemble")
    if args.reset and args.source_id:
        parser.error("--reset ne s'applique qu'à une synchronisation complète")
    return args


def main(argv: list[str] | None = None, container: Container | None = None) -> int:
    """
    Point d'entrée principal de la synchronisation.

    Returns:
        int: 0 si tous les chunks ont été écrits, 1 si certains ont été ignorés.
    """
    args = _parse_args(argv)
    c = container or get_container()
    if args.reset:
        removed = c.admin.delete_all()
        log.info("index_reset", removed=removed)
    if args.source_id:
        report = c.admin.sync_single(args.source_type, args.source_id)
    else:
        report = c.admin.sync_all()
    print(json.dumps(report.as_dict(), ensure_ascii=False, indent=2))
    return 1 if report.chunks_failed else 0


if __name__ == "__main__":
    setup_logging(get_settings().APP_ENV)
    sys.exit(main())
