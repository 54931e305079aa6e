"""
Environnement Alembic du schéma contenus + index d'embeddings.

L'URL cible vient des settings (`DATABASE_URL`, `.env` résolu comme pour l'application), à défaut
`sqlite:///./portfolio.db`. Le mode offline produit le SQL sans connexion; le mode online migre
via une connexion sans pool.
"""

from __future__ import annotations

import sys
from logging.config import fileConfig
from pathlib import Path

from sqlalchemy import create_engine, pool

from alembic import context  # type: ignore[attr-defined]

# Racine du dépôt importable depuis la CLI Alembic
_root = str(Path(__file__).resolve().parent.parent)
if _root not in sys.path:
    sys.path.append(_root)

from portfolio.core.settings import get_settings  # noqa: E402
from portfolio.infra.repo.models import Base  # noqa: E402

DEFAULT_MIGRATION_URL = "sqlite:///./portfolio.db"

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _database_url() -> str:
    return get_settings().DATABASE_URL or DEFAULT_MIGRATION_URL


def run_migrations_offline() -> None:
    """Génère le SQL des migrations (bindings littéraux, pas de connexion)."""
    context.configure(
        url=_database_url(),
        target_metadata=target_metadata,
        literal_binds=True,
        compare_type=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Applique les migrations sur la base configurée."""
    engine = create_engine(_database_url(), poolclass=pool.NullPool)
    with engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
