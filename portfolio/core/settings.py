"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Détermination du fichier .env à utiliser avec priorité:
# 1) ENV_FILE (chemin explicite)
# 2) .env.{APP_ENV} si présent
# 3) .env (défaut)
_cwd = Path.cwd()
_env_file_from_env = os.getenv("ENV_FILE")
if _env_file_from_env:
    _ENV_FILE_PATH = _env_file_from_env
else:
    _app_env = os.getenv("APP_ENV", "dev")
    _candidate_specific = _cwd / f".env.{_app_env}"
    _candidate_default = _cwd / ".env"
    if _candidate_specific.exists():
        _ENV_FILE_PATH = _candidate_specific
    else:
        _ENV_FILE_PATH = _candidate_default


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_ENV_FILE_PATH,
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "portfolio-backend"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True

    # Base relationnelle (source de vérité + table embeddings)
    DATABASE_URL: str | None = None
    DB_CREATE_ALL: bool = True

    # Embeddings
    OPENAI_API_KEY: str | None = None
    EMBEDDINGS_PROVIDER: str = "openai"  # "openai" | "local"
    EMBEDDINGS_MODEL: str = "text-embedding-3-small"
    LOCAL_EMBEDDINGS_MODEL: str = "all-MiniLM-L6-v2"
    EMBEDDINGS_DIM: int | None = None
    EMBEDDINGS_TIMEOUT_S: float = 30.0
    EMBEDDINGS_MAX_RETRIES: int = 2

    # Index vectoriel
    VECTOR_BACKEND: str = "sql"  # "sql" | "memory"
    CHUNK_MAX_SIZE: int = 1000
    SYNC_CONCURRENCY: int = 1
    SYNC_PRUNE_STALE: bool = True
    SEARCH_DEFAULT_LIMIT: int = 5
    SEARCH_DEFAULT_THRESHOLD: float = 0.5
    STATUS_TOLERANCE_S: float = 5.0

    # Contenus multilingues
    DEFAULT_CONTENT_LANGUAGE: str = "en"


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
