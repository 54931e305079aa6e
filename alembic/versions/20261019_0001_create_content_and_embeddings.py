# mypy: ignore-errors
"""
Migration Alembic: tables de contenus traduisibles et table embeddings.

Sur PostgreSQL, active l'extension `vector`, type la colonne `embedding` en `vector(dim)` (dim lue
dans `EMBEDDINGS_DIM`, 1536 par défaut) et crée un index HNSW cosinus. Sur les autres dialectes,
la colonne est stockée en JSON.
"""

from __future__ import annotations

import os

import sqlalchemy as sa
from pgvector.sqlalchemy import Vector

from alembic import op

# revision identifiers, used by Alembic.
revision = "20261019_0001"
down_revision = None
branch_labels = None
depends_on = None

DEFAULT_DIM = 1536


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    """Crée les tables de contenus, leurs traductions et la table embeddings."""
    bind = op.get_bind()
    is_pg = bind.dialect.name == "postgresql"
    if is_pg:
        op.execute("CREATE EXTENSION IF NOT EXISTS vector")

    op.create_table(
        "projects",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=False),
        sa.Column("github", sa.String(length=512), nullable=True),
        sa.Column("live_demo", sa.String(length=512), nullable=True),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("technologies", sa.JSON(), nullable=False),
        *_timestamps(),
    )
    op.create_table(
        "project_translations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "project_id",
            sa.String(length=36),
            sa.ForeignKey("projects.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("language", sa.String(length=8), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("short_description", sa.Text(), nullable=False),
        sa.Column("full_description", sa.Text(), nullable=False),
        sa.UniqueConstraint("project_id", "language", name="uq_project_language"),
    )
    op.create_table(
        "blog_posts",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("category", sa.String(length=64), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("featured", sa.Boolean(), nullable=False),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "blog_post_translations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "blog_post_id",
            sa.String(length=36),
            sa.ForeignKey("blog_posts.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("language", sa.String(length=8), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("read_time", sa.String(length=32), nullable=True),
        sa.UniqueConstraint("blog_post_id", "language", name="uq_blog_post_language"),
    )
    op.create_table(
        "profiles",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("email", sa.String(length=255), nullable=False),
        sa.Column("github", sa.String(length=512), nullable=False),
        sa.Column("linkedin", sa.String(length=512), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_table(
        "profile_translations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "profile_id",
            sa.String(length=36),
            sa.ForeignKey("profiles.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("language", sa.String(length=8), nullable=False),
        sa.Column("name", sa.Text(), nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("about_description", sa.Text(), nullable=False),
        sa.UniqueConstraint("profile_id", "language", name="uq_profile_language"),
    )
    op.create_table(
        "work_experiences",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("company", sa.String(length=255), nullable=False),
        sa.Column("start_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_table(
        "work_experience_translations",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "work_experience_id",
            sa.String(length=36),
            sa.ForeignKey("work_experiences.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("language", sa.String(length=8), nullable=False),
        sa.Column("role", sa.Text(), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("location_type", sa.String(length=64), nullable=False),
        sa.UniqueConstraint(
            "work_experience_id", "language", name="uq_work_experience_language"
        ),
    )

    dim = int(os.getenv("EMBEDDINGS_DIM") or DEFAULT_DIM)
    op.create_table(
        "embeddings",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("source_type", sa.String(length=32), nullable=False),
        sa.Column("source_id", sa.String(length=64), nullable=False),
        sa.Column("language", sa.String(length=8), nullable=False),
        sa.Column("chunk_index", sa.Integer(), nullable=False),
        sa.Column("chunk_text", sa.Text(), nullable=False),
        sa.Column("embedding", Vector(dim) if is_pg else sa.JSON(), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint(
            "source_type", "source_id", "language", "chunk_index", name="uq_embedding_chunk"
        ),
    )
    op.create_index("ix_embeddings_source", "embeddings", ["source_type", "source_id"])
    op.create_index("ix_embeddings_language", "embeddings", ["language"])
    if is_pg:
        op.execute(
            "CREATE INDEX IF NOT EXISTS ix_embeddings_hnsw ON embeddings "
            "USING hnsw (embedding vector_cosine_ops)"
        )


def downgrade() -> None:
    """Supprime les tables créées par `upgrade` (l'extension `vector` est conservée)."""
    op.drop_table("embeddings")
    op.drop_table("work_experience_translations")
    op.drop_table("work_experiences")
    op.drop_table("profile_translations")
    op.drop_table("profiles")
    op.drop_table("blog_post_translations")
    op.drop_table("blog_posts")
    op.drop_table("project_translations")
    op.drop_table("projects")
