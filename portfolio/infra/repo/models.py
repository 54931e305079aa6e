"""SQLAlchemy models for the persistence layer.

Tables de contenus traduisibles (source de vérité, lue par la synchronisation) et table
`embeddings` (index vectoriel). Sur PostgreSQL la colonne vecteur utilise pgvector; sur les autres
dialectes (SQLite en dev/tests) elle est stockée en JSON.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import (
    JSON,
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


def _utcnow() -> datetime:
    return datetime.now(UTC)


def _uuid() -> str:
    return str(uuid.uuid4())


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class ProjectORM(Base):
    """Projet du portfolio."""

    __tablename__ = "projects"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(255), nullable=False, unique=True)
    status = Column(String(32), nullable=False)
    category = Column(String(64), nullable=False)
    github = Column(String(512), nullable=True)
    live_demo = Column(String(512), nullable=True)
    featured = Column(Boolean, nullable=False, default=False)
    technologies = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    translations = relationship(
        "ProjectTranslationORM",
        order_by="ProjectTranslationORM.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ProjectTranslationORM(Base):
    """Traduction d'un projet (une par langue)."""

    __tablename__ = "project_translations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(String(36), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    language = Column(String(8), nullable=False)
    title = Column(Text, nullable=False)
    short_description = Column(Text, nullable=False, default="")
    full_description = Column(Text, nullable=False, default="")

    __table_args__ = (UniqueConstraint("project_id", "language", name="uq_project_language"),)


class BlogPostORM(Base):
    """Article de blog."""

    __tablename__ = "blog_posts"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String(255), nullable=False, unique=True)
    status = Column(String(32), nullable=False, default="draft")
    category = Column(String(64), nullable=True)
    tags = Column(JSON, nullable=False, default=list)
    featured = Column(Boolean, nullable=False, default=False)
    published_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    translations = relationship(
        "BlogPostTranslationORM",
        order_by="BlogPostTranslationORM.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class BlogPostTranslationORM(Base):
    """Traduction d'un article de blog (une par langue)."""

    __tablename__ = "blog_post_translations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    blog_post_id = Column(
        String(36), ForeignKey("blog_posts.id", ondelete="CASCADE"), nullable=False
    )
    language = Column(String(8), nullable=False)
    title = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    content = Column(Text, nullable=False, default="")
    read_time = Column(String(32), nullable=True)

    __table_args__ = (UniqueConstraint("blog_post_id", "language", name="uq_blog_post_language"),)


class ProfileORM(Base):
    """Profil du propriétaire du site."""

    __tablename__ = "profiles"

    id = Column(String(36), primary_key=True, default=_uuid)
    email = Column(String(255), nullable=False)
    github = Column(String(512), nullable=False, default="")
    linkedin = Column(String(512), nullable=False, default="")
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    translations = relationship(
        "ProfileTranslationORM",
        order_by="ProfileTranslationORM.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class ProfileTranslationORM(Base):
    """Traduction du profil (une par langue)."""

    __tablename__ = "profile_translations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    profile_id = Column(String(36), ForeignKey("profiles.id", ondelete="CASCADE"), nullable=False)
    language = Column(String(8), nullable=False)
    name = Column(Text, nullable=False)
    title = Column(Text, nullable=False, default="")
    description = Column(Text, nullable=False, default="")
    about_description = Column(Text, nullable=False, default="")

    __table_args__ = (UniqueConstraint("profile_id", "language", name="uq_profile_language"),)


class WorkExperienceORM(Base):
    """Expérience professionnelle."""

    __tablename__ = "work_experiences"

    id = Column(String(36), primary_key=True, default=_uuid)
    company = Column(String(255), nullable=False)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, onupdate=_utcnow)

    translations = relationship(
        "WorkExperienceTranslationORM",
        order_by="WorkExperienceTranslationORM.id",
        cascade="all, delete-orphan",
        lazy="selectin",
    )


class WorkExperienceTranslationORM(Base):
    """Traduction d'une expérience (une par langue)."""

    __tablename__ = "work_experience_translations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    work_experience_id = Column(
        String(36), ForeignKey("work_experiences.id", ondelete="CASCADE"), nullable=False
    )
    language = Column(String(8), nullable=False)
    role = Column(Text, nullable=False)
    description = Column(Text, nullable=False, default="")
    location_type = Column(String(64), nullable=False, default="")

    __table_args__ = (
        UniqueConstraint("work_experience_id", "language", name="uq_work_experience_language"),
    )


class EmbeddingORM(Base):
    """Chunk indexé; clé composite unique (source_type, source_id, language, chunk_index)."""

    __tablename__ = "embeddings"

    id = Column(String(36), primary_key=True, default=_uuid)
    source_type = Column(String(32), nullable=False)
    source_id = Column(String(64), nullable=False)
    language = Column(String(8), nullable=False)
    chunk_index = Column(Integer, nullable=False)
    chunk_text = Column(Text, nullable=False)
    embedding = Column(Vector().with_variant(JSON(), "sqlite"), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        UniqueConstraint(
            "source_type", "source_id", "language", "chunk_index", name="uq_embedding_chunk"
        ),
        Index("ix_embeddings_source", "source_type", "source_id"),
        Index("ix_embeddings_language", "language"),
    )
