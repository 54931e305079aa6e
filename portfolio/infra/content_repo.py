"""Dépôt des contenus traduisibles (source de vérité) adossé à SQLAlchemy.

Ce module expose le protocole `ContentSource` consommé par la synchronisation, le catalogue et
l'administration, et son implémentation SQL en lecture seule. Les lignes ORM sont converties en
`TranslatableEntity` (traductions chargées en une requête, ordre d'insertion conservé).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker

from portfolio.domain.content import SourceType, TranslatableEntity, Translation
from portfolio.domain.source_specs import spec_for
from portfolio.infra.repo.db import get_session_factory, session_scope
from portfolio.infra.repo.models import (
    BlogPostORM,
    ProfileORM,
    ProjectORM,
    WorkExperienceORM,
)


class ContentSource(Protocol):
    """Accès en lecture aux entités traduisibles."""

    def find_entities_by_type(
        self, source_type: SourceType, eligible_only: bool = False
    ) -> list[TranslatableEntity]:
        """Entités d'un type, les plus récentes d'abord (filtrées si `eligible_only`)."""

    def find_entity_by_id(
        self, source_type: SourceType, entity_id: str
    ) -> TranslatableEntity | None:
        """Entité par identifiant, ou None si absente."""


@dataclass(frozen=True)
class _Mapping:
    model: Any
    fields: tuple[str, ...]
    meta: Callable[[Any], dict[str, Any]]
    has_status: bool = True


_MAPPINGS: dict[SourceType, _Mapping] = {
    SourceType.PROJECT: _Mapping(
        ProjectORM,
        ("title", "short_description", "full_description"),
        lambda r: {
            "slug": r.slug,
            "category": r.category,
            "featured": bool(r.featured),
            "technologies": list(r.technologies or []),
            "github": r.github,
            "live_demo": r.live_demo,
        },
    ),
    SourceType.BLOG: _Mapping(
        BlogPostORM,
        ("title", "description", "content", "read_time"),
        lambda r: {
            "slug": r.slug,
            "category": r.category,
            "featured": bool(r.featured),
            "tags": list(r.tags or []),
            "published_at": r.published_at,
        },
    ),
    SourceType.PROFILE: _Mapping(
        ProfileORM,
        ("name", "title", "description", "about_description"),
        lambda r: {"email": r.email, "github": r.github, "linkedin": r.linkedin},
        has_status=False,
    ),
    SourceType.EXPERIENCE: _Mapping(
        WorkExperienceORM,
        ("role", "description", "location_type"),
        lambda r: {"company": r.company, "start_date": r.start_date, "end_date": r.end_date},
        has_status=False,
    ),
}


def _to_entity(source_type: SourceType, mapping: _Mapping, row: Any) -> TranslatableEntity:
    translations = [
        Translation(
            language=t.language,
            fields={f: getattr(t, f) for f in mapping.fields if getattr(t, f) is not None},
        )
        for t in row.translations
    ]
    return TranslatableEntity(
        id=str(row.id),
        source_type=source_type,
        updated_at=row.updated_at,
        created_at=getattr(row, "created_at", None),
        status=row.status if mapping.has_status else None,
        translations=translations,
        meta=mapping.meta(row),
    )


class SqlContentRepository:
    """Implémentation SQL de `ContentSource`."""

    def __init__(self, engine: Engine, session_factory: sessionmaker | None = None) -> None:
        """Initialise le dépôt sur un moteur SQLAlchemy."""
        self.session_factory = session_factory or get_session_factory(engine)

    def find_entities_by_type(
        self, source_type: SourceType, eligible_only: bool = False
    ) -> list[TranslatableEntity]:
        source_type = SourceType(source_type)
        mapping = _MAPPINGS[source_type]
        model = mapping.model
        order_col = getattr(model, "created_at", model.updated_at)
        stmt = select(model).order_by(order_col.desc(), model.id)
        required = spec_for(source_type).required_status
        if eligible_only and required is not None:
            stmt = stmt.where(model.status == required)
        with session_scope(self.session_factory) as session:
            rows = session.scalars(stmt).all()
            return [_to_entity(source_type, mapping, r) for r in rows]

    def find_entity_by_id(
        self, source_type: SourceType, entity_id: str
    ) -> TranslatableEntity | None:
        source_type = SourceType(source_type)
        mapping = _MAPPINGS[source_type]
        with session_scope(self.session_factory) as session:
            row = session.get(mapping.model, entity_id)
            return _to_entity(source_type, mapping, row) if row is not None else None
