"""Table de stratégies par type de source.

Chaque type de source décrit:
- comment extraire `(title, description, content)` d'une traduction;
- quel prédicat d'éligibilité décide si l'entité doit être indexée;
- quel champ sert de titre dans les vues d'administration.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from portfolio.domain.content import SourceType, TranslatableEntity, Translation

BLOG_PUBLISHED = "published"
PROJECT_COMPLETED = "Completed"


@dataclass(frozen=True)
class ComposedText:
    """Triplet textuel indexé pour une traduction."""

    title: str
    description: str
    content: str

    def render(self) -> str:
        """Construit le texte composite soumis au découpage."""
        return f"Title: {self.title}\nDescription: {self.description}\nContent: {self.content}"


Extractor = Callable[[TranslatableEntity, Translation], ComposedText]
Eligibility = Callable[[TranslatableEntity], bool]


@dataclass(frozen=True)
class SourceSpec:
    """Stratégie d'un type de source."""

    source_type: SourceType
    extract: Extractor
    is_eligible: Eligibility
    required_status: str | None = None
    title_field: str = "title"
    label: str = ""


def _always(_: TranslatableEntity) -> bool:
    return True


def _status_is(expected: str) -> Eligibility:
    def _check(entity: TranslatableEntity) -> bool:
        return (entity.status or "") == expected

    return _check


def _blog_text(_: TranslatableEntity, t: Translation) -> ComposedText:
    return ComposedText(t.get("title"), t.get("description"), t.get("content"))


def _project_text(_: TranslatableEntity, t: Translation) -> ComposedText:
    return ComposedText(t.get("title"), t.get("short_description"), t.get("full_description"))


def _profile_text(_: TranslatableEntity, t: Translation) -> ComposedText:
    return ComposedText(t.get("name"), t.get("title"), t.get("about_description"))


def _experience_text(entity: TranslatableEntity, t: Translation) -> ComposedText:
    company = str(entity.meta.get("company") or "")
    role = t.get("role")
    title = f"{company} - {role}" if company else role
    return ComposedText(title, t.get("location_type"), t.get("description"))


SOURCE_SPECS: dict[SourceType, SourceSpec] = {
    SourceType.BLOG: SourceSpec(
        SourceType.BLOG,
        _blog_text,
        _status_is(BLOG_PUBLISHED),
        required_status=BLOG_PUBLISHED,
        label="Blog post",
    ),
    SourceType.PROJECT: SourceSpec(
        SourceType.PROJECT,
        _project_text,
        _status_is(PROJECT_COMPLETED),
        required_status=PROJECT_COMPLETED,
        label="Project",
    ),
    SourceType.PROFILE: SourceSpec(
        SourceType.PROFILE, _profile_text, _always, title_field="name", label="Profile"
    ),
    SourceType.EXPERIENCE: SourceSpec(
        SourceType.EXPERIENCE, _experience_text, _always, title_field="role", label="Experience"
    ),
}


def spec_for(source_type: SourceType | str) -> SourceSpec:
    """Retourne la stratégie d'un type de source.

    Raises:
        ValueError: Si le type de source est inconnu.
    """
    return SOURCE_SPECS[SourceType(source_type)]
