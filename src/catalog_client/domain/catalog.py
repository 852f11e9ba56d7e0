"""View-model types for the course catalog client."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field

CourseId = str | int


@dataclass(frozen=True)
class CourseSummary:
    """Minimal course record used for listing, searching and recommending."""

    course_id: CourseId
    title: str
    description: str = ""
    price: float = 0.0
    tags: tuple[str, ...] = ()


@dataclass(frozen=True)
class ProfileDraft:
    """Profile fields typed by the user before registration."""

    email: str = ""
    name: str = ""
    is_admin: bool = False


@dataclass(frozen=True)
class CourseDraft:
    """Raw text of the new-course form."""

    title: str = ""
    description: str = ""
    price_text: str = ""
    tags_text: str = ""


@dataclass(frozen=True)
class CatalogFilters:
    """Search text and tag filter applied to the course listing."""

    search_text: str = ""
    tag_text: str = ""


@dataclass(frozen=True)
class CatalogViewState:
    """Single source of truth for what the window shows and submits."""

    profile: ProfileDraft = field(default_factory=ProfileDraft)
    filters: CatalogFilters = field(default_factory=CatalogFilters)
    draft: CourseDraft = field(default_factory=CourseDraft)
    interests_text: str = ""
    courses: tuple[CourseSummary, ...] = ()
    results: tuple[CourseSummary, ...] = ()
    status_message: str | None = None

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly snapshot of the state."""
        return asdict(self)
