import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from draftpress.schemas.project_file import FileListing

SLUG_PATTERN = r"^[a-z0-9-]+$"


class CallerIdentity(BaseModel):
    """Who is calling, as established by the surrounding platform."""

    user_id: str
    email: str | None = None
    name: str | None = None


class ProjectCreate(BaseModel):
    name: str = Field(min_length=1)
    slug: str = Field(pattern=SLUG_PATTERN)
    description: str | None = None


class ProjectSettingsUpdate(BaseModel):
    """Fields left out are untouched; use ``model_dump(exclude_unset=True)``."""

    name: str | None = Field(default=None, min_length=1)
    slug: str | None = Field(default=None, pattern=SLUG_PATTERN)
    description: str | None = None
    is_public: bool | None = None
    show_source: bool | None = None


class ProjectSummary(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    status: str
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ProjectResponse(ProjectSummary):
    owner_id: str
    is_public: bool
    show_source: bool
    active_version_id: uuid.UUID | None
    draft_version_id: uuid.UUID | None


class ProjectDetail(ProjectResponse):
    files: list[FileListing] = []


class ProjectSettings(BaseModel):
    id: uuid.UUID
    name: str
    slug: str
    description: str | None
    is_public: bool
    show_source: bool

    model_config = {"from_attributes": True}


class CreatedProject(BaseModel):
    project_id: uuid.UUID
    slug: str
    draft_version_id: uuid.UUID | None
    # False when the project row exists but its first draft could not be created.
    initialized: bool = True
    error: str | None = None
