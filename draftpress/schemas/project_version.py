import uuid
from datetime import datetime

from pydantic import BaseModel


class ProjectVersionListItem(BaseModel):
    id: uuid.UUID
    version_number: int
    message: str
    is_draft: bool
    is_active: bool
    is_current_draft: bool
    created_at: datetime


class PublishResult(BaseModel):
    live_url: str
    version_number: int
    new_draft_version_id: uuid.UUID | None
    # Set when the version went live but the follow-up draft could not be created.
    draft_error: str | None = None


class RollbackResult(BaseModel):
    version_number: int
    files_copied: int


class DraftRestored(BaseModel):
    draft_version_id: uuid.UUID
    version_number: int
    files_copied: int


class PreviewUrl(BaseModel):
    preview_url: str
    slug: str


class PublishRequest(BaseModel):
    message: str | None = None
