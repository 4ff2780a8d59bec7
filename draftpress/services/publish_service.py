import logging
import uuid

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.errors import StateError, store_errors
from draftpress.models.project_version import ProjectVersion
from draftpress.schemas.project_version import PreviewUrl, PublishResult
from draftpress.services import version_service
from draftpress.services.file_service import load_project

logger = logging.getLogger("draftpress.versions")

LIVE_URL_PREFIX = "/app"
PREVIEW_URL_PREFIX = "/preview"


def live_url(slug: str) -> str:
    return f"{LIVE_URL_PREFIX}/{slug}"


def preview_url(slug: str) -> str:
    return f"{PREVIEW_URL_PREFIX}/{slug}"


@store_errors
async def publish_project(db: AsyncSession, project_id: uuid.UUID, message: str | None = None) -> PublishResult:
    """Promote the draft to the active version and open a new draft copied from it.

    The draft is frozen before the next one is created, so a failure while
    creating the new draft leaves a published project without a draft rather
    than one with two drafts. The publish itself is never undone.
    """
    project = await load_project(db, project_id, for_update=True)
    if project.draft_version_id is None:
        raise StateError("No draft version to publish.")
    slug = project.slug

    result = await db.execute(select(ProjectVersion).where(ProjectVersion.id == project.draft_version_id))
    published = result.scalar_one()
    published.is_draft = False
    published.message = message or "Published"
    await db.flush()
    published_id = published.id
    published_number = published.version_number

    new_draft_id: uuid.UUID | None = None
    draft_error: str | None = None
    try:
        async with db.begin_nested():
            draft = await version_service.spawn_draft(db, project_id, published_number + 1, published_id)
            new_draft_id = draft.id
    except SQLAlchemyError as e:
        logger.warning("Project %s published version %d but no new draft: %s", slug, published_number, e)
        new_draft_id = None
        draft_error = f"Failed to create new draft: {e}"

    project.active_version_id = published_id
    project.draft_version_id = new_draft_id
    project.status = "published"
    await db.commit()

    logger.info("Published %s version %d", slug, published_number)
    return PublishResult(
        live_url=live_url(slug),
        version_number=published_number,
        new_draft_version_id=new_draft_id,
        draft_error=draft_error,
    )


@store_errors
async def get_preview_url(db: AsyncSession, project_id: uuid.UUID) -> PreviewUrl:
    project = await load_project(db, project_id)
    if project.draft_version_id is None:
        raise StateError("No draft version exists for this project.")
    return PreviewUrl(preview_url=preview_url(project.slug), slug=project.slug)
