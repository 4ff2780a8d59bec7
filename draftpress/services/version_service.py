import logging
import uuid

from sqlalchemy import select, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.errors import NotFoundError, StateError, store_errors
from draftpress.models.project_version import ProjectVersion
from draftpress.models.project_file import ProjectFile
from draftpress.schemas.project_version import DraftRestored, ProjectVersionListItem, RollbackResult
from draftpress.services.file_service import get_version_files, load_project

logger = logging.getLogger("draftpress.versions")


@store_errors
async def list_versions(db: AsyncSession, project_id: uuid.UUID) -> list[ProjectVersionListItem]:
    project = await load_project(db, project_id)
    result = await db.execute(
        select(ProjectVersion)
        .where(ProjectVersion.project_id == project_id)
        .order_by(ProjectVersion.version_number.desc())
    )
    return [
        ProjectVersionListItem(
            id=v.id,
            version_number=v.version_number,
            message=v.message,
            is_draft=v.is_draft,
            is_active=v.id == project.active_version_id,
            is_current_draft=v.id == project.draft_version_id,
            created_at=v.created_at,
        )
        for v in result.scalars().all()
    ]


async def spawn_draft(
    db: AsyncSession,
    project_id: uuid.UUID,
    version_number: int,
    source_version_id: uuid.UUID | None,
) -> ProjectVersion:
    """Create a draft version holding copies of ``source_version_id``'s files."""
    draft = ProjectVersion(
        project_id=project_id,
        version_number=version_number,
        message="Draft",
        is_draft=True,
    )
    db.add(draft)
    await db.flush()

    if source_version_id is not None:
        for f in await get_version_files(db, source_version_id):
            db.add(f.copy_to(draft.id))
        await db.flush()
    return draft


@store_errors
async def rollback_to_version(
    db: AsyncSession, project_id: uuid.UUID, version_id: uuid.UUID
) -> RollbackResult:
    """Replace the draft's files with copies of another version's files."""
    project = await load_project(db, project_id, for_update=True)
    if project.draft_version_id is None:
        raise StateError("No draft version to roll back into.")
    draft_id = project.draft_version_id

    result = await db.execute(
        select(ProjectVersion).where(
            ProjectVersion.id == version_id,
            ProjectVersion.project_id == project_id,
        )
    )
    target = result.scalar_one_or_none()
    if not target:
        raise NotFoundError("Version not found or doesn't belong to this project.")
    version_number = target.version_number

    # Snapshot before the delete, the target may be the draft itself
    source = [
        {"file_path": f.file_path, "content": f.content, "content_type": f.content_type}
        for f in await get_version_files(db, version_id)
    ]

    await db.execute(delete(ProjectFile).where(ProjectFile.version_id == draft_id))
    for f in source:
        db.add(ProjectFile(version_id=draft_id, **f))
    await db.commit()

    logger.info(
        "Rolled back draft %s of project %s to version %d (%d files)",
        draft_id, project_id, version_number, len(source),
    )
    return RollbackResult(version_number=version_number, files_copied=len(source))


@store_errors
async def restore_draft(db: AsyncSession, project_id: uuid.UUID) -> DraftRestored:
    """Recreate a missing draft from the active version, e.g. after a failed publish."""
    project = await load_project(db, project_id, for_update=True)
    if project.draft_version_id is not None:
        raise StateError("Project already has a draft version.")
    active_id = project.active_version_id

    result = await db.execute(
        select(func.max(ProjectVersion.version_number)).where(ProjectVersion.project_id == project_id)
    )
    next_number = (result.scalar() or 0) + 1

    draft = await spawn_draft(db, project_id, next_number, active_id)
    draft_id = draft.id
    project.draft_version_id = draft_id
    files_copied = len(await get_version_files(db, draft_id))
    await db.commit()

    logger.info("Restored draft %s (version %d) for project %s", draft_id, next_number, project_id)
    return DraftRestored(draft_version_id=draft_id, version_number=next_number, files_copied=files_copied)
