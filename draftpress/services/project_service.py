import logging
import re
import uuid

from sqlalchemy import select, delete, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.errors import ConflictError, ValidationError, store_errors
from draftpress.models.project import Project
from draftpress.models.project_version import ProjectVersion
from draftpress.models.project_file import ProjectFile
from draftpress.schemas.project import (
    CreatedProject,
    ProjectCreate,
    ProjectDetail,
    ProjectResponse,
    ProjectSettingsUpdate,
)
from draftpress.schemas.project_file import FileListing
from draftpress.services.file_service import effective_version_id, get_version_files, load_project

logger = logging.getLogger("draftpress.projects")

SLUG_RE = re.compile(r"[a-z0-9-]+")

# Settings that may be omitted but never explicitly cleared.
NON_NULLABLE_SETTINGS = ("name", "slug", "is_public", "show_source")


def validate_slug(slug: str) -> None:
    if not SLUG_RE.fullmatch(slug):
        raise ValidationError(
            f"Invalid slug '{slug}': use lowercase letters, numbers and hyphens only"
        )


async def _ensure_slug_available(db: AsyncSession, slug: str, exclude_id: uuid.UUID | None = None) -> None:
    stmt = select(Project.id).where(Project.slug == slug)
    if exclude_id is not None:
        stmt = stmt.where(Project.id != exclude_id)
    if (await db.execute(stmt)).first():
        raise ConflictError(f"Slug '{slug}' is already taken")


@store_errors
async def create_project(db: AsyncSession, owner_id: str, data: ProjectCreate) -> CreatedProject:
    validate_slug(data.slug)
    await _ensure_slug_available(db, data.slug)

    project = Project(
        owner_id=owner_id,
        name=data.name,
        slug=data.slug,
        description=data.description,
        status="draft",
    )
    db.add(project)
    try:
        await db.flush()
    except IntegrityError as e:
        # Lost a race for the slug between the check and the insert
        await db.rollback()
        raise ConflictError(f"Slug '{data.slug}' is already taken") from e
    project_id = project.id

    # The project is kept even when its first draft can't be created.
    try:
        async with db.begin_nested():
            version = ProjectVersion(
                project_id=project_id,
                version_number=1,
                message="Initial version",
                is_draft=True,
            )
            db.add(version)
            await db.flush()
            project.draft_version_id = version.id
            await db.flush()
    except SQLAlchemyError as e:
        logger.warning("Project %s created without a draft: %s", data.slug, e)
        await db.commit()
        return CreatedProject(
            project_id=project_id,
            slug=data.slug,
            draft_version_id=None,
            initialized=False,
            error=f"Project created but failed to create initial version: {e}",
        )

    await db.commit()
    logger.info("Created project %s (%s) for %s", data.slug, project_id, owner_id)
    return CreatedProject(project_id=project_id, slug=data.slug, draft_version_id=version.id)


@store_errors
async def list_projects(db: AsyncSession) -> list[Project]:
    result = await db.execute(select(Project).order_by(Project.created_at.desc()))
    return list(result.scalars().all())


@store_errors
async def get_project(db: AsyncSession, project_id: uuid.UUID) -> ProjectDetail:
    project = await load_project(db, project_id)
    version_id = effective_version_id(project)
    files = await get_version_files(db, version_id) if version_id else []
    return ProjectDetail(
        **ProjectResponse.model_validate(project).model_dump(),
        files=[FileListing(path=f.file_path, content_type=f.content_type) for f in files],
    )


@store_errors
async def update_settings(
    db: AsyncSession, project_id: uuid.UUID, data: ProjectSettingsUpdate
) -> Project | None:
    """Apply only the supplied settings. Returns None when nothing was supplied."""
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return None
    for field in NON_NULLABLE_SETTINGS:
        if field in changes and changes[field] is None:
            raise ValidationError(f"'{field}' cannot be cleared")

    project = await load_project(db, project_id, for_update=True)
    if "slug" in changes and changes["slug"] != project.slug:
        validate_slug(changes["slug"])
        await _ensure_slug_available(db, changes["slug"], exclude_id=project.id)

    for field, value in changes.items():
        setattr(project, field, value)
    await db.commit()
    await db.refresh(project)
    logger.info("Updated settings of project %s: %s", project_id, ", ".join(sorted(changes)))
    return project


@store_errors
async def delete_project(db: AsyncSession, project_id: uuid.UUID, confirm: bool) -> bool:
    """Delete a project with all its versions and files. Returns False if not confirmed."""
    if not confirm:
        return False
    await load_project(db, project_id, for_update=True)

    # 1. Clear the pointers so no version is referenced while it is deleted
    await db.execute(
        update(Project).where(Project.id == project_id).values(
            active_version_id=None, draft_version_id=None
        )
    )
    # 2. Delete files
    version_ids = select(ProjectVersion.id).where(ProjectVersion.project_id == project_id)
    await db.execute(delete(ProjectFile).where(ProjectFile.version_id.in_(version_ids)))
    # 3. Delete versions
    await db.execute(delete(ProjectVersion).where(ProjectVersion.project_id == project_id))
    # 4. Delete project
    await db.execute(delete(Project).where(Project.id == project_id))
    await db.commit()
    logger.info("Deleted project %s", project_id)
    return True
