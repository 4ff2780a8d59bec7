import logging
import uuid

from sqlalchemy import select, delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.errors import NotFoundError, StateError, ValidationError, store_errors
from draftpress.models.project import Project
from draftpress.models.project_file import ProjectFile
from draftpress.schemas.project_file import FileContent, FileWrite, FileWriteResult
from draftpress.utils.content_types import guess_content_type

logger = logging.getLogger("draftpress.files")

DEFAULT_DOCUMENT = "index.html"


def _path_parts(file_path: str) -> list[str]:
    return [p for p in file_path.strip().replace("\\", "/").split("/") if p and p != "."]


def normalize_path(file_path: str) -> str:
    """Canonical form of a caller-supplied path: ``./css//a.css`` -> ``css/a.css``."""
    parts = _path_parts(file_path)
    if not parts:
        raise ValidationError("File path must not be empty")
    if ".." in parts:
        raise ValidationError(f"File path must not contain '..': {file_path}")
    return "/".join(parts)


def effective_version_id(project: Project) -> uuid.UUID | None:
    return project.draft_version_id or project.active_version_id


async def load_project(db: AsyncSession, project_id: uuid.UUID, *, for_update: bool = False) -> Project:
    stmt = select(Project).where(Project.id == project_id)
    if for_update:
        stmt = stmt.with_for_update().execution_options(populate_existing=True)
    result = await db.execute(stmt)
    project = result.scalar_one_or_none()
    if not project:
        raise NotFoundError(f"Project not found: {project_id}")
    return project


async def get_file_by_path(db: AsyncSession, version_id: uuid.UUID, file_path: str) -> ProjectFile | None:
    result = await db.execute(
        select(ProjectFile).where(
            ProjectFile.version_id == version_id,
            ProjectFile.file_path == file_path,
        )
    )
    return result.scalar_one_or_none()


async def get_version_files(db: AsyncSession, version_id: uuid.UUID) -> list[ProjectFile]:
    result = await db.execute(
        select(ProjectFile)
        .where(ProjectFile.version_id == version_id)
        .order_by(ProjectFile.file_path)
    )
    return list(result.scalars().all())


@store_errors
async def read_files(
    db: AsyncSession, project_id: uuid.UUID, paths: list[str] | None = None
) -> list[FileContent]:
    project = await load_project(db, project_id)
    version_id = effective_version_id(project)
    if version_id is None:
        return []

    stmt = select(ProjectFile).where(ProjectFile.version_id == version_id)
    if paths:
        stmt = stmt.where(ProjectFile.file_path.in_([normalize_path(p) for p in paths]))
    result = await db.execute(stmt.order_by(ProjectFile.file_path))
    return [
        FileContent(path=f.file_path, content=f.content, content_type=f.content_type)
        for f in result.scalars().all()
    ]


async def _replace_file(
    db: AsyncSession, version_id: uuid.UUID, file_path: str, content: str, content_type: str
) -> None:
    existing = await get_file_by_path(db, version_id, file_path)
    if existing:
        existing.content = content
        existing.content_type = content_type
    else:
        db.add(ProjectFile(
            version_id=version_id,
            file_path=file_path,
            content=content,
            content_type=content_type,
        ))
    await db.flush()


@store_errors
async def write_files(db: AsyncSession, project_id: uuid.UUID, files: list[FileWrite]) -> list[FileWriteResult]:
    """Upsert each file into the draft; every file succeeds or fails on its own."""
    project = await load_project(db, project_id)
    if project.draft_version_id is None:
        raise StateError("No draft version found. Create a project first.")
    draft_id = project.draft_version_id

    results: list[FileWriteResult] = []
    for item in files:
        try:
            path = normalize_path(item.path)
        except ValidationError as e:
            results.append(FileWriteResult(path=item.path, ok=False, error=e.message))
            continue

        content_type = item.content_type or guess_content_type(path)
        try:
            async with db.begin_nested():
                await _replace_file(db, draft_id, path, item.content, content_type)
        except SQLAlchemyError as e:
            logger.warning("Writing %s into version %s failed: %s", path, draft_id, e)
            results.append(FileWriteResult(path=path, ok=False, error=str(e)))
            continue
        results.append(FileWriteResult(path=path, ok=True))

    await db.commit()
    logger.info(
        "Wrote %d/%d file(s) into draft %s",
        sum(1 for r in results if r.ok), len(results), draft_id,
    )
    return results


@store_errors
async def delete_files(db: AsyncSession, project_id: uuid.UUID, paths: list[str]) -> int:
    project = await load_project(db, project_id)
    if project.draft_version_id is None:
        raise StateError("No draft version found.")
    normalized = [normalize_path(p) for p in paths]
    if not normalized:
        return 0

    result = await db.execute(
        delete(ProjectFile).where(
            ProjectFile.version_id == project.draft_version_id,
            ProjectFile.file_path.in_(normalized),
        )
    )
    await db.commit()
    return result.rowcount


@store_errors
async def get_served_file(db: AsyncSession, slug: str, file_path: str, live: bool) -> ProjectFile:
    """Resolve ``/app/<slug>/<path>`` (live) or ``/preview/<slug>/<path>`` to a stored file."""
    result = await db.execute(select(Project).where(Project.slug == slug))
    project = result.scalar_one_or_none()
    if not project:
        raise NotFoundError("Project not found")

    version_id = project.active_version_id if live else project.draft_version_id
    if version_id is None:
        if live:
            raise NotFoundError("This app hasn't been published yet.")
        raise NotFoundError("No draft version exists for this project.")

    path = normalize_path(file_path) if _path_parts(file_path) else DEFAULT_DOCUMENT
    file = await get_file_by_path(db, version_id, path)
    if not file:
        raise NotFoundError(f"File not found: {path}")
    return file
