"""Single entry point for tool calls: validates arguments, routes to a service,
and wraps the outcome in a :class:`ToolResult`.

Every domain failure comes back as an ``error`` result; nothing raised by the
services escapes :func:`dispatch` except programming errors.
"""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ValidationError as PydanticValidationError
from pydantic_core import to_jsonable_python
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.errors import DraftpressError
from draftpress.schemas.project import (
    CallerIdentity,
    ProjectCreate,
    ProjectSettings,
    ProjectSettingsUpdate,
    ProjectSummary,
)
from draftpress.schemas.project_file import FilesDeleted
from draftpress.schemas.tool import (
    CreateProjectArgs,
    DeleteFilesArgs,
    DeleteProjectArgs,
    NoArgs,
    ProjectArgs,
    PublishArgs,
    ReadFilesArgs,
    RollbackArgs,
    ToolResult,
    UpdateSettingsArgs,
    WriteFilesArgs,
)
from draftpress.services import file_service, project_service, publish_service, version_service

logger = logging.getLogger("draftpress.tools")

Handler = Callable[[AsyncSession, CallerIdentity, Any], Awaitable[ToolResult]]


@dataclass(frozen=True)
class ToolSpec:
    name: str
    description: str
    args_model: type[BaseModel]
    handler: Handler


def _ok(data: Any, message: str = "") -> ToolResult:
    return ToolResult.success(to_jsonable_python(data), message)


async def _create_project(db: AsyncSession, caller: CallerIdentity, args: CreateProjectArgs) -> ToolResult:
    created = await project_service.create_project(
        db, caller.user_id, ProjectCreate(name=args.name, slug=args.slug, description=args.description)
    )
    if not created.initialized:
        return _ok(created, created.error or "Project created but initialization was incomplete.")
    return _ok(created, f'Project "{args.name}" created successfully!')


async def _list_projects(db: AsyncSession, caller: CallerIdentity, args: NoArgs) -> ToolResult:
    projects = await project_service.list_projects(db)
    if not projects:
        return _ok([], "No projects found. Use create_project to get started!")
    return _ok([ProjectSummary.model_validate(p) for p in projects])


async def _get_project(db: AsyncSession, caller: CallerIdentity, args: ProjectArgs) -> ToolResult:
    return _ok(await project_service.get_project(db, args.project_id))


async def _read_files(db: AsyncSession, caller: CallerIdentity, args: ReadFilesArgs) -> ToolResult:
    files = await file_service.read_files(db, args.project_id, args.file_paths)
    if not files:
        return _ok([], "No files found.")
    return _ok(files)


async def _write_files(db: AsyncSession, caller: CallerIdentity, args: WriteFilesArgs) -> ToolResult:
    results = await file_service.write_files(db, args.project_id, args.files)
    written = sum(1 for r in results if r.ok)
    return _ok(results, f"Files written: {written}/{len(results)}")


async def _delete_files(db: AsyncSession, caller: CallerIdentity, args: DeleteFilesArgs) -> ToolResult:
    deleted = await file_service.delete_files(db, args.project_id, args.file_paths)
    return _ok(FilesDeleted(deleted=deleted), f"Deleted {deleted} file(s).")


async def _publish(db: AsyncSession, caller: CallerIdentity, args: PublishArgs) -> ToolResult:
    result = await publish_service.publish_project(db, args.project_id, args.message)
    if result.draft_error:
        return _ok(result, f"Published! But {result.draft_error}")
    return _ok(result, "Published successfully!")


async def _get_preview_url(db: AsyncSession, caller: CallerIdentity, args: ProjectArgs) -> ToolResult:
    return _ok(await publish_service.get_preview_url(db, args.project_id))


async def _list_versions(db: AsyncSession, caller: CallerIdentity, args: ProjectArgs) -> ToolResult:
    return _ok(await version_service.list_versions(db, args.project_id))


async def _rollback(db: AsyncSession, caller: CallerIdentity, args: RollbackArgs) -> ToolResult:
    result = await version_service.rollback_to_version(db, args.project_id, args.version_id)
    return _ok(
        result,
        f"Rolled back to version {result.version_number}. Files copied into your current draft.",
    )


async def _update_settings(db: AsyncSession, caller: CallerIdentity, args: UpdateSettingsArgs) -> ToolResult:
    update = ProjectSettingsUpdate(**args.model_dump(exclude_unset=True, exclude={"project_id"}))
    project = await project_service.update_settings(db, args.project_id, update)
    if project is None:
        return ToolResult.noop("Nothing to update. Provide at least one setting to change.")
    return _ok(ProjectSettings.model_validate(project), "Settings updated!")


async def _delete_project(db: AsyncSession, caller: CallerIdentity, args: DeleteProjectArgs) -> ToolResult:
    if not await project_service.delete_project(db, args.project_id, args.confirm):
        return ToolResult.noop("Deletion not confirmed. Set confirm to true to delete.")
    return _ok(None, "Project deleted permanently.")


TOOLS: dict[str, ToolSpec] = {
    tool.name: tool
    for tool in (
        ToolSpec("create_project", "Create a new web app project", CreateProjectArgs, _create_project),
        ToolSpec("list_projects", "List all projects", NoArgs, _list_projects),
        ToolSpec("get_project", "Get project details including its file list", ProjectArgs, _get_project),
        ToolSpec("read_files", "Read file contents from a project", ReadFilesArgs, _read_files),
        ToolSpec(
            "write_files",
            "Create or update files in a project. This saves to the current draft version.",
            WriteFilesArgs,
            _write_files,
        ),
        ToolSpec("delete_files", "Remove files from a project's draft version", DeleteFilesArgs, _delete_files),
        ToolSpec(
            "publish",
            "Publish the current draft. Makes it live at /app/:slug and creates a new draft "
            "with the same files for future edits.",
            PublishArgs,
            _publish,
        ),
        ToolSpec("get_preview_url", "Get the preview URL for a project's current draft", ProjectArgs, _get_preview_url),
        ToolSpec(
            "list_versions",
            "List all versions for a project, newest first. Shows which is active (live) "
            "and which is the current draft.",
            ProjectArgs,
            _list_versions,
        ),
        ToolSpec(
            "rollback",
            "Copy files from a previous version into the current draft. This replaces all files in the draft.",
            RollbackArgs,
            _rollback,
        ),
        ToolSpec(
            "update_settings",
            "Update project settings like name, slug, description, visibility, or source code toggle.",
            UpdateSettingsArgs,
            _update_settings,
        ),
        ToolSpec(
            "delete_project",
            "Permanently delete a project and all its versions and files. This cannot be undone.",
            DeleteProjectArgs,
            _delete_project,
        ),
    )
}


def _format_validation_error(exc: PydanticValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in err['loc']) or 'arguments'}: {err['msg']}"
        for err in exc.errors()
    )


async def dispatch(
    db: AsyncSession,
    caller: CallerIdentity,
    name: str,
    arguments: dict[str, Any] | None = None,
) -> ToolResult:
    tool = TOOLS.get(name)
    if tool is None:
        return ToolResult.failure("validation", f"Unknown operation: {name}")

    try:
        args = tool.args_model.model_validate(arguments or {})
    except PydanticValidationError as e:
        return ToolResult.failure("validation", _format_validation_error(e))

    logger.debug("Dispatching %s for %s", name, caller.user_id)
    try:
        return await tool.handler(db, caller, args)
    except DraftpressError as e:
        logger.warning("%s failed (%s): %s", name, e.kind, e.message)
        return ToolResult.failure(e.kind, e.message)
