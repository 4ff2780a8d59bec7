import uuid
from typing import Any, Literal

from pydantic import BaseModel, Field

from draftpress.schemas.project import ProjectCreate, ProjectSettingsUpdate
from draftpress.schemas.project_file import FileWrite


class ToolFailure(BaseModel):
    kind: str
    message: str


class ToolResult(BaseModel):
    """Uniform envelope returned for every tool call.

    ``noop`` marks calls that were understood but had nothing to do (no settings
    supplied, deletion not confirmed) so callers can tell them from real work.
    """

    status: Literal["ok", "noop", "error"]
    message: str = ""
    data: Any = None
    error: ToolFailure | None = None

    @classmethod
    def success(cls, data: Any = None, message: str = "") -> "ToolResult":
        return cls(status="ok", data=data, message=message)

    @classmethod
    def noop(cls, message: str) -> "ToolResult":
        return cls(status="noop", message=message)

    @classmethod
    def failure(cls, kind: str, message: str) -> "ToolResult":
        return cls(status="error", message=message, error=ToolFailure(kind=kind, message=message))


# -- per-operation arguments ---------------------------------------------------


class NoArgs(BaseModel):
    pass


class ProjectArgs(BaseModel):
    project_id: uuid.UUID = Field(description="The project ID")


class CreateProjectArgs(ProjectCreate):
    pass


class ReadFilesArgs(ProjectArgs):
    file_paths: list[str] | None = Field(
        default=None, description="Specific file paths to read. If omitted, reads all files."
    )


class WriteFilesArgs(ProjectArgs):
    files: list[FileWrite] = Field(description="The files to write")


class DeleteFilesArgs(ProjectArgs):
    file_paths: list[str] = Field(description="File paths to delete")


class PublishArgs(ProjectArgs):
    message: str | None = Field(default=None, description="A short note about what changed in this version")


class RollbackArgs(ProjectArgs):
    version_id: uuid.UUID = Field(description="The version ID to roll back to (get this from list_versions)")


class UpdateSettingsArgs(ProjectSettingsUpdate):
    project_id: uuid.UUID = Field(description="The project ID")


class DeleteProjectArgs(ProjectArgs):
    confirm: bool = Field(description="Must be true to confirm deletion")
