import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_db
from draftpress.schemas.project_file import FileContent, FilesDeleted, FileWrite, FileWriteResult
from draftpress.services import file_service

router = APIRouter(prefix="/api/v1/projects/{project_id}/files", tags=["files"])


@router.get("", response_model=list[FileContent])
async def read_files(
    project_id: uuid.UUID,
    path: list[str] | None = Query(default=None),
    db: AsyncSession = Depends(get_db),
):
    return await file_service.read_files(db, project_id, path)


@router.put("", response_model=list[FileWriteResult])
async def write_files(project_id: uuid.UUID, files: list[FileWrite], db: AsyncSession = Depends(get_db)):
    return await file_service.write_files(db, project_id, files)


@router.delete("", response_model=FilesDeleted)
async def delete_files(
    project_id: uuid.UUID,
    path: list[str] = Query(),
    db: AsyncSession = Depends(get_db),
):
    return FilesDeleted(deleted=await file_service.delete_files(db, project_id, path))
