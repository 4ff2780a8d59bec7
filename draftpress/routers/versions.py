import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_db
from draftpress.schemas.project_version import DraftRestored, ProjectVersionListItem, RollbackResult
from draftpress.services import version_service

router = APIRouter(prefix="/api/v1/projects/{project_id}/versions", tags=["versions"])


@router.get("", response_model=list[ProjectVersionListItem])
async def list_versions(project_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await version_service.list_versions(db, project_id)


@router.post("/draft", response_model=DraftRestored, status_code=201)
async def restore_draft(project_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await version_service.restore_draft(db, project_id)


@router.post("/{version_id}/rollback", response_model=RollbackResult)
async def rollback_version(
    project_id: uuid.UUID, version_id: uuid.UUID, db: AsyncSession = Depends(get_db)
):
    return await version_service.rollback_to_version(db, project_id, version_id)
