import uuid

from fastapi import APIRouter, Depends, HTTPException, Response
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_caller, get_db
from draftpress.schemas.project import (
    CallerIdentity,
    CreatedProject,
    ProjectCreate,
    ProjectDetail,
    ProjectSettings,
    ProjectSettingsUpdate,
    ProjectSummary,
)
from draftpress.services import project_service

router = APIRouter(prefix="/api/v1/projects", tags=["projects"])


@router.post("", response_model=CreatedProject, status_code=201)
async def create_project(
    data: ProjectCreate,
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    return await project_service.create_project(db, caller.user_id, data)


@router.get("", response_model=list[ProjectSummary])
async def list_projects(db: AsyncSession = Depends(get_db)):
    return await project_service.list_projects(db)


@router.get("/{project_id}", response_model=ProjectDetail)
async def get_project(project_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await project_service.get_project(db, project_id)


@router.patch("/{project_id}", response_model=ProjectSettings)
async def update_settings(project_id: uuid.UUID, data: ProjectSettingsUpdate, db: AsyncSession = Depends(get_db)):
    project = await project_service.update_settings(db, project_id, data)
    if project is None:
        raise HTTPException(status_code=400, detail="Nothing to update. Provide at least one setting to change.")
    return project


@router.delete("/{project_id}", status_code=204)
async def delete_project(project_id: uuid.UUID, confirm: bool = False, db: AsyncSession = Depends(get_db)):
    deleted = await project_service.delete_project(db, project_id, confirm)
    if not deleted:
        raise HTTPException(status_code=400, detail="Deletion not confirmed. Pass confirm=true to delete.")
    return Response(status_code=204)
