import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_db
from draftpress.schemas.project_version import PublishRequest, PublishResult
from draftpress.services.file_service import get_served_file
from draftpress.services.publish_service import publish_project
from draftpress.utils.sandbox import SANDBOX_CSP

router = APIRouter(tags=["publish"])

@router.post("/api/v1/projects/{project_id}/publish", response_model=PublishResult)
async def publish(project_id: uuid.UUID, body: PublishRequest | None = None, db: AsyncSession = Depends(get_db)):
    return await publish_project(db, project_id, body.message if body else None)


@router.get("/app/{slug}")
@router.get("/app/{slug}/{file_path:path}")
async def serve_published(slug: str, file_path: str = "", db: AsyncSession = Depends(get_db)):
    file = await get_served_file(db, slug, file_path, live=True)
    headers = {"Content-Security-Policy": SANDBOX_CSP}
    return Response(content=file.content, media_type=file.content_type, headers=headers)
