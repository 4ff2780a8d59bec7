import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_db
from draftpress.schemas.project_version import PreviewUrl
from draftpress.services.file_service import get_served_file
from draftpress.services.publish_service import get_preview_url
from draftpress.utils.sandbox import SANDBOX_CSP

router = APIRouter(tags=["preview"])


@router.get("/api/v1/projects/{project_id}/preview-url", response_model=PreviewUrl)
async def preview_url(project_id: uuid.UUID, db: AsyncSession = Depends(get_db)):
    return await get_preview_url(db, project_id)


@router.get("/preview/{slug}")
@router.get("/preview/{slug}/{file_path:path}")
async def serve_preview(slug: str, file_path: str = "", db: AsyncSession = Depends(get_db)):
    file = await get_served_file(db, slug, file_path, live=False)
    headers = {"Content-Security-Policy": SANDBOX_CSP}
    return Response(content=file.content, media_type=file.content_type, headers=headers)
