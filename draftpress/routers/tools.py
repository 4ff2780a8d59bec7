from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.dependencies import get_caller, get_db
from draftpress.schemas.project import CallerIdentity
from draftpress.schemas.tool import ToolResult
from draftpress.tools.definitions import TOOL_DEFINITIONS
from draftpress.tools.dispatcher import dispatch

router = APIRouter(prefix="/api/v1/tools", tags=["tools"])


@router.get("")
async def list_tools():
    return TOOL_DEFINITIONS


@router.post("/{name}", response_model=ToolResult)
async def call_tool(
    name: str,
    arguments: dict[str, Any] | None = Body(default=None),
    db: AsyncSession = Depends(get_db),
    caller: CallerIdentity = Depends(get_caller),
):
    return await dispatch(db, caller, name, arguments)
