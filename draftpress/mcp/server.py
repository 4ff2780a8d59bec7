"""FastMCP server exposing the draftpress tools to MCP clients.

Run via::

    draftpress-mcp                       # reads .env (default: stdio)
    MCP_TRANSPORT=http draftpress-mcp    # streamable HTTP on port 9000

Every tool opens its own database session and goes through the tool
dispatcher; failures are raised as ``ToolError`` so clients see them as
tool errors rather than as successful text.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from draftpress.config import Settings
from draftpress.db.engine import build_engine, build_session_factory
from draftpress.schemas.project import CallerIdentity
from draftpress.schemas.project_file import FileWrite
from draftpress.tools.dispatcher import TOOLS, dispatch

logger = logging.getLogger("draftpress.mcp")

mcp = FastMCP("draftpress")

# Set by main() (or by tests) before any tool runs.
_session_factory: async_sessionmaker[AsyncSession] | None = None
_caller: CallerIdentity | None = None


def configure(session_factory: async_sessionmaker[AsyncSession], caller: CallerIdentity) -> None:
    global _session_factory, _caller  # noqa: PLW0603
    _session_factory = session_factory
    _caller = caller


async def _call(name: str, arguments: dict[str, Any]) -> str:
    if _session_factory is None or _caller is None:
        raise ToolError("Server not initialised")

    async with _session_factory() as db:
        result = await dispatch(db, _caller, name, arguments)

    if result.status == "error":
        raise ToolError(result.message)
    if result.status == "noop":
        return result.message
    return json.dumps({"message": result.message, "data": result.data}, indent=2)


def _present(**kwargs: Any) -> dict[str, Any]:
    """Drop arguments the client left out so they stay unset downstream."""
    return {k: v for k, v in kwargs.items() if v is not None}


@mcp.tool(description=TOOLS["create_project"].description)
async def create_project(name: str, slug: str, description: str | None = None) -> str:
    return await _call("create_project", _present(name=name, slug=slug, description=description))


@mcp.tool(description=TOOLS["list_projects"].description)
async def list_projects() -> str:
    return await _call("list_projects", {})


@mcp.tool(description=TOOLS["get_project"].description)
async def get_project(project_id: str) -> str:
    return await _call("get_project", {"project_id": project_id})


@mcp.tool(description=TOOLS["read_files"].description)
async def read_files(project_id: str, file_paths: list[str] | None = None) -> str:
    return await _call("read_files", _present(project_id=project_id, file_paths=file_paths))


@mcp.tool(description=TOOLS["write_files"].description)
async def write_files(project_id: str, files: list[FileWrite]) -> str:
    return await _call(
        "write_files",
        {"project_id": project_id, "files": [f.model_dump(exclude_none=True) for f in files]},
    )


@mcp.tool(description=TOOLS["delete_files"].description)
async def delete_files(project_id: str, file_paths: list[str]) -> str:
    return await _call("delete_files", {"project_id": project_id, "file_paths": file_paths})


@mcp.tool(description=TOOLS["publish"].description)
async def publish(project_id: str, message: str | None = None) -> str:
    return await _call("publish", _present(project_id=project_id, message=message))


@mcp.tool(description=TOOLS["get_preview_url"].description)
async def get_preview_url(project_id: str) -> str:
    return await _call("get_preview_url", {"project_id": project_id})


@mcp.tool(description=TOOLS["list_versions"].description)
async def list_versions(project_id: str) -> str:
    return await _call("list_versions", {"project_id": project_id})


@mcp.tool(description=TOOLS["rollback"].description)
async def rollback(project_id: str, version_id: str) -> str:
    return await _call("rollback", {"project_id": project_id, "version_id": version_id})


@mcp.tool(description=TOOLS["update_settings"].description)
async def update_settings(
    project_id: str,
    name: str | None = None,
    slug: str | None = None,
    description: str | None = None,
    is_public: bool | None = None,
    show_source: bool | None = None,
) -> str:
    return await _call(
        "update_settings",
        _present(
            project_id=project_id,
            name=name,
            slug=slug,
            description=description,
            is_public=is_public,
            show_source=show_source,
        ),
    )


@mcp.tool(description=TOOLS["delete_project"].description)
async def delete_project(project_id: str, confirm: bool) -> str:
    return await _call("delete_project", {"project_id": project_id, "confirm": confirm})


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main() -> None:
    """Run the MCP server using settings from environment / .env file."""
    settings = Settings()

    logging.basicConfig(level=settings.log_level.upper())
    logger.info("draftpress MCP server starting (transport=%s)", settings.mcp_transport)

    configure(
        build_session_factory(build_engine(settings)),
        CallerIdentity(user_id=settings.mcp_owner_id),
    )

    if settings.mcp_transport == "stdio":
        mcp.run(transport="stdio")
    else:
        mcp.run(
            transport=settings.mcp_transport,
            host=settings.mcp_host,
            port=settings.mcp_port,
            log_level=settings.log_level.lower(),
        )


if __name__ == "__main__":
    main()
