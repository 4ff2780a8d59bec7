from collections.abc import AsyncGenerator

from fastapi import Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from draftpress.schemas.project import CallerIdentity


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    async with request.app.state.session_factory() as session:
        yield session


def get_caller(
    x_caller_id: str = Header(default="anonymous"),
    x_caller_email: str | None = Header(default=None),
    x_caller_name: str | None = Header(default=None),
) -> CallerIdentity:
    """Caller identity as forwarded by the platform in front of this service."""
    return CallerIdentity(user_id=x_caller_id, email=x_caller_email, name=x_caller_name)
