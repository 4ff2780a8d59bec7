"""Domain errors shared by the services, the tool dispatcher and the HTTP layer."""

from functools import wraps
from typing import Any, Callable

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession


class DraftpressError(Exception):
    """Base class for failures reported back to callers as structured results."""

    kind = "error"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DraftpressError):
    kind = "validation"
    status_code = 400


class NotFoundError(DraftpressError):
    kind = "not_found"
    status_code = 404


class ConflictError(DraftpressError):
    kind = "conflict"
    status_code = 409


class StateError(DraftpressError):
    """The operation is not valid for the project's current lifecycle state."""

    kind = "state"
    status_code = 409


class StoreError(DraftpressError):
    kind = "store"
    status_code = 503


def store_errors(func: Callable) -> Callable:
    """Translate SQLAlchemy failures raised by a service call into domain errors.

    The wrapped function takes the ``AsyncSession`` as its first argument; the
    session is rolled back before any domain error is raised, releasing row
    locks, so it stays usable.
    """
    @wraps(func)
    async def wrapper(db: AsyncSession, *args: Any, **kwargs: Any):
        try:
            return await func(db, *args, **kwargs)
        except DraftpressError:
            await db.rollback()
            raise
        except IntegrityError as e:
            await db.rollback()
            raise ConflictError(f"Conflicting data: {e.orig}") from e
        except SQLAlchemyError as e:
            await db.rollback()
            raise StoreError(f"Storage operation failed: {e}") from e
    return wrapper
