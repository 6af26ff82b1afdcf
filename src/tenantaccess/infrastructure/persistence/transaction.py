"""Transaction scope for directory mutations.

Wraps one read-modify-write in a commit-or-rollback block and translates
storage failures into the directory error taxonomy. Whatever ends the block
early, including cancellation, rolls the session back so callers observe
either the state before the call or the fully applied change.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from tenantaccess.core.logging import get_logger
from tenantaccess.domain.exceptions import ConflictError, TransportError

logger = get_logger(__name__)


@asynccontextmanager
async def atomic(session: AsyncSession, operation: str) -> AsyncIterator[AsyncSession]:
    """Commit the session if the block completes, roll back otherwise.

    Args:
        session: Session the block works in.
        operation: Name used in logs and error messages.

    Raises:
        ConflictError: A unique or foreign key constraint rejected the write,
            or the row changed since it was read.
        TransportError: Any other storage failure. The outcome is unknown.
    """
    try:
        yield session
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        logger.info("Constraint rejected write", operation=operation, error=str(e.orig))
        raise ConflictError(
            f"{operation} conflicts with existing data", code="constraint_violation"
        ) from e
    except StaleDataError as e:
        await session.rollback()
        logger.info("Concurrent modification detected", operation=operation)
        raise ConflictError(
            f"{operation} lost a race with a concurrent change, retry",
            code="concurrent_modification",
        ) from e
    except SQLAlchemyError as e:
        await session.rollback()
        logger.error("Storage failure", operation=operation, error=str(e))
        raise TransportError(f"{operation} failed in storage: {e}") from e
    except BaseException:
        await session.rollback()
        raise
