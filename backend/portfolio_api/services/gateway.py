"""
Portfolio Backend: Persistence Gateway
========================================

What:  The only component that talks to the relational store.
Why:   Routes and services depend on this one object for reviews and
       projects, so tests can swap it for a spy and the engine lifecycle
       stays in one place.
How:   Holds the shared AsyncEngine. Each call opens a short-lived session,
       issues exactly one statement with bound parameters, and closes it.
       No transaction spans two calls.

Error Handling:
    Every SQLAlchemy error, OS-level connection error and query timeout is
    wrapped in StorageError. A failure never yields a partial list: rows are
    mapped only after the full result has been fetched.
"""

import asyncio
import logging
from typing import Awaitable, Callable, List, TypeVar

from sqlalchemy import insert, select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from portfolio_api.database import build_session_factory
from portfolio_api.exceptions import StorageError
from portfolio_api.models.project import Project
from portfolio_api.models.review import Review
from portfolio_api.schemas.project import ProjectOut
from portfolio_api.schemas.review import ReviewOut, ReviewSubmission

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Substring identifying a source-code host in a project URL
SOURCE_HOST = "github.com"

SHOW_CODE = "Show Code"
SHOW_WEBSITE = "Show Website"


def action_label(url: str) -> str:
    """
    Derive the button label for a project card from its URL.

    Pure function of the URL string; evaluated per row.

    >>> action_label("https://github.com/me/thing")
    'Show Code'
    >>> action_label("https://thing.example.com")
    'Show Website'
    """
    return SHOW_CODE if SOURCE_HOST in url else SHOW_WEBSITE


class PersistenceGateway:
    """
    Read/insert access to the `reviews` and `projects` tables.

    Args:
        engine: Shared async engine (connection pool), owned by this gateway
                once constructed; dispose() releases it.
        query_timeout: Seconds any single operation may take.
    """

    def __init__(self, engine: AsyncEngine, query_timeout: float = 5.0):
        self.engine = engine
        self.query_timeout = query_timeout
        self._session_factory = build_session_factory(engine)

    async def _run(
        self,
        operation: str,
        work: Callable[[AsyncSession], Awaitable[T]],
    ) -> T:
        """Run one unit of work in its own session, bounded by query_timeout."""

        async def _in_session() -> T:
            async with self._session_factory() as session:
                return await work(session)

        # The timeout covers acquiring a pooled connection as well as the query
        try:
            return await asyncio.wait_for(_in_session(), timeout=self.query_timeout)
        except asyncio.TimeoutError:
            logger.error("%s timed out after %.1fs", operation, self.query_timeout)
            raise StorageError(context={"operation": operation, "reason": "timeout"})
        except (SQLAlchemyError, OSError) as e:
            logger.error("%s failed: %s", operation, str(e))
            raise StorageError(
                context={"operation": operation, "error_type": type(e).__name__},
            ) from e

    async def list_reviews(self) -> List[ReviewOut]:
        """
        All reviews in insertion order.

        Returns an empty list for an empty table, never None.
        """

        async def work(session: AsyncSession) -> List[ReviewOut]:
            result = await session.execute(select(Review).order_by(Review.id))
            rows = result.scalars().all()
            return [ReviewOut.model_validate(row) for row in rows]

        reviews = await self._run("list_reviews", work)
        logger.debug("Fetched %d reviews", len(reviews))
        return reviews

    async def insert_review(self, submission: ReviewSubmission) -> None:
        """
        Insert one review. The store assigns the id; it is not returned.

        Single statement inside its own transaction: the row is either fully
        written or not written at all.
        """

        async def work(session: AsyncSession) -> None:
            async with session.begin():
                await session.execute(
                    insert(Review).values(
                        company=submission.company,
                        name=submission.name,
                        review=submission.review,
                    )
                )

        await self._run("insert_review", work)
        logger.info("Review stored for company=%s", submission.company)

    async def list_projects(self) -> List[ProjectOut]:
        """All projects, each with its derived action label."""

        async def work(session: AsyncSession) -> List[ProjectOut]:
            result = await session.execute(select(Project).order_by(Project.id))
            rows = result.scalars().all()
            return [
                ProjectOut(
                    id=row.id,
                    title=row.title,
                    description=row.description,
                    url=row.url,
                    action_label=action_label(row.url),
                )
                for row in rows
            ]

        return await self._run("list_projects", work)

    async def ping(self) -> None:
        """SELECT 1 against the store. Raises StorageError when unreachable."""

        async def work(session: AsyncSession) -> None:
            await session.execute(text("SELECT 1"))

        await self._run("ping", work)

    async def dispose(self) -> None:
        """Close all pooled connections (application shutdown)."""
        await self.engine.dispose()
