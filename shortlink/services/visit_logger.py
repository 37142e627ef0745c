"""
Visit Recording Service

Appends one VisitRecord per successful redirect. The user agent is
classified into coarse browser/OS/device labels at write time so that the
analytics queries are plain GROUP BYs.

This service is called from a background task after the redirect response
has been sent; it raises on storage errors and leaves swallowing them to
the background wrapper.
"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.exceptions import DatabaseError
from shortlink.db.models import VisitRecord, utcnow
from shortlink.services.user_agent import classify_user_agent

MAX_USER_AGENT_LENGTH = 500
MAX_REFERRER_LENGTH = 2048


@dataclass(frozen=True)
class RequestContext:
    """Per-request visitor metadata captured by the HTTP layer."""
    visitor_ip: Optional[str] = None
    user_agent: Optional[str] = None
    referrer: Optional[str] = None
    country: Optional[str] = None


def _clip(value: Optional[str], max_length: int) -> Optional[str]:
    if not value:
        return None
    return value[:max_length]


class VisitRecorder:
    """Service for logging link visits."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def record(self, link_id: int, context: RequestContext) -> VisitRecord:
        """
        Append a visit record for a link.

        Args:
            link_id: The link that was visited
            context: Visitor metadata from the request

        Returns:
            The committed VisitRecord

        Raises:
            DatabaseError: If the record could not be written
        """
        agent = classify_user_agent(context.user_agent)
        visit = VisitRecord(
            link_id=link_id,
            visitor_ip=context.visitor_ip,
            user_agent=_clip(context.user_agent, MAX_USER_AGENT_LENGTH),
            referrer=_clip(context.referrer, MAX_REFERRER_LENGTH),
            country=_clip(context.country, 64),
            browser=agent.browser,
            os=agent.os,
            device=agent.device,
            timestamp=utcnow(),
        )

        self.session.add(visit)
        try:
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            raise DatabaseError(f"Failed to record visit for link {link_id}", original_error=e)

        return visit
