"""
Background Task Helpers

Background tasks cannot use the endpoint's session as it's closed after the
endpoint returns, so each helper opens its own. Each helper is also the
supervisor of its work: failures are logged here and never propagate back
into the request that scheduled them.
"""

import logging

from shortlink.db.session import async_session_maker
from shortlink.services.visit_logger import RequestContext, VisitRecorder

logger = logging.getLogger(__name__)


async def record_visit_background(link_id: int, context: RequestContext) -> bool:
    """
    Background task to record a visit.

    Args:
        link_id: The link that was visited
        context: Visitor metadata from the request

    Returns:
        True if the visit was stored, False if the failure was logged and swallowed
    """
    try:
        async with async_session_maker() as session:
            await VisitRecorder(session).record(link_id, context)
        return True
    except Exception as e:
        logger.error(
            f"Failed to record visit for link {link_id}: {str(e)}",
            exc_info=True
        )
        return False
