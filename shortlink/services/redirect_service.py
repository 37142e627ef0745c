"""
Redirect Service

This service handles the visitor-facing redirect path.

Design Decisions:
- Broken links degrade gracefully: unknown, expired or malformed codes and
  internal errors all redirect to the home page instead of an error page
- Visit recording is handed to a dispatcher (BackgroundTasks over HTTP) and
  never awaited here, so redirect latency is the lookup alone
- A failure to dispatch the recording is logged; the redirect still goes out
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.setting import settings
from shortlink.core.validators import sanitize_short_code
from shortlink.services.background_tasks import record_visit_background
from shortlink.services.link_registry import LinkRegistry
from shortlink.services.visit_logger import RequestContext

logger = logging.getLogger(__name__)

# Schedules ``func(*args)`` to run later without waiting for it
Dispatcher = Callable[..., Any]


@dataclass(frozen=True)
class RedirectTarget:
    """Where to send the visitor. link_id is None when falling back to home."""
    location: str
    link_id: Optional[int] = None

    @property
    def found(self) -> bool:
        return self.link_id is not None


class RedirectService:
    """
    Service for handling short-code redirects.
    """

    def __init__(self, session: AsyncSession, home_url: Optional[str] = None):
        """
        Args:
            session: Async database session for the lookup
            home_url: Fallback location (default from settings)
        """
        self.session = session
        self.registry = LinkRegistry(session)
        self.home_url = home_url or settings.HOME_URL

    async def handle_request(
        self,
        short_code: str,
        context: RequestContext,
        dispatch: Dispatcher,
    ) -> RedirectTarget:
        """
        Resolve a short code into a redirect target.

        Args:
            short_code: Code taken from the request path
            context: Visitor metadata for analytics
            dispatch: Scheduler for the visit recording task

        Returns:
            RedirectTarget to the destination URL, or to home on any miss
        """
        code = sanitize_short_code(short_code)
        if not code:
            logger.info(f"Rejected malformed short code: {short_code!r}")
            return self._home()

        try:
            link = await self.registry.resolve(code)
        except Exception as e:
            logger.error(f"Lookup failed for short code '{code}': {e}", exc_info=True)
            return self._home()

        if link is None:
            logger.info(f"Unknown short code: {code}")
            return self._home()

        if link.is_expired():
            logger.info(f"Expired short code: {code}")
            return self._home()

        try:
            dispatch(record_visit_background, link.id, context)
        except Exception as e:
            logger.error(f"Could not schedule visit recording for '{code}': {e}", exc_info=True)

        return RedirectTarget(location=link.destination_url, link_id=link.id)

    def _home(self) -> RedirectTarget:
        return RedirectTarget(location=self.home_url)
