"""
Request-scoped FastAPI dependencies.

Identity and visitor metadata are built per request and passed explicitly
into the services; nothing is kept between requests.
"""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.core.request_info import get_client_ip
from shortlink.core.setting import settings
from shortlink.db.models import User
from shortlink.db.session import get_session
from shortlink.services.auth_service import AuthService
from shortlink.services.visit_logger import RequestContext


async def get_current_user(
    request: Request,
    session: AsyncSession = Depends(get_session)
) -> Optional[User]:
    """The logged-in user for this request, or None."""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    return await AuthService(session).get_user_for_token(token)


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    """Like get_current_user, but answers 401 when nobody is logged in."""
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )
    return user


def get_request_context(request: Request) -> RequestContext:
    """Visitor metadata recorded with each redirect."""
    return RequestContext(
        visitor_ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
        referrer=request.headers.get("Referer"),
        country=request.headers.get(settings.COUNTRY_HEADER),
    )
