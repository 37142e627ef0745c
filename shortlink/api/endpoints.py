"""
FastAPI Endpoints for the Short-Link Service

This module defines the link-management, analytics, dashboard and redirect
endpoints with minimal logic. Endpoints only handle:
- Request validation (Pydantic models)
- Authentication (owner id from the session cookie)
- Mapping service results to HTTP responses

All business logic is in services.

Design Principles:
- Thin endpoints: validation and status-code mapping only
- Typed failures from the registry map to fixed status codes
- The redirect route lives on its own router, registered last, because its
  path is a catch-all
"""

from typing import NoReturn, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query, Response, status
from fastapi.responses import RedirectResponse
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.api.dependencies import get_request_context, require_user
from shortlink.api.schemas import (
    AnalyticsResponse,
    CreateLinkRequest,
    DashboardResponse,
    LinkResponse,
    UpdateLinkRequest,
)
from shortlink.core.exceptions import ErrorKind, Failure
from shortlink.core.setting import settings
from shortlink.db.models import ShortLink, User
from shortlink.db.session import get_session
from shortlink.services.link_registry import LinkRegistry
from shortlink.services.redirect_service import RedirectService
from shortlink.services.stats_service import StatsService
from shortlink.services.visit_logger import RequestContext

router = APIRouter(prefix="/api")
redirect_router = APIRouter()

FAILURE_STATUS = {
    ErrorKind.INVALID_URL: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INVALID_CODE: status.HTTP_400_BAD_REQUEST,
    ErrorKind.CODE_TAKEN: status.HTTP_409_CONFLICT,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.TRANSIENT: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def raise_for_failure(failure: Failure) -> NoReturn:
    raise HTTPException(
        status_code=FAILURE_STATUS[failure.kind],
        detail={"error": failure.kind.value, "message": failure.message}
    )


def link_not_found(link_id: int) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"error": ErrorKind.NOT_FOUND.value, "message": f"Link {link_id} not found"}
    )


def to_link_response(link: ShortLink) -> LinkResponse:
    return LinkResponse(
        id=link.id,
        code=link.code,
        short_url=f"{settings.BASE_URL}/{link.code}",
        destination_url=link.destination_url,
        title=link.title,
        created_at=link.created_at,
        expires_at=link.expires_at,
    )


@router.post(
    "/links",
    response_model=LinkResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a short link",
    description="Shortens a URL, optionally under a custom code"
)
async def create_link(
    body: CreateLinkRequest,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> LinkResponse:
    """
    Create a new short link owned by the current user.

    Raises:
        HTTPException 400: Invalid destination URL or custom code
        HTTPException 409: Custom code already taken
        HTTPException 503: No free code found or storage unavailable
    """
    result = await LinkRegistry(session).create(
        body.url,
        owner_id=user.id,
        title=body.title,
        expires_at=body.expires_at,
        requested_code=body.custom_code or None,
    )
    if isinstance(result, Failure):
        raise_for_failure(result)
    return to_link_response(result)


@router.get("/links", response_model=list[LinkResponse], summary="List my links")
async def list_links(
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> list[LinkResponse]:
    links = await LinkRegistry(session).list_by_owner(user.id)
    return [to_link_response(link) for link in links]


@router.get("/links/{link_id}", response_model=LinkResponse, summary="Get one of my links")
async def get_link(
    link_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> LinkResponse:
    link = await LinkRegistry(session).get_owned(link_id, user.id)
    if link is None:
        raise link_not_found(link_id)
    return to_link_response(link)


@router.patch("/links/{link_id}", response_model=LinkResponse, summary="Update title or expiry")
async def update_link(
    link_id: int,
    body: UpdateLinkRequest,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> LinkResponse:
    registry = LinkRegistry(session)
    result = await registry.update(link_id, user.id, body.model_dump(exclude_unset=True))
    if isinstance(result, Failure):
        raise_for_failure(result)
    if not result:
        raise link_not_found(link_id)

    link = await registry.get_owned(link_id, user.id)
    if link is None:
        raise link_not_found(link_id)
    return to_link_response(link)


@router.delete(
    "/links/{link_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a link and its analytics"
)
async def delete_link(
    link_id: int,
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> Response:
    result = await LinkRegistry(session).delete(link_id, user.id)
    if isinstance(result, Failure):
        raise_for_failure(result)
    if not result:
        raise link_not_found(link_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get(
    "/links/{link_id}/analytics",
    response_model=AnalyticsResponse,
    summary="Click analytics for one link"
)
async def get_link_analytics(
    link_id: int,
    days: Optional[int] = Query(default=None, ge=1, le=365),
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> AnalyticsResponse:
    link = await LinkRegistry(session).get_owned(link_id, user.id)
    if link is None:
        raise link_not_found(link_id)

    report = await StatsService(session).get_link_analytics(link.id, days)
    return AnalyticsResponse(**report)


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard overview")
async def get_dashboard(
    days: Optional[int] = Query(default=None, ge=1, le=365),
    user: User = Depends(require_user),
    session: AsyncSession = Depends(get_session)
) -> DashboardResponse:
    summary = await StatsService(session).get_dashboard_summary(user.id, days)
    return DashboardResponse(
        total_links=summary["total_links"],
        total_visits=summary["total_visits"],
        visits_per_link=summary["visits_per_link"],
        recent_links=[to_link_response(link) for link in summary["recent_links"]],
        analytics=AnalyticsResponse(**summary["analytics"]),
    )


@redirect_router.get(
    "/{short_code}",
    status_code=status.HTTP_302_FOUND,
    summary="Redirect to destination URL",
    description="Takes a short code and redirects to its destination, or home if there is none"
)
async def redirect_to_url(
    short_code: str,
    background_tasks: BackgroundTasks,
    context: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(get_session)
) -> RedirectResponse:
    """
    Redirect a visitor.

    Never answers with an error: unknown, expired and malformed codes, and
    lookup failures, all redirect to HOME_URL. The visit is recorded by a
    background task after the response is sent.
    """
    target = await RedirectService(session).handle_request(
        short_code, context, background_tasks.add_task
    )
    return RedirectResponse(url=target.location, status_code=status.HTTP_302_FOUND)
