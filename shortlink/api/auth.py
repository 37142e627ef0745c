"""
Account Endpoints

Registration, login, logout and the current-user lookup. Login sets an
HttpOnly cookie holding the session token.
"""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from shortlink.api.dependencies import require_user
from shortlink.api.schemas import LoginRequest, RegisterRequest, UserResponse
from shortlink.core.setting import settings
from shortlink.db.models import User
from shortlink.db.session import get_session
from shortlink.services.auth_service import AuthService

router = APIRouter(prefix="/api/auth")


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create an account"
)
async def register(
    body: RegisterRequest,
    session: AsyncSession = Depends(get_session)
) -> UserResponse:
    try:
        user = await AuthService(session).register(body.email, body.password, body.name)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    if user is None:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists"
        )
    return UserResponse.model_validate(user)


@router.post("/login", response_model=UserResponse, summary="Log in")
async def login(
    body: LoginRequest,
    response: Response,
    session: AsyncSession = Depends(get_session)
) -> UserResponse:
    auth = AuthService(session)
    user = await auth.authenticate(body.email, body.password)
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    auth_session = await auth.create_session(user)
    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=auth_session.token,
        httponly=True,
        max_age=settings.SESSION_TTL_DAYS * 24 * 60 * 60,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
    )
    return UserResponse.model_validate(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT, summary="Log out")
async def logout(
    request: Request,
    response: Response,
    session: AsyncSession = Depends(get_session)
) -> None:
    await AuthService(session).revoke_session(request.cookies.get(settings.SESSION_COOKIE_NAME))
    response.delete_cookie(settings.SESSION_COOKIE_NAME)


@router.get("/me", response_model=UserResponse, summary="Current user")
async def me(user: User = Depends(require_user)) -> UserResponse:
    return UserResponse.model_validate(user)
