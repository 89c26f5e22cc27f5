"""Auth router - signup, login, logout and the session dependency."""
from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from finroute.config import settings
from finroute.database import get_database
from finroute.models.user import LoginRequest, SessionResponse, UserCreate, UserProfile
from finroute.services.auth_service import AuthService
from finroute.utils.auth import (
    clear_session_cookie,
    issue_session_token,
    set_session_cookie,
    verify_session_token,
)


router = APIRouter(prefix="/auth", tags=["auth"])


def get_optional_user_id(request: Request) -> str | None:
    """User ID from the session cookie, or None."""
    session = verify_session_token(request.cookies.get(settings.session_cookie_name))
    return session.uid if session else None


async def get_current_user_id(
    user_id: str | None = Depends(get_optional_user_id),
) -> str:
    """
    Dependency to get current user ID from the session cookie.

    Raises:
        HTTPException: 303 redirect to the entry page when there is no
            valid session
    """
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_303_SEE_OTHER,
            detail="Not authenticated",
            headers={"Location": "/"},
        )
    return user_id


@router.post("/register", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, response: Response, db=Depends(get_database)):
    """
    Register a new user and start a session.

    Raises:
        HTTPException: If email is already registered (400)
    """
    service = AuthService(db)

    try:
        created_user = await service.register_user(
            email=user.email,
            password=user.password,
            age=user.age,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )

    set_session_cookie(response, issue_session_token(created_user.id))
    return created_user


@router.post("/login", response_model=SessionResponse)
async def login(login_req: LoginRequest, response: Response, db=Depends(get_database)):
    """
    Check credentials and start a session.

    Raises:
        HTTPException: If credentials are invalid (401)
    """
    service = AuthService(db)

    try:
        user_id = await service.login(
            email=login_req.email,
            password=login_req.password,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
        )

    set_session_cookie(response, issue_session_token(user_id))
    return SessionResponse(uid=user_id)


@router.post("/logout", response_model=SessionResponse)
async def logout(response: Response):
    """Clear the session cookie."""
    clear_session_cookie(response)
    return SessionResponse(uid=None)


@router.get("/whoami", response_model=SessionResponse)
async def whoami(user_id: str | None = Depends(get_optional_user_id)):
    """Current session's user ID, or null. Never fails."""
    return SessionResponse(uid=user_id)


@router.get("/me", response_model=UserProfile)
async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    db=Depends(get_database),
):
    """
    Get current authenticated user's profile.

    Raises:
        HTTPException: If user not found (404)
    """
    service = AuthService(db)

    try:
        return await service.get_user_by_id(user_id)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
