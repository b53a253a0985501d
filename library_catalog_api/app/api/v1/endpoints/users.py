"""
User endpoints for API v1.

Provide registration, login and the current user's profile.  Tokens
are stateless; logging out means discarding the token client‑side.
"""

from fastapi import APIRouter, Depends, HTTPException, status

from library_catalog_api.app.api.deps import get_settings, get_user_service
from library_catalog_api.app.core.config import Settings
from library_catalog_api.app.core.security import create_access_token, get_current_user_id
from library_catalog_api.app.schemas.user import Token, UserCreate, UserLogin, UserRead
from library_catalog_api.app.services.user_service import UserService


router = APIRouter()


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
async def register_user(
    user: UserCreate,
    service: UserService = Depends(get_user_service),
) -> UserRead:
    """Register a new user.

    Answers 409 if the e‑mail address is already registered.
    """
    return await service.register_user(user)


@router.post("/login", response_model=Token)
async def login_user(
    credentials: UserLogin,
    service: UserService = Depends(get_user_service),
    app_settings: Settings = Depends(get_settings),
) -> Token:
    """Authenticate a user and return a bearer token."""
    db_user = await service.authenticate(credentials.email, credentials.password)
    if not db_user:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")
    token = create_access_token(
        {"sub": db_user.email},
        expires_delta=app_settings.access_token_expire_minutes * 60,
        secret_key=app_settings.secret_key,
    )
    return Token(access_token=token)


@router.get("/me", response_model=UserRead)
async def read_current_user(
    user_id: int = Depends(get_current_user_id),
    service: UserService = Depends(get_user_service),
) -> UserRead:
    return await service.get_user(user_id)
