"""Authentication router for handling user authentication endpoints."""
from fastapi import APIRouter, Depends, HTTPException, status, Response, Body
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from ..config import ACCESS_TOKEN_EXPIRE_MINUTES, SESSION_COOKIE_NAME
from ..database import get_db
from .models import User, Token, UserCreate, UserResponse, ChangePassword
from .service import AuthService, get_current_active_user

router = APIRouter(prefix="/auth", tags=["Authentication"])


def get_auth_service(db: Session = Depends(get_db)) -> AuthService:
    """Dependency to get an instance of AuthService."""
    return AuthService(db)


def _set_session_cookie(response: Response, access_token: str) -> None:
    response.set_cookie(
        SESSION_COOKIE_NAME,
        access_token,
        httponly=True,
        max_age=ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        samesite="lax",
    )


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register_user(
    user_data: UserCreate,
    service: AuthService = Depends(get_auth_service)
):
    """Register a new user."""
    return service.register_user(user_data)


@router.post("/login", response_model=Token)
async def login_for_access_token(
    response: Response,
    form_data: OAuth2PasswordRequestForm = Depends(),
    service: AuthService = Depends(get_auth_service)
):
    """OAuth2 compatible token login; also sets the session cookie."""
    user = service.authenticate_user(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = service.create_access_token_for(user)
    refresh_token = service.create_refresh_token(user_id=user.id)
    _set_session_cookie(response, access_token)

    return Token(access_token=access_token, refresh_token=refresh_token.token)


@router.post("/refresh", response_model=Token)
async def refresh_access_token(
    response: Response,
    refresh_token: str = Body(embed=True),
    service: AuthService = Depends(get_auth_service)
):
    """Refresh an access token using a refresh token."""
    token = service.refresh_tokens(refresh_token)
    _set_session_cookie(response, token.access_token)
    return token


@router.post("/logout")
async def logout(
    response: Response,
    refresh_token: str = Body(embed=True),
    service: AuthService = Depends(get_auth_service)
):
    """Revoke a refresh token and clear the session cookie."""
    service.revoke_refresh_token(refresh_token)
    response.delete_cookie(SESSION_COOKIE_NAME)
    return {"message": "Successfully logged out"}


@router.post("/change-password", status_code=status.HTTP_204_NO_CONTENT)
async def change_password(
    password_data: ChangePassword,
    current_user: User = Depends(get_current_active_user),
    service: AuthService = Depends(get_auth_service)
):
    """Change the current user's password."""
    if not current_user.verify_password(password_data.current_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    current_user.set_password(password_data.new_password)
    service.db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    """Get the current user's profile."""
    return current_user
