"""Authentication routes."""
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from stockflow.auth import create_access_token, get_current_user, get_settings
from stockflow.database import get_db
from stockflow.models.user import User
from stockflow.schemas.user import SignInRequest, SignUpRequest, Token, UserResponse
from stockflow.services import users as user_service

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def sign_up(
    user_data: SignUpRequest,
    db: Session = Depends(get_db)
):
    """Register a new account. An admin must activate it before sign-in."""
    return user_service.sign_up(db, user_data)


@router.post("/signin", response_model=Token)
async def sign_in(
    credentials: SignInRequest,
    request: Request,
    response: Response,
    db: Session = Depends(get_db)
):
    """Sign in and receive an access token (also set as an HTTP-only cookie)."""
    settings = get_settings(request)
    user = user_service.authenticate(db, credentials.email, credentials.password)
    access_token = create_access_token(user, settings)

    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=access_token,
        httponly=True,
        samesite="lax",
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    )
    return Token(
        access_token=access_token,
        token_type="bearer",
        user=UserResponse.model_validate(user),
    )


@router.post("/signout")
async def sign_out(request: Request, response: Response):
    """Clear the auth cookie."""
    response.delete_cookie(get_settings(request).AUTH_COOKIE_NAME)
    return {"message": "Signed out"}


@router.get("/me", response_model=UserResponse)
async def get_me(current_user: User = Depends(get_current_user)):
    """Get the signed-in user."""
    return current_user
