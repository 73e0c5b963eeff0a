# movie_explorer/api/v1/auth.py

import logging
from fastapi import APIRouter, Depends, HTTPException, status
from movie_explorer.core.auth import authenticate, create_access_token
from movie_explorer.core.config import Settings
from movie_explorer.core.dependencies import get_app_settings
from movie_explorer.schemas import LoginRequest, TokenResponse

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/login",
    response_model=TokenResponse,
    summary="Login",
    description="Exchange the configured credentials for a JWT access token.",
)
def login(login_data: LoginRequest, settings: Settings = Depends(get_app_settings)):
    if not authenticate(login_data.username, login_data.password, settings):
        logger.warning("Failed login attempt for username: %s", login_data.username)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    logger.info("User %s logged in", login_data.username)
    access_token = create_access_token(data={"sub": login_data.username}, settings=settings)
    return TokenResponse(access_token=access_token)
