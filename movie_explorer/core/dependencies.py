# movie_explorer/core/dependencies.py

import logging
from typing import Optional
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from movie_explorer.core.auth import verify_token
from movie_explorer.core.config import Settings

logger = logging.getLogger(__name__)

security = HTTPBearer(auto_error=False)


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def require_token(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """Subject of a valid bearer token"""
    if not credentials:
        logger.warning("Access token missing")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access token required",
            headers={"WWW-Authenticate": "Bearer"},
        )

    subject = verify_token(credentials.credentials, settings)
    if not subject:
        logger.warning("Invalid token provided")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid token"
        )

    return subject
