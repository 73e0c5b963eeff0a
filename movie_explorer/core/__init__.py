# movie_explorer/core/__init__.py

from .config import get_settings, Settings
from .auth import (
    authenticate,
    verify_password,
    get_password_hash,
    create_access_token,
    verify_token,
)
from .dependencies import require_token

__all__ = [
    "get_settings",
    "Settings",
    "authenticate",
    "verify_password",
    "get_password_hash",
    "create_access_token",
    "verify_token",
    "require_token",
]
