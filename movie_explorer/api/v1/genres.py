# movie_explorer/api/v1/genres.py

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from movie_explorer.core.dependencies import require_token
from movie_explorer.database import get_db
from movie_explorer.schemas import GenreListResponse
from movie_explorer.services.genre_service import GenreService

router = APIRouter()


@router.get("", response_model=GenreListResponse, summary="Stored genres")
def list_genres(_: str = Depends(require_token), db: Session = Depends(get_db)):
    return GenreService(db).list_genres()
