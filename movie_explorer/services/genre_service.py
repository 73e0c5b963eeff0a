# movie_explorer/services/genre_service.py

from sqlalchemy import select
from sqlalchemy.orm import Session
from movie_explorer.models import GenreModel
from movie_explorer.schemas import Genre, GenreListResponse


class GenreService:

    def __init__(self, db: Session):
        self.db = db

    def list_genres(self) -> GenreListResponse:
        """All stored genres ordered by name"""
        stmt = select(GenreModel).order_by(GenreModel.name)
        genres = self.db.execute(stmt).scalars().all()
        return GenreListResponse(genres=[Genre.model_validate(genre) for genre in genres])
