# movie_explorer/schemas/__init__.py

from .movie import Movie, MovieRow, MovieListResponse, MovieQuery, SORT_FIELDS
from .genre import Genre, GenreListResponse
from .auth import LoginRequest, TokenResponse
from .ingestion import IngestionReport

__all__ = [
    "Movie",
    "MovieRow",
    "MovieListResponse",
    "MovieQuery",
    "SORT_FIELDS",
    "Genre",
    "GenreListResponse",
    "LoginRequest",
    "TokenResponse",
    "IngestionReport",
]
