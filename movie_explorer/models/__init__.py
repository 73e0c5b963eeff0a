# movie_explorer/models/__init__.py

from .movie import MovieModel
from .genre import GenreModel
from .actor import ActorModel
from .movie_genre import MovieGenreModel
from .movie_actor import MovieActorModel


__all__ = [
    "MovieModel",
    "GenreModel",
    "ActorModel",
    "MovieGenreModel",
    "MovieActorModel",
]
