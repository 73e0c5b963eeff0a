# movie_explorer/models/movie_genre.py

from sqlalchemy import Column, Integer, ForeignKey
from movie_explorer.database import Base

class MovieGenreModel(Base):
    __tablename__ = "movie_genres"
    
    movie_id = Column(Integer, ForeignKey('movies.id'), primary_key=True)
    genre_id = Column(Integer, ForeignKey('genres.id'), primary_key=True)
    
    def __repr__(self):
        return f"<MovieGenreModel(movie_id={self.movie_id}, genre_id={self.genre_id})>"
