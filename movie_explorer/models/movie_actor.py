# movie_explorer/models/movie_actor.py

from sqlalchemy import Column, Integer, String, ForeignKey
from movie_explorer.database import Base


class MovieActorModel(Base):
    __tablename__ = "movie_actors"

    movie_id = Column(Integer, ForeignKey("movies.id"), primary_key=True)
    cast_id = Column(Integer, ForeignKey("actors.id"), primary_key=True)
    character_name = Column(String(255), nullable=True)
    order_num = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<MovieActorModel(movie_id={self.movie_id}, cast_id={self.cast_id})>"
