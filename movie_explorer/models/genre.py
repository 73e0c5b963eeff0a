# movie_explorer/models/genre.py

from sqlalchemy import Column, Integer, String
from movie_explorer.database import Base


class GenreModel(Base):
    __tablename__ = "genres"

    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(100), nullable=False)

    def __repr__(self):
        return f"<GenreModel(id={self.id}, name='{self.name}')>"
