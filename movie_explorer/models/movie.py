# movie_explorer/models/movie.py

from sqlalchemy import Column, Integer, BigInteger, String, Text, Date, Float
from movie_explorer.database import Base


class MovieModel(Base):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, autoincrement=False)
    title = Column(String(255), nullable=False)
    original_title = Column(String(255), nullable=True)
    overview = Column(Text, nullable=True)
    release_date = Column(Date, nullable=True)
    popularity = Column(Float, nullable=True)
    vote_average = Column(Float, nullable=True)
    vote_count = Column(Integer, nullable=True)
    revenue = Column(BigInteger, nullable=True)
    runtime = Column(Integer, nullable=True)

    def __repr__(self):
        return f"<MovieModel(id={self.id}, title='{self.title}')>"
