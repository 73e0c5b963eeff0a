# movie_explorer/models/actor.py

from sqlalchemy import Column, Integer, String, Float
from movie_explorer.database import Base

class ActorModel(Base):
    __tablename__ = "actors"
    
    id = Column(Integer, primary_key=True, autoincrement=False)
    name = Column(String(255), nullable=False)
    gender = Column(Integer, nullable=True)
    popularity = Column(Float, nullable=True)
    profile_path = Column(String(255), nullable=True)
    
    def __repr__(self):
        return f"<ActorModel(id={self.id}, name='{self.name}')>"
