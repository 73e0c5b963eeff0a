# movie_explorer/schemas/genre.py

from typing import List
from pydantic import BaseModel, Field

class Genre(BaseModel):
    id: int = Field(description="Genre ID")
    name: str = Field(description="Genre name")
    
    class Config:
        from_attributes = True

class GenreListResponse(BaseModel):
    genres: List[Genre] = Field(description="Genres")
