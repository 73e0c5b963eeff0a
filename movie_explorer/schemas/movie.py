# movie_explorer/schemas/movie.py

import re
from datetime import date
from typing import List, Literal, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

SORT_FIELDS = ("popularity", "vote_average", "vote_count", "release_date", "revenue", "title")
MIN_YEAR = 1900
# largest integer a JSON number holds exactly; keeps OFFSET inside int64
MAX_PAGE = 2**53 - 1
# ids are stored in 32-bit integer columns
MAX_ID = 2**31 - 1

SortField = Literal["popularity", "vote_average", "vote_count", "release_date", "revenue", "title"]
SortOrder = Literal["asc", "desc"]

_ID_LIST_RE = re.compile(r"^\d+(,\d+)*$")


class Movie(BaseModel):
    id: int = Field(description="TMDB movie ID")
    title: str = Field(description="Title")
    original_title: Optional[str] = Field(default=None, description="Original title")
    overview: Optional[str] = Field(default=None, description="Overview")
    release_date: Optional[date] = Field(default=None, description="Release date")
    popularity: Optional[float] = Field(default=None, description="TMDB popularity")
    vote_average: Optional[float] = Field(default=None, description="Average vote")
    vote_count: Optional[int] = Field(default=None, description="Vote count")
    revenue: Optional[int] = Field(default=None, description="Revenue (USD)")
    runtime: Optional[int] = Field(default=None, description="Runtime (minutes)")

    class Config:
        from_attributes = True


class MovieRow(Movie):
    """Search result row with aggregated genre and cast names"""

    genre_names: List[str] = Field(default_factory=list, description="Genre names")
    cast_names: List[str] = Field(default_factory=list, description="Cast member names")


class MovieListResponse(BaseModel):
    results: List[MovieRow] = Field(description="Movies on this page")
    page: int = Field(description="Current page")
    total_pages: int = Field(description="Total number of pages")
    total_results: int = Field(description="Total number of matching movies")


class MovieQuery(BaseModel):
    """Validated filter, sort and pagination request for the movie search"""

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    page: int = Field(default=1, ge=1, le=MAX_PAGE)
    per_page: int = Field(default=20, ge=1, le=100, alias="perPage")
    year: Optional[int] = Field(default=None, ge=MIN_YEAR)
    genres: List[int] = Field(default_factory=list)
    without_genres: List[int] = Field(default_factory=list)
    sort_by: SortField = "popularity"
    sort_order: SortOrder = "desc"
    search: Optional[str] = Field(default=None, min_length=1, max_length=255)

    @field_validator("year")
    @classmethod
    def check_year(cls, value: Optional[int]) -> Optional[int]:
        if value is not None and value > date.today().year + 1:
            raise ValueError(f"year must be less than or equal to {date.today().year + 1}")
        return value

    @field_validator("genres", "without_genres", mode="before")
    @classmethod
    def split_ids(cls, value):
        """Accept "1,2,3" as well as a list of ids"""
        if value is None:
            return []
        if isinstance(value, str):
            if not _ID_LIST_RE.match(value):
                raise ValueError("must be a comma-separated list of numeric ids")
            value = [int(part) for part in value.split(",")]
        return value

    @field_validator("genres", "without_genres")
    @classmethod
    def check_ids(cls, value: List[int]) -> List[int]:
        if any(genre_id > MAX_ID for genre_id in value):
            raise ValueError(f"ids must be less than or equal to {MAX_ID}")
        return value

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.per_page
