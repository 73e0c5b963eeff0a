# movie_explorer/services/movie_service.py

import json
import math
from typing import List
from sqlalchemy import Select, distinct, extract, func, or_, select
from sqlalchemy.ext.compiler import compiles
from sqlalchemy.orm import Session, aliased
from sqlalchemy.sql.functions import FunctionElement
from movie_explorer.models import (
    ActorModel,
    GenreModel,
    MovieActorModel,
    MovieGenreModel,
    MovieModel,
)
from movie_explorer.schemas import MovieListResponse, MovieQuery, MovieRow, SORT_FIELDS

# only these identifiers are ever placed in ORDER BY
SORT_COLUMNS = {name: getattr(MovieModel, name) for name in SORT_FIELDS}

MOVIE_COLUMNS = [
    MovieModel.id,
    MovieModel.title,
    MovieModel.original_title,
    MovieModel.overview,
    MovieModel.release_date,
    MovieModel.popularity,
    MovieModel.vote_average,
    MovieModel.vote_count,
    MovieModel.revenue,
    MovieModel.runtime,
]


class name_array(FunctionElement):
    """Distinct values of a column collected into an array per group."""

    name = "name_array"
    inherit_cache = True


@compiles(name_array)
def _compile_name_array(element, compiler, **kw):
    return "array_agg(DISTINCT %s)" % compiler.process(element.clauses, **kw)


@compiles(name_array, "sqlite")
def _compile_name_array_sqlite(element, compiler, **kw):
    return "json_group_array(DISTINCT %s)" % compiler.process(element.clauses, **kw)


def _as_name_list(value) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = json.loads(value)
    return [name for name in value if name is not None]


def _like_pattern(term: str) -> str:
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


class MovieService:

    def __init__(self, db: Session):
        self.db = db

    def _joined(self, stmt: Select) -> Select:
        return (
            stmt.select_from(MovieModel)
            .outerjoin(MovieGenreModel, MovieModel.id == MovieGenreModel.movie_id)
            .outerjoin(GenreModel, MovieGenreModel.genre_id == GenreModel.id)
            .outerjoin(MovieActorModel, MovieModel.id == MovieActorModel.movie_id)
            .outerjoin(ActorModel, MovieActorModel.cast_id == ActorModel.id)
        )

    def _filters(self, query: MovieQuery) -> list:
        conditions = []

        if query.year is not None:
            conditions.append(extract("year", MovieModel.release_date) == query.year)

        if query.genres:
            # matches when any joined genre row is one of the requested ids
            conditions.append(GenreModel.id.in_(query.genres))

        if query.without_genres:
            # aliased so the subquery does not correlate with the outer join
            excluded_link = aliased(MovieGenreModel, name="excluded_genres")
            excluded = select(excluded_link.movie_id).where(
                excluded_link.genre_id.in_(query.without_genres)
            )
            conditions.append(MovieModel.id.not_in(excluded))

        if query.search:
            pattern = _like_pattern(query.search)
            conditions.append(
                or_(
                    MovieModel.title.ilike(pattern, escape="\\"),
                    ActorModel.name.ilike(pattern, escape="\\"),
                )
            )

        return conditions

    def build_search_statement(self, query: MovieQuery) -> Select:
        sort_column = SORT_COLUMNS[query.sort_by]
        order = sort_column.asc() if query.sort_order == "asc" else sort_column.desc()

        stmt = select(
            *MOVIE_COLUMNS,
            name_array(GenreModel.name).label("genre_names"),
            name_array(ActorModel.name).label("cast_names"),
        )
        return (
            self._joined(stmt)
            .where(*self._filters(query))
            .group_by(MovieModel.id)
            .order_by(order)
            .limit(query.per_page)
            .offset(query.offset)
        )

    def build_count_statement(self, query: MovieQuery) -> Select:
        stmt = select(func.count(distinct(MovieModel.id)))
        return self._joined(stmt).where(*self._filters(query))

    def search_movies(self, query: MovieQuery) -> MovieListResponse:
        """Run the filtered page query and its matching count query."""
        rows = self.db.execute(self.build_search_statement(query)).mappings().all()
        total = self.db.execute(self.build_count_statement(query)).scalar_one()

        results = []
        for row in rows:
            data = dict(row)
            data["genre_names"] = _as_name_list(data["genre_names"])
            data["cast_names"] = _as_name_list(data["cast_names"])
            results.append(MovieRow(**data))

        return MovieListResponse(
            results=results,
            page=query.page,
            total_pages=math.ceil(total / query.per_page),
            total_results=total,
        )
