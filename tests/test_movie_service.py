from __future__ import annotations

import pytest
from pydantic import ValidationError
from sqlalchemy.dialects import postgresql

from movie_explorer.schemas import MovieQuery
from movie_explorer.services.movie_service import MovieService


@pytest.fixture
def service(seeded_database):
    db = seeded_database.session()
    yield MovieService(db)
    db.close()


def _ids(response) -> list[int]:
    return [movie.id for movie in response.results]


def test_default_query_sorts_by_popularity_desc(service: MovieService) -> None:
    response = service.search_movies(MovieQuery())

    assert _ids(response) == [4, 2, 3, 6, 1, 5]
    assert response.page == 1
    assert response.total_results == 6
    assert response.total_pages == 1


def test_rows_aggregate_distinct_genre_and_cast_names(service: MovieService) -> None:
    response = service.search_movies(MovieQuery())
    by_id = {movie.id: movie for movie in response.results}

    assert sorted(by_id[3].genre_names) == ["Action", "Comedy"]
    assert sorted(by_id[3].cast_names) == ["Bob Stone", "Mary Jones"]
    assert by_id[6].genre_names == []
    assert by_id[6].cast_names == []


def test_year_and_any_of_genres_sorted_by_title(service: MovieService) -> None:
    query = MovieQuery(year=2020, genres="1,2", sort_by="title", sort_order="asc")
    response = service.search_movies(query)

    assert _ids(response) == [2, 3, 1]
    assert response.total_results == 3


def test_total_results_ignores_per_page(service: MovieService) -> None:
    query = MovieQuery(year=2020, genres="1,2", sort_by="title", sort_order="asc", perPage=2)
    first = service.search_movies(query)
    second = service.search_movies(query.model_copy(update={"page": 2}))

    assert _ids(first) == [2, 3]
    assert _ids(second) == [1]
    assert first.total_results == second.total_results == 3
    assert first.total_pages == 2


def test_without_genres_excludes_any_movie_with_that_genre(service: MovieService) -> None:
    response = service.search_movies(MovieQuery(without_genres="3"))

    assert 2 not in _ids(response)
    assert 5 not in _ids(response)
    assert response.total_results == 4


def test_without_genres_wins_over_matching_genre(service: MovieService) -> None:
    # Alpha has Comedy (2) and Horror (3)
    response = service.search_movies(MovieQuery(genres="2", without_genres="3"))

    assert _ids(response) == [3]


def test_search_matches_title_or_cast_case_insensitively(service: MovieService) -> None:
    response = service.search_movies(MovieQuery(search="SMITH", sort_by="title", sort_order="asc"))

    # "Smith Returns" by title, Alpha and Gamma through John Smith
    assert _ids(response) == [2, 4, 1]
    assert response.total_results == 3


def test_search_treats_like_wildcards_literally(service: MovieService) -> None:
    response = service.search_movies(MovieQuery(search="%"))

    assert response.results == []
    assert response.total_results == 0
    assert response.total_pages == 0


def test_page_past_the_end_is_empty_with_stable_count(service: MovieService) -> None:
    response = service.search_movies(MovieQuery(page=5, perPage=2))

    assert response.results == []
    assert response.total_results == 6
    assert response.total_pages == 3


def test_user_values_are_bound_not_inlined(service: MovieService) -> None:
    query = MovieQuery(search="o'brien; drop table movies", genres="7", year=2001, sort_by="revenue", sort_order="asc")
    sql = str(service.build_search_statement(query).compile(dialect=postgresql.dialect()))

    assert "o'brien" not in sql
    assert "drop table" not in sql
    assert "2001" not in sql
    assert "array_agg(DISTINCT genres.name)" in sql
    assert "ORDER BY movies.revenue ASC" in sql


def test_count_statement_has_no_grouping_or_limit(service: MovieService) -> None:
    sql = str(service.build_count_statement(MovieQuery(genres="1")).compile(dialect=postgresql.dialect()))

    assert "count(DISTINCT movies.id)" in sql
    assert "GROUP BY" not in sql
    assert "LIMIT" not in sql


@pytest.mark.parametrize(
    "params",
    [
        {"perPage": 500},
        {"perPage": 0},
        {"page": 0},
        {"sort_by": "id"},
        {"sort_order": "sideways"},
        {"genres": "1,action"},
        {"without_genres": "1;2"},
        {"year": 99},
        {"search": "x" * 256},
        {"page": 2**53},
        {"genres": ""},
        {"without_genres": ""},
        {"genres": "1,99999999999"},
    ],
)
def test_query_rejects_out_of_range_values(params: dict) -> None:
    with pytest.raises(ValidationError):
        MovieQuery(**params)


def test_query_defaults() -> None:
    query = MovieQuery()

    assert query.page == 1
    assert query.per_page == 20
    assert query.sort_by == "popularity"
    assert query.sort_order == "desc"
    assert query.genres == []
    assert query.offset == 0
