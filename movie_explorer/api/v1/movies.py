# movie_explorer/api/v1/movies.py

import logging
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session
from movie_explorer.api.errors import validation_message
from movie_explorer.core.dependencies import require_token
from movie_explorer.database import get_db
from movie_explorer.schemas import IngestionReport, MovieListResponse, MovieQuery
from movie_explorer.services.movie_service import MovieService

logger = logging.getLogger(__name__)

router = APIRouter()

SEARCH_PARAMS = frozenset(
    ("page", "perPage", "year", "genres", "without_genres", "sort_by", "sort_order", "search")
)


@router.get(
    "",
    response_model=MovieListResponse,
    summary="Search movies",
    description="Filtered, sorted and paginated list of stored movies.",
)
def list_movies(
    request: Request,
    page: int = Query(default=1, description="Page number (>= 1)"),
    per_page: int = Query(default=20, alias="perPage", description="Results per page (1-100)"),
    year: Optional[int] = Query(default=None, description="Release year"),
    genres: Optional[str] = Query(default=None, description="Comma-separated genre ids, any must match"),
    without_genres: Optional[str] = Query(default=None, description="Comma-separated genre ids to exclude"),
    sort_by: str = Query(default="popularity", description="Sort field"),
    sort_order: str = Query(default="desc", description="asc or desc"),
    search: Optional[str] = Query(default=None, description="Title or cast name"),
    _: str = Depends(require_token),
    db: Session = Depends(get_db),
):
    unknown = sorted(set(request.query_params.keys()) - SEARCH_PARAMS)
    if unknown:
        message = ", ".join(f"{name}: not allowed" for name in unknown)
        logger.warning("Unknown query parameters: %s", message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    try:
        query = MovieQuery(
            page=page,
            perPage=per_page,
            year=year,
            genres=genres,
            without_genres=without_genres,
            sort_by=sort_by,
            sort_order=sort_order,
            search=search,
        )
    except ValidationError as e:
        message = validation_message(e.errors())
        logger.warning("Invalid query parameters: %s", message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    try:
        return MovieService(db).search_movies(query)
    except Exception:
        logger.exception("Error fetching movies")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error"
        )


@router.post(
    "/ingest",
    response_model=IngestionReport,
    summary="Run movie ingestion",
    description="Fetch discover pages, details and credits from the catalog and store them.",
)
async def ingest_movies(request: Request, _: str = Depends(require_token)):
    return await request.app.state.ingestion_service.run()
