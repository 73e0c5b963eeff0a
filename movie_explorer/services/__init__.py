# movie_explorer/services/__init__.py

from .catalog_service import (
    CatalogClient,
    CatalogProvider,
    CatalogUnavailableError,
    FixtureCatalog,
    TMDBCatalog,
    build_catalog_client,
)
from .ingestion_service import IngestionService
from .movie_service import MovieService
from .genre_service import GenreService

__all__ = [
    "CatalogClient",
    "CatalogProvider",
    "CatalogUnavailableError",
    "FixtureCatalog",
    "TMDBCatalog",
    "build_catalog_client",
    "IngestionService",
    "MovieService",
    "GenreService",
]
