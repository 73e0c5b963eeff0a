# movie_explorer/services/ingestion_service.py

import asyncio
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session
from movie_explorer.database import Database
from movie_explorer.models import (
    ActorModel,
    GenreModel,
    MovieActorModel,
    MovieGenreModel,
    MovieModel,
)
from movie_explorer.schemas import IngestionReport
from movie_explorer.services.catalog_service import CatalogClient

logger = logging.getLogger(__name__)

MOVIE_FIELDS = (
    "title",
    "original_title",
    "overview",
    "release_date",
    "popularity",
    "vote_average",
    "vote_count",
    "revenue",
    "runtime",
)
# fields that fall back to 0 instead of NULL
ZERO_DEFAULT_FIELDS = ("revenue", "runtime")


@dataclass
class MovieBundle:
    stub: dict
    details: dict
    credits: dict

    @property
    def movie_id(self) -> int:
        return self.stub["id"]


def parse_date(value) -> Optional[date]:
    if not value:
        return None
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (ValueError, TypeError):
        return None


def merge_movie_fields(stub: dict, details: dict) -> dict:
    """Combine a discover stub with its details record.

    A truthy details value wins, then the stub value, then the default
    (0 for revenue and runtime, NULL otherwise).
    """
    merged = {"id": stub["id"]}
    for name in MOVIE_FIELDS:
        value = details.get(name)
        if not value:
            value = stub.get(name)
        if value is None and name in ZERO_DEFAULT_FIELDS:
            value = 0
        merged[name] = value
    merged["release_date"] = parse_date(merged["release_date"])
    return merged


class IngestionService:

    def __init__(
        self,
        database: Database,
        catalog: CatalogClient,
        movie_limit: int = 500,
        concurrency: int = 10,
        deadline: Optional[float] = None,
    ):
        self.database = database
        self.catalog = catalog
        self.movie_limit = movie_limit
        self.concurrency = concurrency
        self.deadline = deadline
        # startup and on-demand runs never overlap
        self._run_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings, database: Database, catalog: CatalogClient) -> "IngestionService":
        return cls(
            database,
            catalog,
            movie_limit=settings.ingest_movie_limit,
            concurrency=settings.ingest_concurrency,
            deadline=settings.ingest_deadline,
        )

    async def collect_movie_stubs(self) -> Tuple[List[dict], bool]:
        """Walk discover pages until the limit, the last page or a fallback."""
        movies: List[dict] = []
        page = 1
        total_pages = 1
        used_fallback = False

        while len(movies) < self.movie_limit and page <= total_pages:
            discover = await self.catalog.fetch_discover_page(page)
            movies.extend(stub for stub in discover.results if stub.get("id"))
            total_pages = discover.total_pages
            page += 1
            if discover.from_fallback:
                used_fallback = True
                break

        return movies[:self.movie_limit], used_fallback

    async def fetch_movie_bundle(self, stub: dict, semaphore: asyncio.Semaphore) -> MovieBundle:
        async with semaphore:
            details, credits = await asyncio.gather(
                self.catalog.fetch_movie_details(stub["id"]),
                self.catalog.fetch_credits(stub["id"]),
            )
        return MovieBundle(stub=stub, details=details or {}, credits=credits or {"cast": []})

    async def fetch_bundles(self, stubs: List[dict]) -> Tuple[List[MovieBundle], int, bool]:
        """Fetch details and credits for every stub, bounded by the deadline.

        Returns the completed bundles in stub order, the number of stubs that
        produced no bundle, and whether the deadline was hit.
        """
        if not stubs:
            return [], 0, False

        semaphore = asyncio.Semaphore(self.concurrency)
        tasks = [asyncio.create_task(self.fetch_movie_bundle(stub, semaphore)) for stub in stubs]
        done, pending = await asyncio.wait(tasks, timeout=self.deadline)

        timed_out = bool(pending)
        if pending:
            logger.error(
                "Ingestion deadline of %ss reached, cancelling %d outstanding fetches",
                self.deadline, len(pending)
            )
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)

        bundles = []
        for stub, task in zip(stubs, tasks):
            if task not in done:
                continue
            error = task.exception()
            if error is not None:
                logger.error("Fetching movie %s failed: %r", stub["id"], error)
                continue
            bundles.append(task.result())

        return bundles, len(stubs) - len(bundles), timed_out

    def _insert_if_absent(self, db: Session, model, key, **values) -> None:
        if db.get(model, key) is None:
            db.add(model(**values))
            db.flush()

    def _insert_movie(self, db: Session, bundle: MovieBundle) -> None:
        movie_id = bundle.movie_id
        movie = merge_movie_fields(bundle.stub, bundle.details)
        self._insert_if_absent(db, MovieModel, movie_id, **movie)

        for genre in bundle.details.get("genres") or []:
            genre_id = genre.get("id")
            if not genre_id:
                continue
            self._insert_if_absent(db, GenreModel, genre_id, id=genre_id, name=genre.get("name"))
            self._insert_if_absent(
                db, MovieGenreModel, (movie_id, genre_id), movie_id=movie_id, genre_id=genre_id
            )

        for cast in bundle.credits.get("cast") or []:
            cast_id = cast.get("id")
            if not cast_id:
                continue
            self._insert_if_absent(
                db,
                ActorModel,
                cast_id,
                id=cast_id,
                name=cast.get("name"),
                gender=cast.get("gender"),
                popularity=cast.get("popularity"),
                profile_path=cast.get("profile_path"),
            )
            self._insert_if_absent(
                db,
                MovieActorModel,
                (movie_id, cast_id),
                movie_id=movie_id,
                cast_id=cast_id,
                character_name=cast.get("character"),
                order_num=cast.get("order"),
            )

    def store_movie(self, bundle: MovieBundle) -> bool:
        """Store one movie with its genres and cast in a single transaction."""
        db = self.database.session()
        try:
            self._insert_movie(db, bundle)
            db.commit()
            logger.debug("Stored movie %s", bundle.movie_id)
            return True
        except Exception:
            db.rollback()
            logger.exception("Error storing movie %s", bundle.movie_id)
            return False
        finally:
            db.close()

    async def run(self) -> IngestionReport:
        async with self._run_lock:
            return await self._run()

    async def _run(self) -> IngestionReport:
        logger.info("Movie ingestion started (limit %d)", self.movie_limit)
        stubs, used_fallback = await self.collect_movie_stubs()
        report = IngestionReport(requested=len(stubs), used_fallback=used_fallback)

        bundles, skipped, timed_out = await self.fetch_bundles(stubs)
        report.skipped = skipped
        report.timed_out = timed_out

        # blocking session work stays off the event loop
        for bundle in bundles:
            if await asyncio.to_thread(self.store_movie, bundle):
                report.stored += 1
            else:
                report.failed += 1

        logger.info(
            "Movie ingestion finished: %d requested, %d stored, %d failed, %d skipped",
            report.requested, report.stored, report.failed, report.skipped
        )
        return report
