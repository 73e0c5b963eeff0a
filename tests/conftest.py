from __future__ import annotations

from datetime import date

import pytest
from fastapi.testclient import TestClient

from movie_explorer.core.auth import create_access_token, get_password_hash
from movie_explorer.core.config import Settings
from movie_explorer.database import Database
from movie_explorer.main import create_app
from movie_explorer.models import (
    ActorModel,
    GenreModel,
    MovieActorModel,
    MovieGenreModel,
    MovieModel,
)

ADMIN_PASSWORD = "correct-horse"

GENRES = {1: "Action", 2: "Comedy", 3: "Horror"}
ACTORS = {9001: "Anna Lee", 9002: "John Smith", 9003: "Mary Jones", 9004: "Bob Stone"}

# (id, title, release_date, popularity, genre ids, actor ids)
SEED_MOVIES = [
    (1, "Smith Returns", date(2020, 3, 1), 10.0, [1], [9001]),
    (2, "Alpha", date(2020, 6, 1), 50.0, [2, 3], [9002]),
    (3, "Beta", date(2020, 9, 1), 30.0, [1, 2], [9003, 9004]),
    (4, "Gamma", date(2019, 1, 1), 90.0, [1], [9002]),
    (5, "Delta", date(2020, 12, 1), 5.0, [3], []),
    (6, "Epsilon", date(2020, 1, 15), 20.0, [], []),
]


def seed_movies(database: Database) -> None:
    db = database.session()
    try:
        db.add_all(GenreModel(id=genre_id, name=name) for genre_id, name in GENRES.items())
        db.add_all(ActorModel(id=actor_id, name=name) for actor_id, name in ACTORS.items())
        db.flush()
        for movie_id, title, released, popularity, genre_ids, actor_ids in SEED_MOVIES:
            db.add(
                MovieModel(
                    id=movie_id,
                    title=title,
                    original_title=title,
                    release_date=released,
                    popularity=popularity,
                    vote_average=7.0,
                    vote_count=100 * movie_id,
                    revenue=1000 * movie_id,
                    runtime=100 + movie_id,
                )
            )
            db.flush()
            db.add_all(MovieGenreModel(movie_id=movie_id, genre_id=genre_id) for genre_id in genre_ids)
            db.add_all(
                MovieActorModel(movie_id=movie_id, cast_id=actor_id, character_name="Role", order_num=order)
                for order, actor_id in enumerate(actor_ids)
            )
        db.commit()
    finally:
        db.close()


@pytest.fixture(scope="session")
def password_hash() -> str:
    return get_password_hash(ADMIN_PASSWORD)


@pytest.fixture
def settings(password_hash: str) -> Settings:
    return Settings(
        _env_file=None,
        database_url="sqlite://",
        catalog_source="fixture",
        ingest_on_startup=False,
        secret_key="test-secret",
        admin_username="admin",
        admin_password_hash=password_hash,
    )


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def seeded_database(database: Database) -> Database:
    seed_movies(database)
    return database


@pytest.fixture
def app(settings: Settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        seed_movies(app.state.database)
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(settings: Settings) -> dict[str, str]:
    token = create_access_token({"sub": "admin"}, settings)
    return {"Authorization": f"Bearer {token}"}
