"""
Shared fixtures: an in-memory SQLite catalogue seeded with a small
worksheet catalogue, and a TestClient wired to it.
"""

from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from storefront.catalog.store import SqlAlchemyStore
from storefront.config import Settings
from storefront.main import create_app
from storefront.seed import SeedResult, seed_catalog
from storefront.storage import get_session, init_db


CATALOG = {
    "tag_groups": [
        {
            "name": "Type",
            "slug": "type",
            "sort_order": 0,
            "tags": [
                {"name": "Worksheet", "slug": "worksheet", "sort_order": 0},
                {"name": "Bundle", "slug": "bundle", "sort_order": 1},
            ],
        },
        {
            "name": "Grade Level",
            "slug": "grade-level",
            "sort_order": 1,
            "tags": [
                {"name": "Grade 5", "slug": "grade5", "sort_order": 1},
                {"name": "Grade 4", "slug": "grade4", "sort_order": 0},
            ],
        },
        {
            "name": "Subject",
            "slug": "subject",
            "sort_order": 2,
            "tags": [
                {"name": "Math", "slug": "math", "sort_order": 0},
                {"name": "Science", "slug": "science", "sort_order": 1},
            ],
        },
        {
            "name": "Framework",
            "slug": "framework",
            "sort_order": 3,
            "tags": [{"name": "Common Core", "slug": "common-core", "sort_order": 0}],
        },
        {
            "name": "Theme",
            "slug": "theme",
            "sort_order": 4,
            "tags": [{"name": "Holiday", "slug": "holiday", "sort_order": 0}],
        },
    ],
    "products": [
        {
            "title": "Grade 4 Math",
            "slug": "grade-4-math",
            "description": "Multiplication drills",
            "status": "published",
            "is_active": True,
            "price_cents": 499,
            "created_at": "2024-01-01T10:00:00",
            "tags": ["worksheet", "grade4", "math", "common-core", "holiday"],
        },
        {
            "title": "Grade 5 Math",
            "slug": "grade-5-math",
            "status": "draft",
            "is_active": True,
            "created_at": "2024-01-02T10:00:00",
            "tags": ["worksheet", "grade5", "math"],
        },
        {
            "title": "Grade 4 Science",
            "slug": "grade-4-science",
            "description": "Plant life cycles",
            "status": "published",
            "is_active": True,
            "created_at": "2024-01-03T10:00:00",
            "tags": ["worksheet", "grade4", "science"],
        },
        {
            "title": "50% off bundle",
            "slug": "fractions-bundle",
            "description": "Fractions for grade 5",
            "status": "published",
            "is_active": True,
            "price_cents": 1299,
            "created_at": "2024-01-04T10:00:00",
            "tags": ["bundle", "grade5", "math"],
        },
        {
            "title": "Grade 4 Reading",
            "slug": "grade-4-reading",
            "status": "archived",
            "is_active": True,
            "created_at": "2024-01-05T10:00:00",
            "tags": ["worksheet", "grade4"],
        },
        {
            "title": "Grade 4 Science Lab",
            "slug": "grade-4-science-lab",
            "status": "published",
            "is_active": False,
            "created_at": "2024-01-06T10:00:00",
            "tags": ["worksheet", "grade4", "science"],
        },
        {
            "title": "word_search pack",
            "slug": "word-search-pack",
            "description": "Vocabulary puzzles",
            "status": "published",
            "is_active": True,
            "created_at": "2024-01-07T10:00:00",
            "tags": ["worksheet"],
        },
    ],
}


@pytest.fixture()
def engine():
    eng = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(eng)
    yield eng
    eng.dispose()


@pytest.fixture()
def session_factory(engine) -> sessionmaker:
    return sessionmaker(bind=engine, expire_on_commit=False)


@pytest.fixture()
def session(session_factory) -> Iterator[Session]:
    s = session_factory()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def seeded(session) -> SeedResult:
    return seed_catalog(session, CATALOG)


@pytest.fixture()
def store(session, seeded) -> SqlAlchemyStore:
    return SqlAlchemyStore(session)


@pytest.fixture()
def app(session_factory, seeded):
    application = create_app(Settings(database_url="sqlite://"), bootstrap=False)

    def _session_override() -> Iterator[Session]:
        s = session_factory()
        try:
            yield s
        finally:
            s.close()

    application.dependency_overrides[get_session] = _session_override
    return application


@pytest.fixture()
def client(app) -> TestClient:
    return TestClient(app)
