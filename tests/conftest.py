"""Shared fixtures: every test gets a fresh in-memory SQLite database."""

from datetime import datetime, timedelta, timezone

import pytest

from pkgdash.core import config, database
from pkgdash.domain import repos


SAMPLE_RECORDS = [
    {
        "packageName": "openssl",
        "imageNames": "openssl-img",
        "binaryNames": "openssl-bin",
        "owner": "alice",
        "status": "Active",
        "broken": True,
        "dockerBroken": False,
        "imageSize": "120MB",
        "comments": {
            "BI": [
                {"user": "bob", "text": "BI flaky on arm64", "timestamp": "2024-03-01T10:00:00.000Z"},
            ],
            "Docker": [
                {"text": "base image bumped", "timestamp": "2024-03-02T09:30:00.000Z"},
            ],
        },
    },
    {
        "packageName": "zlib",
        "owner": "carol",
        "comments": {},
    },
    {
        "packageName": "curl",
        "owner": "alice",
        "ciBroken": True,
    },
]


@pytest.fixture
def sample_records():
    return SAMPLE_RECORDS


@pytest.fixture
def db(monkeypatch):
    """Point the app at a private in-memory database and create the tables."""
    monkeypatch.setenv("DB_URL", "sqlite://")
    config.reset_settings()
    database.dispose_engine()
    database.init_db()
    yield
    database.dispose_engine()
    config.reset_settings()


@pytest.fixture
def session(db):
    s = database.get_session_local()()
    try:
        yield s
    finally:
        s.close()


@pytest.fixture
def repo(session):
    return repos.PackageRepo(session)


@pytest.fixture
def seeded(repo):
    """Import SAMPLE_RECORDS; returns {package_name: id}."""
    from pkgdash.domain import importer

    importer.import_snapshot(repo, SAMPLE_RECORDS)
    page = repo.list(regex=None, page=1, limit=100)
    return {p.package_name: p.id for p in page.items}


@pytest.fixture
def clock(monkeypatch):
    """Make comment timestamps strictly increasing, one second apart."""
    start = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)
    ticks = iter(start + timedelta(seconds=i) for i in range(10_000))
    monkeypatch.setattr(repos, "utcnow", lambda: next(ticks))
    return start
