# pkgdash/core/database.py
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from contextlib import contextmanager
from loguru import logger
from ..core.config import get_settings
from ..domain.db_models import Base
import os

_engine = None
_SessionLocal = None


def _is_memory_url(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:")


def get_engine():
    """Lazily build the engine for DB_URL."""
    global _engine
    if _engine is None:
        settings = get_settings()
        url = settings.DB_URL
        kwargs = {}
        if url.startswith("sqlite"):
            kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_url(url):
                # one shared connection, otherwise every session sees an empty db
                kwargs["poolclass"] = StaticPool
            else:
                db_dir = os.path.dirname(url.replace("sqlite:///", "", 1))
                if db_dir:
                    os.makedirs(db_dir, exist_ok=True)
        _engine = create_engine(url, **kwargs)
        logger.debug("Created database engine for {}", url)
    return _engine


def get_session_local():
    """Session factory bound to the shared engine."""
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=get_engine())
    return _SessionLocal


def init_db():
    """Create the packages and comments tables if missing."""
    Base.metadata.create_all(bind=get_engine())


def dispose_engine():
    """Close pooled connections and forget the engine (settings changed, tests)."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


@contextmanager
def get_db():
    """One session per unit of work: commit on success, roll back on error."""
    session = get_session_local()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
