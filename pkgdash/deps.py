# pkgdash/deps.py
from typing import Iterator

from .core.config import Settings, get_settings
from .core.database import get_db
from .domain import repos


def get_repo() -> Iterator[repos.PackageRepo]:
    with get_db() as session:
        yield repos.PackageRepo(session)

def settings() -> Settings:
    return get_settings()
