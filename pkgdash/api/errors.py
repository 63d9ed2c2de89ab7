# pkgdash/api/errors.py
from contextlib import contextmanager
from typing import Iterator

from fastapi import HTTPException
from loguru import logger
from sqlalchemy.exc import SQLAlchemyError

from ..domain.errors import CommentNotFound, InvalidBuildType, PackageNotFound


@contextmanager
def request_boundary(failure: str) -> Iterator[None]:
    """Map domain errors to HTTP codes; log storage failures and report ``failure`` as a 500."""
    try:
        yield
    except (PackageNotFound, CommentNotFound) as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InvalidBuildType as e:
        raise HTTPException(status_code=400, detail=e.message)
    except SQLAlchemyError:
        logger.exception(failure)
        raise HTTPException(status_code=500, detail=failure)
