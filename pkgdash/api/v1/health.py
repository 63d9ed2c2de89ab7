# pkgdash/api/v1/health.py
import time
from fastapi import APIRouter, Depends
from ...domain import repos, schemas
from ..errors import request_boundary
from ... import deps

router = APIRouter()
_started = time.time()

@router.get("", response_model=schemas.Health)
def health(repo: repos.PackageRepo = Depends(deps.get_repo)):
    with request_boundary("Database unavailable"):
        count = repo.count()
    return schemas.Health(status="ok", packages=count, uptime_s=time.time() - _started)
