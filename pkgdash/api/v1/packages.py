# pkgdash/api/v1/packages.py
from fastapi import APIRouter, Depends, HTTPException, Query
from ...domain import repos, schemas
from ...core.search import safe_regex, UnsafeRegexError
from ...core.config import Settings
from ..errors import request_boundary
from ... import deps

router = APIRouter()

@router.get("", response_model=schemas.PackagePage)
def list_packages(
    q: str | None = Query(None, description="case-insensitive regex over package name and owner"),
    page: int = Query(1, ge=1),
    limit: int | None = Query(None, ge=1),
    repo: repos.PackageRepo = Depends(deps.get_repo),
    s: Settings = Depends(deps.settings),
):
    try:
        regex = safe_regex(q)
    except UnsafeRegexError as e:
        raise HTTPException(status_code=400, detail=str(e))
    limit = min(limit or s.DEFAULT_PAGE_SIZE, s.MAX_PAGE_SIZE)
    with request_boundary("Error fetching packages"):
        return repo.list(regex=regex, page=page, limit=limit)

@router.get("/{id}", response_model=schemas.PackageDetail)
def get_package(id: str, repo: repos.PackageRepo = Depends(deps.get_repo)):
    with request_boundary("Error fetching package"):
        return schemas.PackageDetail.from_domain(repo.get(id))

@router.put("/{id}/image-size", response_model=schemas.PackageDetail)
def update_image_size(id: str, body: schemas.ImageSizeUpdate,
                      repo: repos.PackageRepo = Depends(deps.get_repo)):
    if not body.image_size:
        raise HTTPException(status_code=400, detail="imageSize is required")
    with request_boundary("Error updating image size"):
        return schemas.PackageDetail.from_domain(repo.update_image_size(id, body.image_size))

@router.put("/{id}/broken-state", response_model=schemas.PackageDetail)
def update_broken_state(id: str, body: schemas.BrokenStateUpdate,
                        repo: repos.PackageRepo = Depends(deps.get_repo)):
    with request_boundary("Error updating broken state"):
        repo.get(id)
        flags = body.flags()
        if not flags:
            raise HTTPException(status_code=400, detail="No valid fields to update")
        return schemas.PackageDetail.from_domain(repo.update_broken_state(id, flags))
