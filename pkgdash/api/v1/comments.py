# pkgdash/api/v1/comments.py
from fastapi import APIRouter, Depends, HTTPException, Query
from ...domain import history, repos, schemas
from ...core.config import Settings
from ..errors import request_boundary
from ... import deps

router = APIRouter()

@router.get("/{id}/comments", response_model=schemas.HistoryPageOut)
def comment_history(id: str,
                    page: int = Query(1, ge=1),
                    limit: int | None = Query(None, ge=1),
                    repo: repos.PackageRepo = Depends(deps.get_repo),
                    s: Settings = Depends(deps.settings)):
    """Every comment of the package across build types, newest first."""
    with request_boundary("Error fetching comments"):
        pkg = repo.get(id)
    per_page = min(limit or s.COMMENTS_PER_PAGE, s.MAX_PAGE_SIZE)
    return schemas.HistoryPageOut.from_domain(
        history.paginate(history.flatten(pkg.comments), page, per_page)
    )

@router.post("/{id}/comments", response_model=schemas.PackageDetail, status_code=201)
def add_comment(id: str, body: schemas.CommentCreate,
                repo: repos.PackageRepo = Depends(deps.get_repo),
                s: Settings = Depends(deps.settings)):
    if not body.build_type or not body.text:
        raise HTTPException(status_code=400, detail="buildType and text are required")
    with request_boundary("Error adding comment"):
        pkg = repo.add_comment(id, body.build_type, body.text, user=s.DEFAULT_COMMENT_AUTHOR)
    return schemas.PackageDetail.from_domain(pkg)

@router.put("/{id}/comments/edit", response_model=schemas.PackageDetail)
def edit_comment(id: str, body: schemas.CommentEdit,
                 repo: repos.PackageRepo = Depends(deps.get_repo)):
    if not body.build_type or not body.text or body.timestamp is None:
        raise HTTPException(status_code=400, detail="type, text, and timestamp are required")
    with request_boundary("Error editing comment"):
        pkg = repo.edit_comment(id, body.build_type, body.timestamp, body.text)
    return schemas.PackageDetail.from_domain(pkg)

@router.delete("/{id}/comments/delete", response_model=schemas.PackageDetail)
def delete_comment(id: str, body: schemas.CommentDelete,
                   repo: repos.PackageRepo = Depends(deps.get_repo)):
    if not body.build_type or body.timestamp is None:
        raise HTTPException(status_code=400, detail="type and timestamp are required")
    with request_boundary("Error deleting comment"):
        pkg = repo.delete_comment(id, body.build_type, body.timestamp)
    return schemas.PackageDetail.from_domain(pkg)
