# pkgdash/domain/importer.py
import json
import uuid
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from loguru import logger
from pydantic import ValidationError

from . import history
from .errors import InvalidBuildType, SnapshotError
from .models import Comment, Package, empty_comments, normalize_build_type, utcnow
from .repos import PackageRepo
from .schemas import SnapshotRecord


def load_snapshot(path: str | Path) -> List[Dict[str, Any]]:
    """Read the upstream JSON summary: a list of package records."""
    path = Path(path)
    if not path.is_file():
        raise SnapshotError(f"Snapshot not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise SnapshotError(f"Snapshot is not valid JSON: {e}")
    if not isinstance(data, list):
        raise SnapshotError("Snapshot must be a JSON list of package records")
    logger.info("Loaded {} records from {}", len(data), path)
    return data


def to_package(raw: Dict[str, Any], now: datetime, default_author: str = "Current User") -> Package:
    if not isinstance(raw, dict):
        raise SnapshotError(f"Package record must be an object, got {type(raw).__name__}")
    try:
        rec = SnapshotRecord.model_validate(raw)
    except ValidationError as e:
        raise SnapshotError(f"Invalid package record {raw.get('packageName')!r}: {e}")

    comments = empty_comments()
    for key, entries in (rec.comments or {}).items():
        try:
            bt = normalize_build_type(key)
        except InvalidBuildType:
            logger.warning("{}: dropping comments under unknown build type {!r}", rec.package_name, key)
            continue
        for entry in entries or []:
            if not entry.text:
                logger.warning("{}: skipping {} comment without text", rec.package_name, bt)
                continue
            comments[bt].append(Comment(
                text=entry.text,
                timestamp=history.as_utc(entry.timestamp) if entry.timestamp else now,
                user=entry.user or default_author,
            ))

    pkg = Package(
        id=str(uuid.uuid4()),
        package_name=rec.package_name,
        image_names=rec.image_names,
        binary_names=rec.binary_names,
        distro_success=rec.distro_success,
        distro_failure=rec.distro_failure,
        success_time=rec.success_time,
        failure_time=rec.failure_time,
        status=rec.status or "Empty",
        owner=rec.owner,
        comment=rec.comment,
        comments=comments,
        bi_broken=bool(rec.bi_broken),
        ci_broken=bool(rec.ci_broken),
        image_broken=bool(rec.image_broken),
        binary_broken=bool(rec.binary_broken),
        docker_broken=bool(rec.docker_broken),
        image_size=rec.image_size,
        created_at=now,
        updated_at=now,
    )
    return history.apply_latest(pkg)


def import_snapshot(repo: PackageRepo, records: List[Dict[str, Any]],
                    default_author: str = "Current User") -> int:
    """Replace every stored package with ``records``. Returns the stored count."""
    now = utcnow()
    packages = [to_package(r, now, default_author) for r in records]
    logger.info("Deleting existing packages before import")
    count = repo.replace_all(packages)
    logger.info("Inserted {} packages", count)
    return count
