# pkgdash/domain/repos.py
import uuid
from datetime import datetime
from typing import Dict, Iterable, Pattern

from loguru import logger
from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, selectinload

from . import history
from .db_models import CommentModel, PackageModel
from .errors import CommentNotFound, PackageNotFound
from .models import Package, normalize_build_type, utcnow
from .schemas import PackagePage, PackageSummary
from ..core.search import matcher


class PackageRepo:
    """Packages and their per-build-type comments, backed by one SQLAlchemy session.

    Every mutation recomputes the latest-comment summary and commits.
    """

    def __init__(self, session: Session):
        self.session = session

    # ---- reads ----

    def _load(self, pid: str) -> PackageModel:
        row = self.session.get(PackageModel, pid, options=[selectinload(PackageModel.comments)])
        if row is None:
            raise PackageNotFound(pid)
        return row

    def get(self, pid: str) -> Package:
        return self._load(pid).to_domain()

    def find_by_name(self, name: str) -> Package | None:
        row = self.session.scalars(
            select(PackageModel)
            .options(selectinload(PackageModel.comments))
            .where(PackageModel.package_name == name)
            .order_by(PackageModel.id)
        ).first()
        return row.to_domain() if row is not None else None

    def count(self) -> int:
        return self.session.scalar(select(func.count()).select_from(PackageModel)) or 0

    def list(self, regex: Pattern | None, page: int, limit: int) -> PackagePage:
        rows = self.session.scalars(
            select(PackageModel)
            .options(selectinload(PackageModel.comments))
            .order_by(PackageModel.package_name, PackageModel.id)
        ).all()
        matches = matcher(regex)
        items = [r for r in rows if matches((r.package_name, r.owner))]
        total = len(items)
        page = max(page, 1)
        start = (page - 1) * limit; end = start + limit
        return PackagePage(
            page=page, limit=limit, total=total,
            items=[PackageSummary.from_domain(r.to_domain()) for r in items[start:end]],
        )

    # ---- comment mutations ----

    def add_comment(self, pid: str, build_type: str, text: str, user: str) -> Package:
        row = self._load(pid)
        bt = normalize_build_type(build_type)
        row.comments.append(CommentModel(build_type=bt, user=user, text=text, timestamp=utcnow()))
        return self._save(row)

    def edit_comment(self, pid: str, build_type: str, timestamp: datetime, text: str) -> Package:
        row = self._load(pid)
        bt = normalize_build_type(build_type)
        target = next(
            (c for c in row.comments if c.build_type == bt and history.same_instant(c.timestamp, timestamp)),
            None,
        )
        if target is None:
            raise CommentNotFound(bt, timestamp)
        target.text = text
        return self._save(row)

    def delete_comment(self, pid: str, build_type: str, timestamp: datetime) -> Package:
        """Remove every comment of ``build_type`` stamped at ``timestamp`` (ms)."""
        row = self._load(pid)
        bt = normalize_build_type(build_type)
        doomed = [c for c in row.comments if c.build_type == bt and history.same_instant(c.timestamp, timestamp)]
        for c in doomed:
            row.comments.remove(c)
        if not doomed:
            logger.debug("No {} comment at {} on package {}", bt, timestamp, pid)
        return self._save(row)

    # ---- field updates ----

    def update_image_size(self, pid: str, size: str) -> Package:
        row = self._load(pid)
        row.image_size = size
        return self._save(row, recompute=False)

    def update_broken_state(self, pid: str, flags: Dict[str, bool]) -> Package:
        row = self._load(pid)
        for attr, value in flags.items():
            setattr(row, attr, value)
        return self._save(row, recompute=False)

    # ---- import ----

    def replace_all(self, packages: Iterable[Package]) -> int:
        """Delete every package, then store ``packages``. Returns the stored count."""
        self.session.execute(delete(CommentModel))
        self.session.execute(delete(PackageModel))
        now = utcnow()
        for pkg in packages:
            self.session.add(_to_row(pkg, now))
        self.session.commit()
        return self.count()

    def _save(self, row: PackageModel, recompute: bool = True) -> Package:
        pkg = row.to_domain()
        if recompute:
            history.apply_latest(pkg)
            row.latest_comment = pkg.latest_comment
            row.latest_build_type = pkg.latest_build_type
        row.updated_at = pkg.updated_at = utcnow()
        self.session.commit()
        return pkg


def _to_row(pkg: Package, now: datetime) -> PackageModel:
    row = PackageModel(
        id=pkg.id or str(uuid.uuid4()),
        package_name=pkg.package_name,
        image_names=pkg.image_names,
        binary_names=pkg.binary_names,
        distro_success=pkg.distro_success,
        distro_failure=pkg.distro_failure,
        success_time=pkg.success_time,
        failure_time=pkg.failure_time,
        status=pkg.status,
        owner=pkg.owner,
        comment=pkg.comment,
        latest_comment=pkg.latest_comment,
        latest_build_type=pkg.latest_build_type,
        bi_broken=pkg.bi_broken,
        ci_broken=pkg.ci_broken,
        image_broken=pkg.image_broken,
        binary_broken=pkg.binary_broken,
        docker_broken=pkg.docker_broken,
        image_size=pkg.image_size,
        created_at=pkg.created_at or now,
        updated_at=pkg.updated_at or now,
    )
    row.comments = [
        CommentModel(build_type=bt, user=c.user, text=c.text, timestamp=c.timestamp)
        for bt, lst in pkg.comments.items()
        for c in lst
    ]
    return row
