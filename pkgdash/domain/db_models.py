# pkgdash/domain/db_models.py
from sqlalchemy import Column, String, Integer, Boolean, Text, DateTime, ForeignKey
from sqlalchemy.orm import declarative_base, relationship

from .history import as_utc

Base = declarative_base()


class PackageModel(Base):
    __tablename__ = "packages"

    id = Column(String, primary_key=True)
    package_name = Column(String, nullable=True, index=True)
    image_names = Column(String, nullable=True)
    binary_names = Column(String, nullable=True)
    distro_success = Column(String, nullable=True)
    distro_failure = Column(String, nullable=True)
    success_time = Column(DateTime(timezone=True), nullable=True)
    failure_time = Column(DateTime(timezone=True), nullable=True)
    status = Column(String, nullable=True)
    owner = Column(String, nullable=True)
    comment = Column(Text, nullable=True)
    latest_comment = Column(Text, nullable=True)
    latest_build_type = Column(String, nullable=True)
    bi_broken = Column(Boolean, nullable=False, default=False)
    ci_broken = Column(Boolean, nullable=False, default=False)
    image_broken = Column(Boolean, nullable=False, default=False)
    binary_broken = Column(Boolean, nullable=False, default=False)
    docker_broken = Column(Boolean, nullable=False, default=False)
    image_size = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=True)
    updated_at = Column(DateTime(timezone=True), nullable=True)

    comments = relationship(
        "CommentModel",
        back_populates="package",
        cascade="all, delete-orphan",
        order_by="CommentModel.id",
    )

    def to_domain(self):
        """Convert database model to domain Package"""
        from .models import Comment, Package, empty_comments
        grouped = empty_comments()
        for c in self.comments:
            grouped.setdefault(c.build_type, []).append(
                Comment(text=c.text, timestamp=as_utc(c.timestamp), user=c.user)
            )
        return Package(
            id=self.id,
            package_name=self.package_name,
            image_names=self.image_names,
            binary_names=self.binary_names,
            distro_success=self.distro_success,
            distro_failure=self.distro_failure,
            success_time=_utc_or_none(self.success_time),
            failure_time=_utc_or_none(self.failure_time),
            status=self.status,
            owner=self.owner,
            comment=self.comment,
            latest_comment=self.latest_comment,
            latest_build_type=self.latest_build_type,
            comments=grouped,
            bi_broken=bool(self.bi_broken),
            ci_broken=bool(self.ci_broken),
            image_broken=bool(self.image_broken),
            binary_broken=bool(self.binary_broken),
            docker_broken=bool(self.docker_broken),
            image_size=self.image_size,
            created_at=_utc_or_none(self.created_at),
            updated_at=_utc_or_none(self.updated_at),
        )


class CommentModel(Base):
    __tablename__ = "comments"

    id = Column(Integer, primary_key=True, autoincrement=True)
    package_id = Column(String, ForeignKey("packages.id", ondelete="CASCADE"), nullable=False, index=True)
    build_type = Column(String, nullable=False)
    user = Column(String, nullable=False, default="Current User")
    text = Column(Text, nullable=False)
    timestamp = Column(DateTime(timezone=True), nullable=False)

    package = relationship("PackageModel", back_populates="comments")


def _utc_or_none(ts):
    return as_utc(ts) if ts is not None else None
