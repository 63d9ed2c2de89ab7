# pkgdash/domain/schemas.py
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from .history import HistoryEntry, HistoryPage
from .models import BROKEN_FLAG_KEYS, Comment, Package

# ---- Responses ----

class CommentOut(BaseModel):
    user: str
    text: str
    timestamp: datetime

    @classmethod
    def from_domain(cls, c: Comment) -> "CommentOut":
        return cls(user=c.user, text=c.text, timestamp=c.timestamp)

class PackageSummary(BaseModel):
    id: str
    package_name: str | None = None
    owner: str | None = None
    status: str | None = None
    image_size: str | None = None
    bi_broken: bool = False
    ci_broken: bool = False
    image_broken: bool = False
    binary_broken: bool = False
    docker_broken: bool = False
    latest_comment: str | None = None
    latest_build_type: str | None = None

    @classmethod
    def from_domain(cls, p: Package) -> "PackageSummary":
        return cls(**_summary_fields(p))

class PackageDetail(PackageSummary):
    image_names: str | None = None
    binary_names: str | None = None
    distro_success: str | None = None
    distro_failure: str | None = None
    success_time: datetime | None = None
    failure_time: datetime | None = None
    comment: str | None = None
    comments: Dict[str, List[CommentOut]] = {}
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, p: Package) -> "PackageDetail":
        return cls(
            **_summary_fields(p),
            image_names=p.image_names,
            binary_names=p.binary_names,
            distro_success=p.distro_success,
            distro_failure=p.distro_failure,
            success_time=p.success_time,
            failure_time=p.failure_time,
            comment=p.comment,
            comments={bt: [CommentOut.from_domain(c) for c in lst] for bt, lst in p.comments.items()},
            created_at=p.created_at,
            updated_at=p.updated_at,
        )

def _summary_fields(p: Package) -> dict:
    return dict(
        id=p.id, package_name=p.package_name, owner=p.owner, status=p.status,
        image_size=p.image_size, bi_broken=p.bi_broken, ci_broken=p.ci_broken,
        image_broken=p.image_broken, binary_broken=p.binary_broken,
        docker_broken=p.docker_broken, latest_comment=p.latest_comment,
        latest_build_type=p.latest_build_type,
    )

class PackagePage(BaseModel):
    page: int
    limit: int
    total: int
    items: List[PackageSummary]

class HistoryEntryOut(BaseModel):
    build_type: str
    user: str
    text: str
    timestamp: datetime

class HistoryPageOut(BaseModel):
    page: int
    limit: int
    total: int
    pages: int
    items: List[HistoryEntryOut]

    @classmethod
    def from_domain(cls, hp: HistoryPage) -> "HistoryPageOut":
        return cls(
            page=hp.page, limit=hp.per_page, total=hp.total, pages=hp.pages,
            items=[_entry_out(e) for e in hp.items],
        )

def _entry_out(e: HistoryEntry) -> HistoryEntryOut:
    return HistoryEntryOut(build_type=e.build_type, user=e.user, text=e.text, timestamp=e.timestamp)

class Health(BaseModel):
    status: str
    packages: int
    uptime_s: float

# ---- Requests ----
# Fields are optional so missing values reach the route's presence checks (400)
# instead of failing schema validation (422).

_BUILD_TYPE = AliasChoices("buildType", "build_type", "type")

class CommentCreate(BaseModel):
    build_type: Optional[str] = Field(None, validation_alias=_BUILD_TYPE)
    text: Optional[str] = None

class CommentEdit(BaseModel):
    # edit/delete historically sent "type"; the single-package view sends "buildType"
    build_type: Optional[str] = Field(None, validation_alias=AliasChoices("type", "buildType", "build_type"))
    timestamp: Optional[datetime] = None
    text: Optional[str] = None

class CommentDelete(BaseModel):
    build_type: Optional[str] = Field(None, validation_alias=AliasChoices("type", "buildType", "build_type"))
    timestamp: Optional[datetime] = None

class ImageSizeUpdate(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    image_size: Optional[str] = Field(None, validation_alias=AliasChoices("imageSize", "image_size"))

class BrokenStateUpdate(BaseModel):
    model_config = ConfigDict(extra="ignore")

    broken: Optional[bool] = None
    biBroken: Optional[bool] = None
    ciBroken: Optional[bool] = None
    cibroken: Optional[bool] = None
    imageBroken: Optional[bool] = None
    binaryBroken: Optional[bool] = None
    dockerBroken: Optional[bool] = None

    def flags(self) -> Dict[str, bool]:
        """Map the provided request keys onto Package attribute names."""
        sent = self.model_dump(exclude_none=True)
        return {BROKEN_FLAG_KEYS[k]: v for k, v in sent.items() if k in BROKEN_FLAG_KEYS}

# ---- Import snapshot ----

class SnapshotComment(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user: Optional[str] = None
    text: Optional[str] = Field(None, validation_alias=AliasChoices("text", "comment"))
    timestamp: Optional[datetime] = Field(None, validation_alias=AliasChoices("timestamp", "date"))

class SnapshotRecord(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    package_name: Optional[str] = Field(None, validation_alias=AliasChoices("packageName", "package_name"))
    image_names: Optional[str] = Field(None, validation_alias=AliasChoices("imageNames", "image_names"))
    binary_names: Optional[str] = Field(None, validation_alias=AliasChoices("binaryNames", "binary_names"))
    distro_success: Optional[str] = Field(None, validation_alias=AliasChoices("distroSuccess", "distro_success"))
    distro_failure: Optional[str] = Field(None, validation_alias=AliasChoices("distroFailure", "distro_failure"))
    success_time: Optional[datetime] = Field(None, validation_alias=AliasChoices("successTime", "success_time"))
    failure_time: Optional[datetime] = Field(None, validation_alias=AliasChoices("failureTime", "failure_time"))
    status: Optional[str] = None
    owner: Optional[str] = None
    comment: Optional[str] = None
    comments: Optional[Dict[str, Optional[List[SnapshotComment]]]] = None
    # "broken" is the upstream name for the BI flag and wins over "biBroken"
    bi_broken: Optional[bool] = Field(None, validation_alias=AliasChoices("broken", "biBroken", "bi_broken"))
    ci_broken: Optional[bool] = Field(None, validation_alias=AliasChoices("ciBroken", "ci_broken"))
    image_broken: Optional[bool] = Field(None, validation_alias=AliasChoices("imageBroken", "image_broken"))
    binary_broken: Optional[bool] = Field(None, validation_alias=AliasChoices("binaryBroken", "binary_broken"))
    docker_broken: Optional[bool] = Field(None, validation_alias=AliasChoices("dockerBroken", "docker_broken"))
    image_size: Optional[str] = Field(None, validation_alias=AliasChoices("imageSize", "image_size"))
