# pkgdash/domain/models.py
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, List

from .errors import InvalidBuildType

BUILD_TYPES = ("BI", "CI", "Image", "Binary", "Docker")

# broken-state request keys -> Package attribute; "broken" and "cibroken"
# are the names older clients send.
BROKEN_FLAG_KEYS: Dict[str, str] = {
    "broken": "bi_broken",
    "biBroken": "bi_broken",
    "ciBroken": "ci_broken",
    "cibroken": "ci_broken",
    "imageBroken": "image_broken",
    "binaryBroken": "binary_broken",
    "dockerBroken": "docker_broken",
}


def normalize_build_type(raw: str | None) -> str:
    """'BI Build' -> 'BI'. Anything outside BUILD_TYPES is rejected."""
    if not raw:
        raise InvalidBuildType(raw)
    name = raw.strip()
    if name.endswith(" Build"):
        name = name[: -len(" Build")].strip()
    if name not in BUILD_TYPES:
        raise InvalidBuildType(raw)
    return name


def utcnow() -> datetime:
    """Current UTC time truncated to milliseconds, the resolution comments are matched at."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def empty_comments() -> Dict[str, List["Comment"]]:
    return {bt: [] for bt in BUILD_TYPES}


@dataclass
class Comment:
    text: str
    timestamp: datetime
    user: str = "Current User"


@dataclass
class Package:
    id: str
    package_name: str | None = None
    image_names: str | None = None
    binary_names: str | None = None
    distro_success: str | None = None
    distro_failure: str | None = None
    success_time: datetime | None = None
    failure_time: datetime | None = None
    status: str | None = None
    owner: str | None = None
    comment: str | None = None
    latest_comment: str | None = None
    latest_build_type: str | None = None
    comments: Dict[str, List[Comment]] = field(default_factory=empty_comments)
    bi_broken: bool = False
    ci_broken: bool = False
    image_broken: bool = False
    binary_broken: bool = False
    docker_broken: bool = False
    image_size: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
