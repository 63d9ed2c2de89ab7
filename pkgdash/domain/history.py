# pkgdash/domain/history.py
"""Comment history reconciliation.

Comments live in one list per build type. The dashboard shows them as a
single feed, newest first, and keeps a "latest comment" summary on the
package. Both views come from :func:`flatten`, so the import job, the API
and the history endpoint always agree.
"""
import math
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

from .models import BUILD_TYPES, Comment, Package

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


@dataclass
class HistoryEntry:
    build_type: str
    user: str
    text: str
    timestamp: datetime


@dataclass
class HistoryPage:
    page: int
    per_page: int
    total: int
    pages: int
    items: List[HistoryEntry]


def as_utc(ts: datetime) -> datetime:
    # SQLite hands back naive datetimes; they were stored as UTC
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts.astimezone(timezone.utc)


def to_millis(ts: datetime) -> int:
    return (as_utc(ts) - _EPOCH) // timedelta(milliseconds=1)


def same_instant(a: datetime, b: datetime) -> bool:
    """True when both timestamps fall on the same millisecond."""
    return to_millis(a) == to_millis(b)


def _ordered_keys(comments: Dict[str, List[Comment]]) -> Iterable[str]:
    yield from (bt for bt in BUILD_TYPES if bt in comments)
    yield from (bt for bt in comments if bt not in BUILD_TYPES)


def flatten(comments: Dict[str, List[Comment]]) -> List[HistoryEntry]:
    entries = [
        HistoryEntry(build_type=bt, user=c.user, text=c.text, timestamp=as_utc(c.timestamp))
        for bt in _ordered_keys(comments)
        for c in comments.get(bt) or []
    ]
    # stable: equal timestamps keep build-type then insertion order
    entries.sort(key=lambda e: e.timestamp, reverse=True)
    return entries


def latest(comments: Dict[str, List[Comment]]) -> Optional[HistoryEntry]:
    entries = flatten(comments)
    return entries[0] if entries else None


def apply_latest(pkg: Package) -> Package:
    """Recompute the package's latest-comment summary in place."""
    newest = latest(pkg.comments)
    if newest is None:
        pkg.latest_comment = None
        pkg.latest_build_type = None
    else:
        pkg.latest_comment = newest.text
        pkg.latest_build_type = newest.build_type
    return pkg


def paginate(entries: List[HistoryEntry], page: int, per_page: int) -> HistoryPage:
    page = max(page, 1)
    per_page = max(per_page, 1)
    total = len(entries)
    start = (page - 1) * per_page
    return HistoryPage(
        page=page,
        per_page=per_page,
        total=total,
        pages=math.ceil(total / per_page),
        items=entries[start:start + per_page],
    )
