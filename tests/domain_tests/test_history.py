"""
Tests for comment history reconciliation.
"""

from datetime import datetime, timezone

from pkgdash.domain import history
from pkgdash.domain.models import Comment, Package, empty_comments


def ts(day, hour=0, minute=0, micro=0):
    return datetime(2024, 3, day, hour, minute, 0, micro, tzinfo=timezone.utc)


def make_comments(**by_type):
    comments = empty_comments()
    for bt, entries in by_type.items():
        comments[bt] = [Comment(text=t, timestamp=when, user="tester") for t, when in entries]
    return comments


class TestFlatten:
    """Tests for flatten()."""

    def test_empty(self):
        assert history.flatten(empty_comments()) == []

    def test_merges_build_types_newest_first(self):
        comments = make_comments(
            BI=[("bi-old", ts(1)), ("bi-new", ts(5))],
            Docker=[("docker", ts(3))],
            CI=[("ci", ts(2))],
        )

        entries = history.flatten(comments)

        assert [e.text for e in entries] == ["bi-new", "docker", "ci", "bi-old"]
        assert [e.build_type for e in entries] == ["BI", "Docker", "CI", "BI"]

    def test_equal_timestamps_keep_build_type_order(self):
        same = ts(4)
        comments = make_comments(Docker=[("docker", same)], BI=[("bi", same)], Image=[("image", same)])

        entries = history.flatten(comments)

        assert [e.build_type for e in entries] == ["BI", "Image", "Docker"]

    def test_naive_timestamps_are_treated_as_utc(self):
        comments = make_comments(BI=[("naive", datetime(2024, 3, 9))], CI=[("aware", ts(8))])

        entries = history.flatten(comments)

        assert entries[0].text == "naive"
        assert entries[0].timestamp.tzinfo is not None

    def test_missing_lists_are_ignored(self):
        comments = {"BI": None, "CI": [Comment(text="ci", timestamp=ts(1))]}
        assert [e.text for e in history.flatten(comments)] == ["ci"]


class TestLatest:
    """Tests for latest() and apply_latest()."""

    def test_latest_none_when_empty(self):
        assert history.latest(empty_comments()) is None

    def test_apply_latest_sets_summary(self):
        pkg = Package(id="p1", comments=make_comments(CI=[("ci", ts(1))], Binary=[("bin", ts(2))]))

        history.apply_latest(pkg)

        assert pkg.latest_comment == "bin"
        assert pkg.latest_build_type == "Binary"

    def test_apply_latest_clears_summary(self):
        pkg = Package(id="p1", latest_comment="stale", latest_build_type="BI")

        history.apply_latest(pkg)

        assert pkg.latest_comment is None
        assert pkg.latest_build_type is None


class TestPaginate:
    """Tests for paginate()."""

    def _entries(self, n):
        comments = make_comments(BI=[(f"c{i}", ts(1, minute=i)) for i in range(n)])
        return history.flatten(comments)

    def test_pages_of_three(self):
        page = history.paginate(self._entries(7), page=3, per_page=3)

        assert page.total == 7
        assert page.pages == 3
        assert [e.text for e in page.items] == ["c0"]

    def test_first_page_is_newest(self):
        page = history.paginate(self._entries(7), page=1, per_page=3)
        assert [e.text for e in page.items] == ["c6", "c5", "c4"]

    def test_out_of_range_page_is_empty(self):
        page = history.paginate(self._entries(2), page=5, per_page=3)
        assert page.items == []
        assert page.pages == 1

    def test_no_entries(self):
        page = history.paginate([], page=1, per_page=3)
        assert page.pages == 0
        assert page.items == []


class TestSameInstant:
    """Tests for millisecond timestamp matching."""

    def test_same_millisecond(self):
        assert history.same_instant(ts(1, micro=123_456), ts(1, micro=123_999))

    def test_different_millisecond(self):
        assert not history.same_instant(ts(1, micro=123_999), ts(1, micro=124_000))

    def test_naive_equals_utc(self):
        assert history.same_instant(datetime(2024, 3, 1, 0, 0), ts(1))

    def test_other_timezone(self):
        from datetime import timedelta

        plus_two = timezone(timedelta(hours=2))
        assert history.same_instant(datetime(2024, 3, 1, 2, 0, tzinfo=plus_two), ts(1))

    def test_to_millis(self):
        assert history.to_millis(datetime(1970, 1, 1, 0, 0, 1, 500_000, tzinfo=timezone.utc)) == 1500
