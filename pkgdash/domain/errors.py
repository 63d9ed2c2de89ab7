# pkgdash/domain/errors.py


class DashboardError(Exception):
    """Base error; ``message`` ends up as the HTTP ``detail``."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class PackageNotFound(DashboardError):
    def __init__(self, package_id: str):
        self.package_id = package_id
        super().__init__("Package not found")


class CommentNotFound(DashboardError):
    def __init__(self, build_type: str, timestamp):
        self.build_type = build_type
        self.timestamp = timestamp
        super().__init__("Comment not found")


class InvalidBuildType(DashboardError):
    def __init__(self, raw: str | None):
        self.raw = raw
        super().__init__("Invalid build type")


class SnapshotError(DashboardError):
    """The import snapshot is missing or is not a JSON list of records."""
