"""Error taxonomy for ingestion and stats queries."""


class ReleaseDashboardError(Exception):
    """Base class for all release dashboard errors."""


class UpstreamRequestFailure(ReleaseDashboardError):
    """A single upstream page request failed (network error or non-2xx status).

    Raised per page and recovered by the pagination loop, which keeps the
    records accumulated so far.
    """

    def __init__(self, repo, page, reason):
        super().__init__(f"request for {repo} page {page} failed: {reason}")
        self.repo = repo
        self.page = page
        self.reason = reason


class InvalidTimestamp(ReleaseDashboardError):
    """A release timestamp is missing or cannot be parsed. Fatal to ingestion."""

    def __init__(self, value, field="published_at", repo=None, release_id=None):
        where = f" ({repo} release {release_id})" if repo is not None else ""
        super().__init__(f"invalid {field} timestamp {value!r}{where}")
        self.value = value
        self.field = field
        self.repo = repo
        self.release_id = release_id


class MalformedReleaseTable(ReleaseDashboardError):
    """The persisted release table is missing columns or holds unparseable values."""
