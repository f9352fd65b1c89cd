"""Release records: the upstream API shape and the canonical flat row."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class UpstreamRelease:
    """A release as returned by the GitHub releases listing endpoint.

    Fields the API may omit or send as null are Optional; the normalizer
    supplies their defaults.
    """

    id: int
    tag_name: str
    html_url: str
    draft: bool = False
    prerelease: bool = False
    name: Optional[str] = None
    author_login: Optional[str] = None
    created_at: Optional[str] = None
    published_at: Optional[str] = None
    body: Optional[str] = None
    asset_names: Tuple[str, ...] = field(default_factory=tuple)

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "UpstreamRelease":
        """Build from one JSON object of the releases listing.

        Raises KeyError, AttributeError or TypeError when ``data`` is not a release object.
        """
        author = data.get("author") or {}
        assets = data.get("assets") or []
        return cls(
            id=int(data["id"]),
            tag_name=data.get("tag_name") or "",
            html_url=data.get("html_url") or "",
            draft=bool(data.get("draft")),
            prerelease=bool(data.get("prerelease")),
            name=data.get("name"),
            author_login=author.get("login"),
            created_at=data.get("created_at"),
            published_at=data.get("published_at"),
            body=data.get("body"),
            asset_names=tuple(a.get("name") or "" for a in assets),
        )


@dataclass(frozen=True)
class CanonicalRelease:
    """One normalized, calendar-enriched release row. Identity is (repo, release_id)."""

    repo: str
    release_id: int
    tag_name: str
    release_name: str
    author: str
    created_at: str
    published_at: str
    is_draft: bool
    is_prerelease: bool
    body: str
    assets_count: int
    assets_names: str
    html_url: str
    published_weekday: str
    published_date: str
    published_year: str
    published_month: str
    published_week: int

    @property
    def key(self) -> Tuple[str, int]:
        return (self.repo, self.release_id)


# Column order of the persisted release table: (attribute, header title)
RELEASE_COLUMNS: List[Tuple[str, str]] = [
    ("repo", "Repo"),
    ("release_id", "ReleaseID"),
    ("tag_name", "Tag"),
    ("release_name", "ReleaseName"),
    ("author", "Author"),
    ("created_at", "CreatedAt"),
    ("published_at", "PublishedAt"),
    ("is_draft", "IsDraft"),
    ("is_prerelease", "IsPrerelease"),
    ("body", "Body"),
    ("assets_count", "AssetsCount"),
    ("assets_names", "AssetsNames"),
    ("html_url", "HtmlUrl"),
    ("published_weekday", "PublishedWeekday"),
    ("published_date", "PublishedDate"),
    ("published_year", "PublishedYear"),
    ("published_month", "PublishedMonth"),
    ("published_week", "PublishedWeek"),
]

# Column order of the period statistics table
PERIOD_STAT_COLUMNS: List[Tuple[str, str]] = [
    ("repo", "Repo"),
    ("type", "Type"),
    ("period", "Period"),
    ("count", "ReleaseCount"),
]
