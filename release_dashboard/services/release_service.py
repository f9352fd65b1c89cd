"""Upstream release -> canonical release row."""

from release_dashboard.errors import InvalidTimestamp
from release_dashboard.models import CanonicalRelease
from release_dashboard.utils.calendar import classify

ASSET_NAME_SEPARATOR = ";"


def normalize_release(repo, raw):
    """Map an UpstreamRelease to the canonical fields, without calendar fields.

    Missing name, author and body become empty text; asset names are joined
    with ';'.
    """
    return {
        "repo": repo,
        "release_id": raw.id,
        "tag_name": raw.tag_name,
        "release_name": raw.name if raw.name is not None else "",
        "author": raw.author_login if raw.author_login is not None else "",
        "created_at": raw.created_at if raw.created_at is not None else "",
        "published_at": raw.published_at if raw.published_at is not None else "",
        "is_draft": raw.draft,
        "is_prerelease": raw.prerelease,
        "body": raw.body if raw.body is not None else "",
        "assets_count": len(raw.asset_names),
        "assets_names": ASSET_NAME_SEPARATOR.join(raw.asset_names),
        "html_url": raw.html_url,
    }


def build_canonical_release(repo, raw, timestamp_field="published_at"):
    """Normalize and classify one upstream release.

    Raises:
        InvalidTimestamp: if the authoritative timestamp field is missing or unparseable.
    """
    fields = normalize_release(repo, raw)
    try:
        calendar = classify(getattr(raw, timestamp_field), timestamp_field)
    except InvalidTimestamp as e:
        raise InvalidTimestamp(e.value, timestamp_field, repo=repo, release_id=raw.id)

    return CanonicalRelease(
        published_weekday=calendar["weekday"],
        published_date=calendar["date"],
        published_year=calendar["year"],
        published_month=calendar["month"],
        published_week=calendar["week"],
        **fields,
    )


def build_canonical_releases(releases_by_repo, timestamp_field="published_at"):
    """Build canonical rows for every (repo, [UpstreamRelease]) pair, in order.

    Any InvalidTimestamp propagates: one bad record aborts the whole batch.
    """
    records = []
    for repo, raw_releases in releases_by_repo:
        for raw in raw_releases:
            records.append(build_canonical_release(repo, raw, timestamp_field))
    return records
