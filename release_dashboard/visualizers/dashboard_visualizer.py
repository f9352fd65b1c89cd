"""Release aggregates for the dashboard: years, months, weekdays, types, top months, intervals.

Every aggregate takes a ``workday_only`` flag. When set, releases published on
Saturday or Sunday are dropped before counting, the same way for every view.
"""

from collections import Counter
from datetime import timezone

from release_dashboard.utils.calendar import (
    ALL_DAYS, WORKDAYS, is_workday, iso_week_label, parse_timestamp,
)

MONTHS = [f"{m:02d}" for m in range(1, 13)]

RELEASE_TYPES = ["Draft", "Prerelease", "Release"]

SECONDS_PER_DAY = 86400


def select_releases(releases, workday_only=False, repo=None):
    """Apply the workday filter and an optional repository filter."""
    selected = []
    for r in releases:
        if workday_only and not is_workday(r.published_weekday):
            continue
        if repo is not None and r.repo != repo:
            continue
        selected.append(r)
    return selected


def compute_year_stats(releases, workday_only=False):
    """Release count per year, ascending by year text."""
    counts = Counter(r.published_year for r in select_releases(releases, workday_only) if r.published_year)
    return [{"year": year, "count": counts[year]} for year in sorted(counts)]


def compute_month_stats(releases, year, workday_only=False):
    """Release count per month of ``year``: always 12 entries "01".."12", zero-filled."""
    counts = Counter(
        r.published_month.zfill(2)
        for r in select_releases(releases, workday_only)
        if r.published_year == year
    )
    return [{"month": m, "count": counts.get(m, 0)} for m in MONTHS]


def compute_weekday_stats(releases, workday_only=False):
    """Release count per weekday, Monday first, zero-filled.

    Monday..Friday in workday-only mode, Monday..Sunday otherwise.
    """
    order = WORKDAYS if workday_only else ALL_DAYS
    counts = Counter(r.published_weekday for r in select_releases(releases, workday_only))
    return [{"weekday": day, "count": counts.get(day, 0)} for day in order]


def release_type(release):
    """Draft wins over Prerelease, which wins over Release."""
    if release.is_draft:
        return "Draft"
    if release.is_prerelease:
        return "Prerelease"
    return "Release"


def compute_release_type_stats(releases, workday_only=False):
    counts = Counter(release_type(r) for r in select_releases(releases, workday_only))
    return [{"type": t, "count": counts.get(t, 0)} for t in RELEASE_TYPES]


def compute_top_months(releases, workday_only=False, limit=3):
    """Months of the year with the most releases across all years.

    Ranked by count descending, then month ascending; months without
    releases take part with count 0, so the result always has ``limit`` entries.
    """
    counts = Counter(r.published_month.zfill(2) for r in select_releases(releases, workday_only))
    ranked = sorted(MONTHS, key=lambda m: (-counts.get(m, 0), m))
    return [{"month": m, "count": counts.get(m, 0)} for m in ranked[:limit]]


def average_release_interval(releases, workday_only=False, timestamp_field="published_at"):
    """Mean gap in whole days between consecutive releases, rounded half up.

    Returns:
        int days, or None when fewer than two timestamps are available.
    """
    instants = []
    for r in select_releases(releases, workday_only):
        value = getattr(r, timestamp_field)
        if not value:
            continue
        dt = parse_timestamp(value, timestamp_field)
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        instants.append(dt.timestamp())

    if len(instants) < 2:
        return None
    instants.sort()
    avg_seconds = (instants[-1] - instants[0]) / (len(instants) - 1)
    return int(avg_seconds / SECONDS_PER_DAY + 0.5)


def compute_period_stats(releases, workday_only=False):
    """Per-repository Yearly, Weekly (ISO) and Daily release counts.

    Returns:
        list of {type, period, repo, count} sorted by (repo, type, period).
    """
    counts = Counter()
    for r in select_releases(releases, workday_only):
        counts[(r.repo, "Yearly", r.published_year)] += 1
        counts[(r.repo, "Weekly", iso_week_label(r.published_date))] += 1
        counts[(r.repo, "Daily", r.published_date)] += 1

    return [
        {"type": kind, "period": period, "repo": repo, "count": count}
        for (repo, kind, period), count in sorted(counts.items())
    ]


def compute_dashboard_stats(releases, workday_only=False, repo=None, timestamp_field="published_at"):
    """Assemble the stats document served to the dashboard."""
    data = select_releases(releases, workday_only, repo)
    all_years = sorted({r.published_year for r in data if r.published_year})

    # data is already filtered; only the weekday axis depends on the mode
    return {
        "allYears": all_years,
        "yearStats": compute_year_stats(data),
        "monthStats": {year: compute_month_stats(data, year) for year in all_years},
        "weekdayStats": compute_weekday_stats(data, workday_only),
        "releaseTypeStats": compute_release_type_stats(data),
        "top3Months": compute_top_months(data),
        "avgReleaseInterval": average_release_interval(data, timestamp_field=timestamp_field),
        "workdayOnly": workday_only,
        "repo": repo,
        "totalReleases": len(data),
    }
