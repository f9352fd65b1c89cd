"""Release ingestion batch and dashboard stats queries."""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout

from release_dashboard.services.github_service import fetch_all_releases
from release_dashboard.services.release_service import build_canonical_releases
from release_dashboard.visualizers.dashboard_visualizer import (
    compute_dashboard_stats, compute_period_stats,
)

logger = logging.getLogger(__name__)


def fetch_releases_by_repo(settings, session_factory=None):
    """Fetch every configured repository concurrently, bounded by settings.fetch_workers.

    Each repository paginates sequentially into its own buffer; buffers are
    returned in configured order once all fetches have finished. The overall
    ingest timeout is shared as one deadline across repositories; a repository
    still fetching when it expires keeps the pages that had arrived.

    Returns:
        list of (repo, [UpstreamRelease]) tuples.
    """
    deadline = None
    if settings.ingest_timeout:
        deadline = time.monotonic() + float(settings.ingest_timeout)

    repos = list(dict.fromkeys(settings.repos))
    if not repos:
        return []
    buffers = {repo: [] for repo in repos}

    def fetch_one(repo):
        session = session_factory() if session_factory else None
        return fetch_all_releases(repo, settings, session=session, deadline=deadline, into=buffers[repo])

    executor = ThreadPoolExecutor(max_workers=min(settings.fetch_workers, len(repos)))
    try:
        futures = {repo: executor.submit(fetch_one, repo) for repo in repos}
        results = []
        for repo in repos:
            timeout = None if deadline is None else max(deadline - time.monotonic(), 0)
            try:
                results.append((repo, futures[repo].result(timeout=timeout)))
            except FutureTimeout:
                partial = list(buffers[repo])
                logger.warning(f"Ingest timeout reached while fetching {repo}; keeping {len(partial)} releases")
                results.append((repo, partial))
        return results
    finally:
        executor.shutdown(wait=False, cancel_futures=True)


def ingest_releases(settings, table, session_factory=None, write_period_stats=True):
    """Run one ingestion batch: fetch, normalize, classify, persist.

    The release table is regenerated as a whole. Upstream failures only
    truncate the affected repository; an InvalidTimestamp aborts the batch
    before anything is written.

    Returns:
        list of CanonicalRelease that were written.
    """
    logger.info(f"Ingesting releases for {len(settings.repos)} repositories")
    releases_by_repo = fetch_releases_by_repo(settings, session_factory)
    records = build_canonical_releases(releases_by_repo, settings.timestamp_field)

    table.save_releases(records)
    if write_period_stats and table.stats_path is not None:
        table.save_period_stats(compute_period_stats(records, settings.workday_only))

    for repo, raw_releases in releases_by_repo:
        logger.info(f"{repo}: {len(raw_releases)} releases ingested")
    return records


def get_dashboard_stats(table, workday_only=True, repo=None, timestamp_field="published_at"):
    """Load the persisted table and compute the dashboard stats document.

    Raises:
        MalformedReleaseTable: if the table is missing or cannot be parsed.
    """
    releases = table.load_releases()
    return compute_dashboard_stats(
        releases, workday_only=workday_only, repo=repo, timestamp_field=timestamp_field,
    )
