"""GitHub REST wrapper: paginated release listing with best-effort early termination."""

import logging
import time

import requests

from release_dashboard.errors import UpstreamRequestFailure
from release_dashboard.models import UpstreamRelease

logger = logging.getLogger(__name__)


def github_headers(token=None):
    """Request headers; the bearer token is attached only when configured."""
    headers = {"Accept": "application/vnd.github+json"}
    if token:
        headers["Authorization"] = f"Bearer {token}"
    return headers


def fetch_release_page(session, repo, page, settings, timeout=None):
    """Fetch one page of the releases listing.

    Returns:
        list of UpstreamRelease (empty list marks the end of pagination).

    Raises:
        UpstreamRequestFailure: on network errors, non-2xx status, a non-list
            body or an item that is not a release object.
    """
    url = f"{settings.api_base_url}/repos/{repo}/releases"
    try:
        response = session.get(
            url,
            params={"per_page": settings.per_page, "page": page},
            headers=github_headers(settings.token),
            timeout=timeout or settings.request_timeout,
        )
        response.raise_for_status()
        data = response.json()
    except (requests.RequestException, ValueError) as e:
        raise UpstreamRequestFailure(repo, page, e)

    if not isinstance(data, list):
        raise UpstreamRequestFailure(repo, page, f"unexpected payload type {type(data).__name__}")
    try:
        return [UpstreamRelease.from_api(item) for item in data]
    except (AttributeError, KeyError, TypeError, ValueError) as e:
        raise UpstreamRequestFailure(repo, page, f"malformed release item: {e}")


def fetch_all_releases(repo, settings, session=None, deadline=None, into=None):
    """Fetch every release of a repository, page by page, starting at page 1.

    Pages are requested strictly one after another until a page comes back
    empty. A failed request, or reaching ``deadline`` (a time.monotonic()
    value), stops pagination and returns what was accumulated so far; the
    failure is only logged. Callers must treat the result as possibly
    incomplete.

    Releases are appended to ``into`` when given, one whole page at a time,
    so another thread can read what has arrived so far.

    Returns:
        list of UpstreamRelease in arrival order.
    """
    own_session = session is None
    if own_session:
        session = requests.Session()

    releases = into if into is not None else []
    page = 1
    try:
        while True:
            timeout = settings.request_timeout
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.warning(
                        f"Ingest timeout reached for {repo} before page {page}; "
                        f"keeping {len(releases)} releases"
                    )
                    break
                timeout = min(timeout, remaining)

            try:
                data = fetch_release_page(session, repo, page, settings, timeout=timeout)
            except UpstreamRequestFailure as e:
                logger.warning(f"Error fetching releases from {repo}: {e}; keeping {len(releases)} releases")
                break

            if not data:
                break
            releases.extend(data)
            page += 1
    finally:
        if own_session:
            session.close()

    logger.info(f"Fetched {len(releases)} releases from {repo} ({page - 1} pages)")
    return releases
