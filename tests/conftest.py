import pytest
import requests

from release_dashboard import create_app
from release_dashboard.config import DEFAULT_CONFIG, IngestSettings
from release_dashboard.database import ReleaseTable, reset_release_table
from release_dashboard.extensions import cache
from release_dashboard.models import UpstreamRelease
from release_dashboard.services.release_service import build_canonical_release


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    """Stands in for requests.Session: serves queued pages per repo and records calls."""

    def __init__(self, pages_by_repo):
        self.pages_by_repo = {repo: list(pages) for repo, pages in pages_by_repo.items()}
        self.calls = []
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": dict(params or {}), "headers": dict(headers or {}),
                           "timeout": timeout})
        repo = url.split("/repos/", 1)[1].rsplit("/releases", 1)[0]
        pages = self.pages_by_repo.get(repo, [])
        page = params["page"]
        item = pages[page - 1] if page <= len(pages) else []
        if isinstance(item, Exception):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse(item)

    def close(self):
        self.closed = True


def raw_release(release_id, published_at="2023-01-04T10:00:00Z", **overrides):
    """A release JSON object shaped like the GitHub releases listing."""
    data = {
        "id": release_id,
        "tag_name": f"v1.0.{release_id}",
        "name": f"Release {release_id}",
        "draft": False,
        "prerelease": False,
        "author": {"login": "octocat"},
        "created_at": published_at,
        "published_at": published_at,
        "body": "notes",
        "assets": [],
        "html_url": f"https://github.com/acme/widgets/releases/tag/v1.0.{release_id}",
    }
    data.update(overrides)
    return data


def canonical(repo="acme/widgets", release_id=1, published_at="2023-01-04T10:00:00Z", **overrides):
    """A CanonicalRelease built through the normalizer and classifier."""
    return build_canonical_release(repo, UpstreamRelease.from_api(raw_release(release_id, published_at, **overrides)))


@pytest.fixture
def make_page():
    def _make(start, count, published_at="2023-01-04T10:00:00Z"):
        return [raw_release(i, published_at) for i in range(start, start + count)]
    return _make


@pytest.fixture
def settings(tmp_path):
    return IngestSettings(
        repos=("acme/widgets",),
        api_base_url="https://api.example.test",
        ingest_timeout=None,
        raw_table_path=tmp_path / "release-raw.csv",
        stats_table_path=tmp_path / "release-stats.csv",
    )


@pytest.fixture
def table(tmp_path):
    return ReleaseTable(tmp_path / "release-raw.csv", tmp_path / "release-stats.csv")


@pytest.fixture
def app_config(tmp_path):
    config = dict(DEFAULT_CONFIG)
    config.update({
        "repos": ["acme/widgets", "acme/gadgets"],
        "raw_table_path": str(tmp_path / "release-raw.csv"),
        "stats_table_path": str(tmp_path / "release-stats.csv"),
        "workday_only": True,
    })
    return config


@pytest.fixture
def client(app_config):
    app = create_app(app_config)
    app.config["TESTING"] = True
    with app.test_client() as c:
        yield c
    cache.clear()
    reset_release_table()
