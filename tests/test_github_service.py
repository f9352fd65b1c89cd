import dataclasses
import time

import requests

from conftest import FakeResponse, FakeSession
from release_dashboard.models import UpstreamRelease
from release_dashboard.services.github_service import fetch_all_releases, github_headers


def test_paginates_until_empty_page(settings, make_page):
    session = FakeSession({"acme/widgets": [make_page(1, 100), make_page(101, 100), make_page(201, 37)]})

    releases = fetch_all_releases("acme/widgets", settings, session=session)

    assert len(releases) == 237
    assert all(isinstance(r, UpstreamRelease) for r in releases)
    assert [r.id for r in releases] == list(range(1, 238))
    # pages 1..4; the 4th is empty and no 5th request is made
    assert [c["params"]["page"] for c in session.calls] == [1, 2, 3, 4]
    assert all(c["params"]["per_page"] == 100 for c in session.calls)
    assert session.calls[0]["url"] == "https://api.example.test/repos/acme/widgets/releases"


def test_empty_repository(settings):
    session = FakeSession({})
    assert fetch_all_releases("acme/widgets", settings, session=session) == []
    assert len(session.calls) == 1


def test_request_error_keeps_accumulated_pages(settings, make_page, caplog):
    session = FakeSession({"acme/widgets": [
        make_page(1, 100),
        requests.ConnectionError("connection reset"),
        make_page(201, 100),
    ]})

    releases = fetch_all_releases("acme/widgets", settings, session=session)

    assert len(releases) == 100
    assert len(session.calls) == 2
    assert "Error fetching releases from acme/widgets" in caplog.text


def test_http_error_status_stops_pagination(settings, make_page):
    session = FakeSession({"acme/widgets": [make_page(1, 5), FakeResponse({"message": "rate limited"}, 403)]})

    releases = fetch_all_releases("acme/widgets", settings, session=session)

    assert len(releases) == 5
    assert len(session.calls) == 2


def test_non_list_payload_is_treated_as_failure(settings):
    session = FakeSession({"acme/widgets": [FakeResponse({"message": "Not Found"})]})
    assert fetch_all_releases("acme/widgets", settings, session=session) == []


def test_expired_deadline_issues_no_request(settings, make_page):
    session = FakeSession({"acme/widgets": [make_page(1, 10)]})

    releases = fetch_all_releases("acme/widgets", settings, session=session, deadline=time.monotonic() - 1)

    assert releases == []
    assert session.calls == []


def test_deadline_caps_request_timeout(settings, make_page):
    session = FakeSession({"acme/widgets": [make_page(1, 3)]})

    fetch_all_releases("acme/widgets", settings, session=session, deadline=time.monotonic() + 5)

    assert all(c["timeout"] <= 5 for c in session.calls)


def test_bearer_token_is_attached_when_configured(settings, make_page):
    authed = dataclasses.replace(settings, token="s3cret")
    session = FakeSession({"acme/widgets": [make_page(1, 1)]})

    fetch_all_releases("acme/widgets", authed, session=session)

    assert all(c["headers"]["Authorization"] == "Bearer s3cret" for c in session.calls)


def test_no_token_sends_no_authorization_header():
    assert "Authorization" not in github_headers(None)
    assert github_headers("abc")["Authorization"] == "Bearer abc"


def test_malformed_item_ends_pagination_like_a_failed_request(settings, make_page, caplog):
    session = FakeSession({"acme/widgets": [make_page(1, 2), ["oops"], make_page(3, 2)]})

    releases = fetch_all_releases("acme/widgets", settings, session=session)

    assert [r.id for r in releases] == [1, 2]
    assert len(session.calls) == 2
    assert "malformed release item" in caplog.text


def test_item_without_id_is_malformed(settings):
    session = FakeSession({"acme/widgets": [[{"tag_name": "v1"}]]})
    assert fetch_all_releases("acme/widgets", settings, session=session) == []


def test_releases_are_appended_to_given_buffer(settings, make_page):
    session = FakeSession({"acme/widgets": [make_page(1, 2)]})
    buffer = []

    result = fetch_all_releases("acme/widgets", settings, session=session, into=buffer)

    assert result is buffer
    assert len(buffer) == 2
